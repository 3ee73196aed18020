import copy

import pytest

from lottie_engine.editors.text_editor import extract_text_spans, update_text
from lottie_engine.errors import StaleReference


def _text_layer(name, frames):
    layer = {"ty": 5, "ip": 0, "op": 60, "t": {"d": {"k": frames}}}
    if name is not None:
        layer["nm"] = name
    return layer


def _keyframe(text, time):
    return {"s": {"t": text, "s": 36, "f": "Inter", "fc": [0, 0, 0]}, "t": time}


def _sample_document():
    return {
        "v": "5.7.4",
        "fr": 30,
        "w": 100,
        "h": 100,
        "layers": [
            {"ty": 4, "nm": "Background", "shapes": []},
            _text_layer("Headline", [_keyframe("Hello", 0), _keyframe("World", 30)]),
            _text_layer(None, [_keyframe("Untitled", 0)]),
        ],
        "assets": [
            {"id": "comp_0", "layers": [_text_layer("Caption", {"s": {"t": "Inside", "s": 12}})]},
        ],
    }


def test_extract_one_span_per_keyframe():
    spans = extract_text_spans(_sample_document())
    assert [(s.layer_name, s.keyframe_index, s.text) for s in spans] == [
        ("Headline", 0, "Hello"),
        ("Headline", 1, "World"),
        ("Text Layer 2", 0, "Untitled"),
        ("Caption", 0, "Inside"),
    ]
    assert spans[0].is_keyframed
    assert not spans[3].is_keyframed
    assert spans[3].layer_path == ("assets", 0, "layers", 0)


def test_update_text_writes_through():
    document = _sample_document()
    span = extract_text_spans(document)[1]

    updated = update_text(document, span, "Everyone")

    assert document["layers"][1]["t"]["d"]["k"][1]["s"]["t"] == "Everyone"
    assert document["layers"][1]["t"]["d"]["k"][0]["s"]["t"] == "Hello"
    assert updated.text == "Everyone"
    assert updated.keyframe_index == 1


def test_update_static_text_document():
    document = _sample_document()
    span = extract_text_spans(document)[-1]
    update_text(document, span, "Changed")
    assert document["assets"][0]["layers"][0]["t"]["d"]["k"]["s"]["t"] == "Changed"


def test_update_text_accepts_empty_and_unicode():
    document = _sample_document()
    span = extract_text_spans(document)[0]
    update_text(document, span, "")
    assert extract_text_spans(document)[0].text == ""
    update_text(document, extract_text_spans(document)[0], "こんにちは")
    assert extract_text_spans(document)[0].text == "こんにちは"


def test_stale_span_after_layer_replaced():
    document = _sample_document()
    span = extract_text_spans(document)[0]
    document["layers"][1] = copy.deepcopy(document["layers"][1])
    before = copy.deepcopy(document)

    with pytest.raises(StaleReference):
        update_text(document, span, "Nope")
    assert document == before


def test_stale_span_after_keyframe_removed():
    document = _sample_document()
    span = extract_text_spans(document)[1]
    document["layers"][1]["t"]["d"]["k"].pop()
    with pytest.raises(StaleReference):
        update_text(document, span, "Nope")


def test_update_text_requires_string():
    document = _sample_document()
    span = extract_text_spans(document)[0]
    with pytest.raises(TypeError):
        update_text(document, span, 42)
