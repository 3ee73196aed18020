import pytest

from lottie_engine.edit_transforms import apply_edits
from lottie_engine.errors import InvalidColor


def _sample_document():
    return {
        "v": "5.7.4",
        "fr": 30,
        "w": 100,
        "h": 100,
        "op": 60,
        "layers": [
            {"ty": 4, "nm": "Box", "ip": 0, "op": 60, "shapes": [{"ty": "fl", "c": {"a": 0, "k": [1, 0, 0, 1]}}]},
            {
                "ty": 5,
                "nm": "Title",
                "ip": 0,
                "op": 60,
                "t": {"d": {"k": [{"s": {"t": "Hello"}, "t": 0}, {"s": {"t": "Bye"}, "t": 30}]}},
            },
        ],
    }


def test_replace_color():
    document = _sample_document()
    new_document, patches = apply_edits(document, [{"action": "replace_color", "from": "#ff0000", "to": "#0000ff"}])
    assert new_document["layers"][0]["shapes"][0]["c"]["k"] == [0.0, 0.0, 1.0, 1]
    assert document["layers"][0]["shapes"][0]["c"]["k"] == [1, 0, 0, 1]
    assert patches == [{"op": "replace_color", "from": "#ff0000", "to": "#0000ff", "count": 1}]


def test_update_text_by_layer_and_keyframe():
    new_document, patches = apply_edits(
        _sample_document(), [{"action": "update_text", "layer_name": "Title", "keyframe": 1, "text": "Later"}]
    )
    assert new_document["layers"][1]["t"]["d"]["k"][1]["s"]["t"] == "Later"
    assert patches[0] == {"op": "update_text", "path": "layers[1].t.d.k[1]", "before": "Bye", "after": "Later"}


def test_update_text_by_span_index():
    new_document, _ = apply_edits(_sample_document(), [{"action": "update_text", "span": 0, "text": "Hi"}])
    assert new_document["layers"][1]["t"]["d"]["k"][0]["s"]["t"] == "Hi"


def test_hide_and_show_layer():
    new_document, patches = apply_edits(
        _sample_document(),
        [{"action": "hide_layer", "index": 0}, {"action": "show_layer", "index": 1}],
    )
    assert new_document["layers"][0]["_hidden"] is True
    assert new_document["layers"][1]["_hidden"] is False
    assert [p["op"] for p in patches] == ["hide_layer", "show_layer"]
    assert patches[0]["name"] == "Box"


def test_edits_apply_in_order():
    new_document, patches = apply_edits(
        _sample_document(),
        [
            {"action": "replace_color", "from": "#ff0000", "to": "#00ff00"},
            {"action": "replace_color", "from": "#00ff00", "to": "#000000"},
        ],
    )
    assert new_document["layers"][0]["shapes"][0]["c"]["k"][:3] == [0.0, 0.0, 0.0]
    assert [p["count"] for p in patches] == [1, 1]


@pytest.mark.parametrize(
    "edit,message",
    [
        ({"action": "explode"}, "Unsupported action"),
        ({}, "action is required"),
        ({"action": "replace_color", "from": "#ff0000"}, "from and to required"),
        ({"action": "update_text", "layer_name": "Missing", "text": "x"}, "not found"),
        ({"action": "update_text", "span": 9, "text": "x"}, "not found"),
        ({"action": "update_text", "span": 0}, "text required"),
        ({"action": "hide_layer"}, "index required"),
        ({"action": "hide_layer", "index": 7}, "Layer not found"),
    ],
)
def test_invalid_edits(edit, message):
    with pytest.raises(ValueError) as exc:
        apply_edits(_sample_document(), [edit])
    assert message in str(exc.value)


def test_invalid_color_is_a_value_error():
    with pytest.raises(InvalidColor):
        apply_edits(_sample_document(), [{"action": "replace_color", "from": "#ff0000", "to": "red"}])
