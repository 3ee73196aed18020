import copy

import pytest

from lottie_engine.editors.layer_visibility import (
    is_visible,
    layer_at,
    list_layers,
    materialize_for_persist,
    set_hidden,
    strip_session_fields,
    without_hidden_layers,
)


def _sample_document():
    return {
        "v": "5.7.4",
        "fr": 30,
        "w": 100,
        "h": 100,
        "ip": 0,
        "op": 90,
        "layers": [
            {"ty": 4, "nm": "Shape", "ip": 0, "op": 90},
            {"ty": 5, "nm": "Title", "ip": 10, "op": 80},
            {"ty": 0, "nm": "Group", "refId": "comp_0", "ip": 0, "op": 90},
            {"ty": 3, "ip": 0},
        ],
        "assets": [
            {"id": "comp_0", "layers": [{"ty": 1, "nm": "Inner", "ip": 5, "op": 45}]},
        ],
    }


def test_hide_then_show_restores_end_frame():
    layer = {"ty": 4, "ip": 0, "op": 90}
    set_hidden(layer, True)
    assert layer["_hidden"] is True
    assert layer["_originalOp"] == 90
    assert layer["op"] == 90

    set_hidden(layer, False)
    assert layer["op"] == 90
    assert layer["_hidden"] is False


def test_original_end_frame_captured_once():
    layer = {"ty": 4, "ip": 0, "op": 90}
    set_hidden(layer, True)
    layer["op"] = 0
    set_hidden(layer, True)
    set_hidden(layer, False)
    assert layer["op"] == 90


def test_showing_a_never_hidden_layer_tracks_later_end_frame_changes():
    layer = {"ty": 4, "ip": 0, "op": 90}
    set_hidden(layer, False)
    assert "_originalOp" not in layer

    layer["op"] = 120
    set_hidden(layer, True)
    set_hidden(layer, False)
    assert layer["op"] == 120


def test_missing_end_frame_uses_default():
    layer = {"ty": 3, "ip": 0}
    set_hidden(layer, True, default_op=120)
    assert layer["_originalOp"] == 120
    assert "op" not in layer


def test_visibility_rules():
    assert is_visible({"ip": 0, "op": 10})
    assert not is_visible({"ip": 10, "op": 10})
    assert not is_visible({"ip": 0, "op": 10, "_hidden": True})
    assert is_visible({"ip": 10, "op": 10, "_hidden": False})
    assert is_visible({"ip": 0})
    assert not is_visible({"ip": 90}, document_op=60)


def test_list_layers():
    document = _sample_document()
    set_hidden(document["layers"][1], True)
    summaries = [layer.to_dict() for layer in list_layers(document)]
    assert summaries[0] == {"index": 0, "path": "layers[0]", "name": "Shape", "type": "Shape", "visible": True}
    assert summaries[1]["visible"] is False
    assert summaries[2]["type"] == "Precomp"
    assert summaries[3]["name"] == "Layer 4"
    assert summaries[3]["type"] == "Null"


def test_materialize_collapses_hidden_layers():
    document = _sample_document()
    set_hidden(document["layers"][1], True)
    set_hidden(document["assets"][0]["layers"][0], True)
    snapshot = copy.deepcopy(document)

    persisted = materialize_for_persist(document)

    assert persisted["layers"][1]["op"] == 10
    assert persisted["assets"][0]["layers"][0]["op"] == 5
    assert persisted["layers"][0]["op"] == 90
    assert "_hidden" not in persisted["layers"][1]
    assert "_originalOp" not in persisted["layers"][1]
    assert document == snapshot


def test_materialize_is_idempotent():
    document = _sample_document()
    set_hidden(document["layers"][0], True)
    once = materialize_for_persist(document)
    assert materialize_for_persist(once) == once


def test_shown_layer_persists_with_original_end_frame():
    document = _sample_document()
    set_hidden(document["layers"][1], True)
    set_hidden(document["layers"][1], False)
    persisted = materialize_for_persist(document)
    assert persisted["layers"][1] == {"ty": 5, "nm": "Title", "ip": 10, "op": 80}


def test_without_hidden_layers_drops_them_from_every_list():
    document = _sample_document()
    set_hidden(document["layers"][0], True)
    set_hidden(document["assets"][0]["layers"][0], True)

    preview = without_hidden_layers(document)

    assert [layer.get("nm") for layer in preview["layers"]] == ["Title", "Group", None]
    assert preview["assets"][0]["layers"] == []
    assert len(document["layers"]) == 4


def test_strip_session_fields_is_recursive():
    node = {"_hidden": True, "layers": [{"_originalOp": 3, "nm": "x"}]}
    assert strip_session_fields(node) == {"layers": [{"nm": "x"}]}


def test_layer_at_out_of_range():
    with pytest.raises(IndexError):
        layer_at(_sample_document(), 10)
