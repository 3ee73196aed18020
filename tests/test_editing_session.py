import json

import pytest

from lottie_engine.codec import LottieFormat, compress, decompress
from lottie_engine.errors import EmptyInput, FileTooLarge, InvalidColor, MalformedJson, StaleReference
from lottie_engine.services.editing_session import EditingSession
from lottie_engine.services.render_scheduler import DebouncedScheduler, ImmediateScheduler


def _sample_document():
    return {
        "v": "5.7.4",
        "fr": 30,
        "w": 100,
        "h": 100,
        "ip": 0,
        "op": 60,
        "layers": [
            {
                "ty": 4,
                "nm": "Box",
                "ip": 0,
                "op": 60,
                "ks": {"o": {"k": 100}},
                "shapes": [{"ty": "fl", "c": {"a": 0, "k": [1, 0, 0, 1]}}],
            },
            {
                "ty": 5,
                "nm": "Title",
                "ip": 0,
                "op": 60,
                "t": {"d": {"k": [{"s": {"t": "Hello", "fc": [0, 0, 1]}, "t": 0}]}},
            },
        ],
    }


def _sample_bytes():
    return json.dumps(_sample_document()).encode("utf-8")


@pytest.fixture
def session():
    return EditingSession.open(_sample_bytes(), "hero.json", scheduler=ImmediateScheduler())


def test_open_plain_and_compressed():
    plain = EditingSession.open(_sample_bytes(), "hero.json")
    assert plain.format is LottieFormat.PLAIN
    packed = EditingSession.open(compress(_sample_bytes()), "hero.lottie")
    assert packed.format is LottieFormat.COMPRESSED
    assert packed.document == plain.document


def test_open_rejects_bad_input():
    with pytest.raises(EmptyInput):
        EditingSession.open(b"", "empty.json")
    with pytest.raises(MalformedJson):
        EditingSession.open(b"{oops", "broken.json")


def test_open_rejects_oversized_files(monkeypatch):
    from lottie_engine.utils.config import settings

    monkeypatch.setattr(settings, "max_file_size_mb", 1)
    with pytest.raises(FileTooLarge):
        EditingSession.open(b" " * (1024 * 1024 + 1), "huge.json")


def test_color_edit_and_undo(session):
    assert session.colors() == ["#0000ff", "#ff0000"]
    assert session.replace_color("#ff0000", "#00ff00") == 1
    assert session.colors() == ["#0000ff", "#00ff00"]
    assert session.dirty

    assert session.undo()
    assert session.colors() == ["#0000ff", "#ff0000"]
    assert session.redo()
    assert session.colors() == ["#0000ff", "#00ff00"]


def test_unmatched_color_records_nothing(session):
    assert session.replace_color("#123456", "#00ff00") == 0
    assert not session.can_undo()


def test_text_edit_goes_stale_after_undo(session):
    span = session.text_spans()[0]
    session.update_text(span, "Hi there")
    assert session.text_spans()[0].text == "Hi there"

    session.undo()
    assert session.text_spans()[0].text == "Hello"
    with pytest.raises(StaleReference):
        session.update_text(span, "Again")


def test_hide_layer_persists_as_zero_duration(session):
    session.set_layer_hidden(0, True)
    assert [layer.visible for layer in session.layers()] == [False, True]
    assert [layer["nm"] for layer in session.preview_document()["layers"]] == ["Title"]

    result = session.persist()
    saved = json.loads(result.content)
    assert saved["layers"][0]["op"] == saved["layers"][0]["ip"] == 0
    assert "_hidden" not in saved["layers"][0]
    assert saved["layers"][0]["ks"]["o"]["a"] == 0
    assert session.document["layers"][0]["op"] == 60
    assert not session.dirty


def test_hide_then_show_round_trips(session):
    session.set_layer_hidden(1, True)
    session.set_layer_hidden(1, False)
    saved = json.loads(session.persist().content)
    assert saved["layers"][1]["op"] == 60


def test_compressed_session_persists_compressed():
    session = EditingSession.open(compress(_sample_bytes()), "hero.lottie", scheduler=ImmediateScheduler())
    session.replace_color("#ff0000", "#00ff00")
    result = session.persist()
    assert result.format is LottieFormat.COMPRESSED
    assert result.filename == "hero.lottie"
    saved = json.loads(decompress(result.content))
    assert saved["layers"][0]["shapes"][0]["c"]["k"][:3] == [0.0, 1.0, 0.0]


def test_metadata_edits(session):
    assert session.set_speed(12) == 5.0
    assert session.set_background("#ABCDEF") == "#abcdef"
    with pytest.raises(InvalidColor):
        session.set_background("blue")
    report = session.set_interactions([{"type": "click"}, {"type": "bogus"}])
    assert len(report.rules) == 1 and len(report.dropped) == 1

    record = session.persist().metadata
    assert record == {
        "backgroundColor": "#abcdef",
        "speed": 5.0,
        "interactions": [{"enabled": True, "type": "click", "action": "play"}],
    }

    session.undo()
    assert session.metadata.background_color is None
    assert session.metadata.speed == 5.0


def test_open_with_metadata_record():
    session = EditingSession.open(
        _sample_bytes(), "hero.json", metadata={"backgroundColor": "#000000", "speed": 0.01}
    )
    assert session.metadata.background_color == "#000000"
    assert session.metadata.speed == 0.1


def test_renders_are_debounced():
    now = [0.0]
    renders = []
    session = EditingSession.open(
        _sample_bytes(),
        "hero.json",
        scheduler=DebouncedScheduler(window_ms=50, clock=lambda: now[0]),
        renderer=lambda document, metadata: renders.append(document),
    )
    for color in ("#ee0000", "#dd0000", "#cc0000"):
        previous = session.colors()[1]
        session.replace_color(previous, color)

    assert renders == []
    now[0] = 1.0
    session.scheduler.poll()
    assert len(renders) == 1
    assert renders[0]["layers"][0]["shapes"][0]["c"]["k"][0] == pytest.approx(0xCC / 255)


def test_apply_palette_color(session):
    assert session.apply_palette_color("#ee1111") == "#ff0000"
    assert "#ee1111" in session.colors()
    assert session.can_undo()
