import json

from lottie_engine.interactions.rules import (
    AnimationMetadata,
    ClickRule,
    HoverRule,
    LinkRule,
    ScrollRule,
    clamp_speed,
    dump_rules,
    normalize_rules,
    normalize_rules_with_report,
)


def test_defaults_are_filled():
    rules = normalize_rules([{"type": "scroll"}, {"type": "click"}, {"type": "hover"}])
    scroll, click, hover = rules
    assert isinstance(scroll, ScrollRule)
    assert (scroll.trigger, scroll.offset, scroll.direction, scroll.enabled) == ("onScroll", 0.0, "forward", True)
    assert isinstance(click, ClickRule) and click.action == "play"
    assert isinstance(hover, HoverRule)
    assert (hover.on_enter, hover.on_leave) == ("play", "pause")


def test_camel_case_fields_and_url_alias():
    rules = normalize_rules(
        [
            {"type": "hover", "onEnter": "restart", "onLeave": "play"},
            {"type": "url", "url": " https://example.com ", "target": "_blank", "layerName": "Button"},
        ]
    )
    assert rules[0].on_enter == "restart"
    assert isinstance(rules[1], LinkRule)
    assert rules[1].url == "https://example.com"
    assert rules[1].layer_name == "Button"


def test_accepts_json_string():
    raw = json.dumps([{"type": "click", "action": "toggle"}])
    assert normalize_rules(raw)[0].action == "toggle"


def test_invalid_rules_are_dropped_not_coerced():
    report = normalize_rules_with_report(
        [
            {"type": "scroll", "trigger": "onWheel"},
            {"type": "scroll", "offset": 1.5},
            {"type": "scroll", "offset": "0.5"},
            {"type": "click", "action": "explode"},
            {"type": "link"},
            {"type": "link", "url": "   "},
            {"type": "link", "url": "javascript:alert(1)"},
            {"type": "keyboard"},
            "click",
            {"type": "click", "action": "pause"},
        ]
    )
    assert [rule.type for rule in report.rules] == ["click"]
    assert [d.index for d in report.dropped] == [0, 1, 2, 3, 4, 5, 6, 7, 8]
    assert report.dropped[0].code == "UNSUPPORTED_TRIGGER"
    assert report.dropped[7].code == "UNSUPPORTED_TRIGGER"
    assert report.dropped[1].code == "INVALID_RULE"


def test_unparseable_list_yields_no_rules():
    report = normalize_rules_with_report("{not json")
    assert report.rules == []
    assert report.dropped[0].code == "INVALID_RULE"
    assert normalize_rules({"type": "click"}) == []
    assert normalize_rules(None) == []
    assert normalize_rules("") == []


def test_disabled_rules_are_kept():
    rules = normalize_rules([{"type": "click", "enabled": False}])
    assert rules[0].enabled is False


def test_dump_rules_uses_storage_keys():
    rules = normalize_rules(
        [
            {"type": "hover"},
            {"type": "link", "url": "https://example.com", "layerName": ""},
        ]
    )
    assert dump_rules(rules) == [
        {"enabled": True, "type": "hover", "onEnter": "play", "onLeave": "pause"},
        {"enabled": True, "type": "link", "url": "https://example.com", "target": "_self"},
    ]


def test_speed_is_clamped():
    assert clamp_speed(10) == 5.0
    assert clamp_speed(0) == 0.1
    assert clamp_speed("2.5") == 2.5
    assert clamp_speed("fast") == 1.0
    assert clamp_speed(None) == 1.0
    assert clamp_speed(float("nan")) == 1.0


def test_metadata_record():
    metadata = AnimationMetadata.model_validate(
        {"backgroundColor": "#FFAA00", "speed": "9", "interactions": [{"type": "click"}, {"type": "nope"}]}
    )
    assert metadata.background_color == "#ffaa00"
    assert metadata.speed == 5.0
    assert metadata.to_record() == {
        "backgroundColor": "#ffaa00",
        "speed": 5.0,
        "interactions": [{"enabled": True, "type": "click", "action": "play"}],
    }


def test_metadata_drops_invalid_background():
    assert AnimationMetadata(backgroundColor="tomato").background_color is None
    assert AnimationMetadata().to_record() == {"backgroundColor": None, "speed": 1.0, "interactions": []}
