"""Interaction rule schema and normalization.

Rules are stored next to the animation, not inside it, as a JSON array of
``{type, enabled, ...}`` objects. Normalization is lenient about the list and
strict about each rule: anything unknown or out of range is dropped, never
coerced into a guessed-valid rule.
"""
from __future__ import annotations

import json
import math
import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, ValidationError, field_validator

from lottie_engine.errors import UnsupportedTrigger
from lottie_engine.utils.colors import is_hex_color, normalize_hex
from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)

RULE_TYPES = ("scroll", "click", "hover", "link")
# Older records stored link rules as "url".
TYPE_ALIASES = {"url": "link"}

PlaybackAction = Literal["play", "pause", "restart"]
INVALID_RULE = "INVALID_RULE"


class _RuleBase(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True, populate_by_name=True, frozen=True)

    enabled: bool = True


class ScrollRule(_RuleBase):
    type: Literal["scroll"] = "scroll"
    trigger: Literal["onScroll", "onViewport", "onScrollProgress"] = "onScroll"
    offset: float = Field(default=0.0, ge=0, le=1)
    direction: Literal["forward", "backward", "both"] = "forward"


class ClickRule(_RuleBase):
    type: Literal["click"] = "click"
    action: Literal["play", "pause", "toggle", "restart"] = "play"


class HoverRule(_RuleBase):
    type: Literal["hover"] = "hover"
    on_enter: PlaybackAction = Field(default="play", alias="onEnter")
    on_leave: PlaybackAction = Field(default="pause", alias="onLeave")


class LinkRule(_RuleBase):
    type: Literal["link"] = "link"
    url: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    target: Literal["_self", "_blank", "_parent", "_top"] = "_self"
    layer_name: Optional[str] = Field(default=None, alias="layerName")

    @field_validator("url")
    @classmethod
    def _reject_script_urls(cls, value: str) -> str:
        if value.lower().replace(" ", "").startswith(("javascript:", "vbscript:", "data:")):
            raise ValueError("script URLs are not allowed")
        return value

    @field_validator("layer_name", mode="before")
    @classmethod
    def _blank_layer_name(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


InteractionRule = Annotated[
    Union[ScrollRule, ClickRule, HoverRule, LinkRule],
    Field(discriminator="type"),
]

_RULE_ADAPTER: TypeAdapter = TypeAdapter(InteractionRule)


@dataclass
class DroppedRule:
    index: int
    code: str
    reason: str
    raw: Any = None


@dataclass
class NormalizationReport:
    rules: List[Any] = field(default_factory=list)
    dropped: List[DroppedRule] = field(default_factory=list)


def _load(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return []
        return json.loads(raw)
    return raw


def _drop(report: NormalizationReport, index: int, code: str, reason: str, raw: Any) -> None:
    logger.warning("Dropping interaction rule %d (%s): %s", index, code, reason)
    report.dropped.append(DroppedRule(index=index, code=code, reason=reason, raw=raw))


def normalize_rules_with_report(raw: Any) -> NormalizationReport:
    """Validate a raw rule list, keeping the valid rules in order."""
    report = NormalizationReport()
    if raw is None:
        return report
    try:
        items = _load(raw)
    except ValueError as exc:
        _drop(report, -1, INVALID_RULE, f"interaction list is not valid JSON: {exc}", raw)
        return report
    if not isinstance(items, list):
        _drop(report, -1, INVALID_RULE, "interaction list must be an array", raw)
        return report

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            _drop(report, index, INVALID_RULE, "rule must be an object", item)
            continue
        rule_type = item.get("type")
        rule_type = TYPE_ALIASES.get(rule_type, rule_type) if isinstance(rule_type, str) else rule_type
        if rule_type not in RULE_TYPES:
            error = UnsupportedTrigger(f"Unsupported interaction type {rule_type!r}")
            _drop(report, index, error.code, error.message, item)
            continue
        try:
            rule = _RULE_ADAPTER.validate_python({**item, "type": rule_type})
        except ValidationError as exc:
            fields = {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
            code = UnsupportedTrigger.code if "trigger" in fields else INVALID_RULE
            _drop(report, index, code, "; ".join(err["msg"] for err in exc.errors()), item)
            continue
        report.rules.append(rule)
    return report


def normalize_rules(raw: Any) -> List[Any]:
    return normalize_rules_with_report(raw).rules


def dump_rules(rules: List[Any]) -> List[Dict[str, Any]]:
    """Serialize rules with the camelCase keys used in storage."""
    return [rule.model_dump(by_alias=True, exclude_none=True) for rule in rules]


class AnimationMetadata(BaseModel):
    """Playback settings stored beside an animation, never inside it."""

    model_config = ConfigDict(populate_by_name=True)

    background_color: Optional[str] = Field(default=None, alias="backgroundColor")
    speed: float = 1.0
    interactions: List[InteractionRule] = Field(default_factory=list)

    @field_validator("background_color", mode="before")
    @classmethod
    def _coerce_background(cls, value: Any) -> Optional[str]:
        if value is None or not is_hex_color(value):
            return None
        return normalize_hex(value)

    @field_validator("speed", mode="before")
    @classmethod
    def _clamp_speed(cls, value: Any) -> float:
        return clamp_speed(value)

    @field_validator("interactions", mode="before")
    @classmethod
    def _normalize_interactions(cls, value: Any) -> List[Any]:
        if isinstance(value, list) and all(isinstance(rule, BaseModel) for rule in value):
            return value
        return normalize_rules(value)

    def to_record(self) -> Dict[str, Any]:
        return {
            "backgroundColor": self.background_color,
            "speed": self.speed,
            "interactions": dump_rules(self.interactions),
        }


def clamp_speed(value: Any) -> float:
    """Clamp a playback speed into the configured range; junk becomes 1.0."""
    if isinstance(value, bool):
        return 1.0
    try:
        speed = float(value)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(speed):
        return 1.0
    return min(settings.speed_max, max(settings.speed_min, speed))
