"""Hex / channel color conversions."""
from __future__ import annotations

import math
import re
from typing import Sequence, Tuple

from lottie_engine.errors import InvalidColor
from lottie_engine.utils.config import settings

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def is_hex_color(value: object) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR_RE.match(value.strip()))


def normalize_hex(value: str) -> str:
    """Return ``value`` as lowercase ``#rrggbb``."""
    match = HEX_COLOR_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidColor(value)
    return "#" + "".join(match.groups()).lower()


def hex_to_channels(value: str) -> Tuple[float, float, float]:
    match = HEX_COLOR_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidColor(value)
    r, g, b = (int(part, 16) / 255 for part in match.groups())
    return r, g, b


def _to_byte(channel: float) -> int:
    return int(round(min(1.0, max(0.0, float(channel))) * 255))


def channels_to_hex(channels: Sequence[float]) -> str:
    r, g, b = (_to_byte(c) for c in channels[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def colors_match(color: Sequence[float], target: Sequence[float], tolerance: float | None = None) -> bool:
    tol = settings.color_tolerance if tolerance is None else tolerance
    return all(abs(float(color[i]) - float(target[i])) < tol for i in range(3))


def color_distance(first: str, second: str) -> float:
    """Euclidean distance between two hex colors in 0-1 RGB space."""
    try:
        a = hex_to_channels(first)
        b = hex_to_channels(second)
    except InvalidColor:
        return math.inf
    return math.sqrt(sum((a[i] - b[i]) ** 2 for i in range(3)))
