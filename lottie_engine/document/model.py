"""Shapes of the Lottie JSON tree the editors rely on.

A node's meaning depends on its siblings: ``k`` can hold a static value, a
list of value keyframes or a list of text-document keyframes. The
classification below is the single place that tells them apart.
"""
from __future__ import annotations

import hashlib
import json
from enum import Enum, IntEnum
from typing import Any, Tuple

# Session-only layer attributes; never persisted, never handed to a player.
HIDDEN_FLAG = "_hidden"
ORIGINAL_END_FRAME = "_originalOp"
SESSION_FIELDS: Tuple[str, ...] = (HIDDEN_FLAG, ORIGINAL_END_FRAME)

ANIMATED_KEY = "a"
VALUE_KEY = "k"

# First-keyframe keys that mark a text-document keyframe list (style, time).
TEXT_KEYFRAME_MARKERS: Tuple[str, ...] = ("s", "t")


class LayerType(IntEnum):
    PRECOMP = 0
    SOLID = 1
    IMAGE = 2
    NULL = 3
    SHAPE = 4
    TEXT = 5
    AUDIO = 6
    CAMERA = 13

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


def layer_type_name(type_tag: Any) -> str:
    try:
        return LayerType(type_tag).display_name
    except ValueError:
        return f"Type {type_tag}"


def is_text_layer(node: Any) -> bool:
    return isinstance(node, dict) and node.get("ty") == LayerType.TEXT


class PropertyShape(str, Enum):
    """Tagged roles a ``{a?, k}`` node can play."""
    STATIC = "static"
    KEYFRAMED = "keyframed"
    TEXT_DOCUMENT = "text_document"
    UNREPAIRED = "unrepaired"
    NOT_A_PROPERTY = "not_a_property"


def is_text_document_keyframes(value: Any, markers: Tuple[str, ...] = TEXT_KEYFRAME_MARKERS) -> bool:
    """True when ``value`` looks like ``t.d.k``: a list of ``{s, t}`` entries."""
    if not isinstance(value, list) or not value:
        return False
    first = value[0]
    return isinstance(first, dict) and any(marker in first for marker in markers)


def classify_property(node: Any) -> PropertyShape:
    if not isinstance(node, dict) or VALUE_KEY not in node:
        return PropertyShape.NOT_A_PROPERTY
    if ANIMATED_KEY not in node:
        if is_text_document_keyframes(node[VALUE_KEY]):
            return PropertyShape.TEXT_DOCUMENT
        return PropertyShape.UNREPAIRED
    if node[ANIMATED_KEY] == 1:
        return PropertyShape.KEYFRAMED
    return PropertyShape.STATIC


def is_color_value(value: Any) -> bool:
    """A 3 or 4 item channel list with every channel within 0-1."""
    if not isinstance(value, list) or len(value) not in (3, 4):
        return False
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, (int, float)):
            return False
        if channel < 0 or channel > 1:
            return False
    return True


def fingerprint(document: Any) -> str:
    """Content digest used to tell whether a cached index still matches the tree."""
    if document is None:
        return "null"
    try:
        text = json.dumps(document, separators=(",", ":"), sort_keys=True)
    except (TypeError, ValueError):
        return "error"
    return hashlib.blake2b(text.encode("utf-8"), digest_size=16).hexdigest()
