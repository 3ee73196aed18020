"""Repair animatable properties before a document reaches a player.

Players require every ``{k: ...}`` property to carry the ``a`` (animated)
discriminator. Exporters sometimes omit it; the missing value is always
"not animated". Text-document keyframe lists (``t.d.k``) have the same
``k`` shape but no discriminator by definition and must stay untouched.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Tuple

from lottie_engine.document.model import (
    ANIMATED_KEY,
    VALUE_KEY,
    PropertyShape,
    classify_property,
    is_text_layer,
)
from lottie_engine.editors.layer_visibility import without_hidden_layers

logger = logging.getLogger(__name__)

TRANSFORM_KEYS: Tuple[str, ...] = ("o", "r", "p", "a", "s", "t", "sk", "sa", "sc", "sw", "rx", "ry", "rz", "or")
SHAPE_PROPERTY_KEYS: Tuple[str, ...] = ("p", "s", "c", "o")


def _mark_static(node: Any) -> int:
    if classify_property(node) is PropertyShape.UNREPAIRED:
        node[ANIMATED_KEY] = 0
        return 1
    return 0


def _repair_transform(transform: Dict[str, Any]) -> int:
    repaired = 0
    for key in TRANSFORM_KEYS:
        prop = transform.get(key)
        if not isinstance(prop, dict):
            continue
        repaired += _mark_static(prop)
        frames = prop.get(VALUE_KEY)
        if isinstance(frames, list):
            for keyframe in frames:
                if isinstance(keyframe, dict) and isinstance(keyframe.get("s"), dict):
                    repaired += _mark_static(keyframe["s"])
    return repaired


def _repair_shapes(shapes: list) -> int:
    repaired = 0
    for shape in shapes:
        if not isinstance(shape, dict):
            continue
        for key in SHAPE_PROPERTY_KEYS:
            prop = shape.get(key)
            if isinstance(prop, dict):
                repaired += _mark_static(prop)
    return repaired


def normalize_in_place(document: Any) -> int:
    """Add missing discriminators throughout ``document``; returns how many."""
    repaired = 0
    stack = [document]
    while stack:
        node = stack.pop()
        if isinstance(node, list):
            stack.extend(item for item in node if isinstance(item, (dict, list)))
            continue
        if not isinstance(node, dict):
            continue
        repaired += _mark_static(node)
        if isinstance(node.get("ks"), dict):
            repaired += _repair_transform(node["ks"])
        if isinstance(node.get("shapes"), list):
            repaired += _repair_shapes(node["shapes"])
        stack.extend(value for value in node.values() if isinstance(value, (dict, list)))
    if repaired:
        logger.debug("Added %d missing animated discriminators", repaired)
    return repaired


def normalize(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return a repaired deep copy of ``document``."""
    result = copy.deepcopy(document)
    normalize_in_place(result)
    return result


def _ensure_text_layer_blocks(document: Dict[str, Any]) -> None:
    for layer in document.get("layers") or []:
        if not is_text_layer(layer) or not isinstance(layer.get("t"), dict):
            continue
        text = layer["t"]
        if not text.get("p"):
            text["p"] = {}
        if not text.get("m"):
            text["m"] = {"g": 1, "a": {"a": 0, "k": [0, 0], "ix": 2}}
        if not text.get("a"):
            text["a"] = []


def prepare_for_playback(document: Dict[str, Any]) -> Dict[str, Any]:
    """Copy handed to a player: no session fields, no hidden layers, repaired."""
    result = without_hidden_layers(document)
    _ensure_text_layer_blocks(result)
    normalize_in_place(result)
    return result
