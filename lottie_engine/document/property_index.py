"""Depth-bounded traversal shared by the editors.

The walk visits dicts and lists, asks a predicate about every ``key: value``
pair and records the owner node of each match. Branches deeper than the
depth bound are skipped rather than failing the whole walk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from lottie_engine.document.handles import Path, PathStep, walk_path
from lottie_engine.document.model import VALUE_KEY, is_color_value, is_text_layer
from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)

# color, stroke color, fill color, text stroke color
COLOR_KEYS: Tuple[str, ...] = ("c", "s", "fc", "sc")
# keyframe values that hold a color inside an animated color track
KEYFRAME_VALUE_KEYS: Tuple[str, ...] = ("s", "e")
# siblings that mark a transform, where ``s`` is scale
TRANSFORM_SIBLINGS: Tuple[str, ...] = ("a", "p", "r", "o")

# (suffix from parent to owner, key on owner)
PredicateHit = Tuple[Path, str]
Predicate = Callable[[Dict[str, Any], PathStep, Any], List[PredicateHit]]


@dataclass
class PropertyMatch:
    path: Path
    owner: Dict[str, Any]
    key: str


def _is_keyframe(node: Dict[str, Any]) -> bool:
    return "t" in node and any(key in node for key in KEYFRAME_VALUE_KEYS)


def _is_transform(node: Dict[str, Any]) -> bool:
    return node.get("ty") == "tr" or any(key in node for key in TRANSFORM_SIBLINGS)


def color_predicate(parent: Dict[str, Any], key: PathStep, value: Any) -> List[PredicateHit]:
    """Match ``c``/``s``/``fc``/``sc`` holding a color.

    The color sits directly on the key, under a static ``k``, or in the
    ``s``/``e`` values of an animated track's keyframes. A bare ``s`` inside
    keyframes or transforms is a start value or a scale and never matches.
    """
    if key not in COLOR_KEYS:
        return []
    if key == "s" and (_is_keyframe(parent) or _is_transform(parent)):
        return []
    if is_color_value(value):
        return [((), str(key))]
    if not isinstance(value, dict):
        return []
    frames = value.get(VALUE_KEY)
    if is_color_value(frames):
        return [((key,), VALUE_KEY)]
    hits: List[PredicateHit] = []
    if isinstance(frames, list):
        for index, frame in enumerate(frames):
            if not isinstance(frame, dict) or not _is_keyframe(frame):
                continue
            for frame_key in KEYFRAME_VALUE_KEYS:
                if is_color_value(frame.get(frame_key)):
                    hits.append(((key, VALUE_KEY, index), frame_key))
    return hits


def find_properties(document: Any, predicate: Predicate, max_depth: Optional[int] = None) -> List[PropertyMatch]:
    limit = settings.max_traversal_depth if max_depth is None else max_depth
    matches: List[PropertyMatch] = []

    def _walk(node: Any, path: Path, depth: int) -> None:
        if depth > limit:
            logger.debug("Traversal depth limit reached at %s", path)
            return
        if isinstance(node, dict):
            for key, value in list(node.items()):
                hits = predicate(node, key, value)
                if hits:
                    for suffix, owner_key in hits:
                        owner = walk_path(node, suffix) if suffix else node
                        matches.append(PropertyMatch(path=path + suffix, owner=owner, key=owner_key))
                    continue
                if isinstance(value, (dict, list)):
                    _walk(value, path + (key,), depth + 1)
        elif isinstance(node, list):
            for index, item in enumerate(node):
                if isinstance(item, (dict, list)):
                    _walk(item, path + (index,), depth + 1)

    _walk(document, (), 0)
    return matches


def _iter_layer_list(layers: Any, path: Path, depth: int, limit: int) -> Iterator[Tuple[Path, Dict[str, Any]]]:
    if not isinstance(layers, list) or depth > limit:
        return
    for index, layer in enumerate(layers):
        if not isinstance(layer, dict):
            continue
        layer_path = path + (index,)
        yield layer_path, layer
        yield from _iter_layer_list(layer.get("layers"), layer_path + ("layers",), depth + 2, limit)


def iter_layers(document: Any, max_depth: Optional[int] = None) -> Iterator[Tuple[Path, Dict[str, Any]]]:
    """Yield ``(path, layer)`` for root, nested and precomp asset layers."""
    if not isinstance(document, dict):
        return
    limit = settings.max_traversal_depth if max_depth is None else max_depth
    yield from _iter_layer_list(document.get("layers"), ("layers",), 1, limit)
    assets = document.get("assets")
    if isinstance(assets, list):
        for index, asset in enumerate(assets):
            if isinstance(asset, dict):
                yield from _iter_layer_list(asset.get("layers"), ("assets", index, "layers"), 3, limit)


def text_predicate(parent: Dict[str, Any], key: PathStep, value: Any) -> List[PredicateHit]:
    """Match the ``t.d`` text-document block of text layers only."""
    if key != "t" or not is_text_layer(parent) or not isinstance(value, dict):
        return []
    doc = value.get("d")
    if isinstance(doc, dict) and VALUE_KEY in doc:
        return [(("t", "d"), VALUE_KEY)]
    return []


def text_document_entries(layer: Dict[str, Any]) -> List[Tuple[int, Dict[str, Any], bool]]:
    """Return ``(keyframe_index, owner, is_keyframed)`` for each text value.

    ``t.d.k`` is either a list of keyframes (each with ``s.t``) or a single
    ``{s: {t: ...}}`` object.
    """
    text_data = layer.get("t")
    doc = text_data.get("d") if isinstance(text_data, dict) else None
    frames = doc.get(VALUE_KEY) if isinstance(doc, dict) else None
    entries: List[Tuple[int, Dict[str, Any], bool]] = []
    if isinstance(frames, list):
        for index, keyframe in enumerate(frames):
            if isinstance(keyframe, dict) and _has_text(keyframe):
                entries.append((index, keyframe, True))
    elif isinstance(frames, dict) and _has_text(frames):
        entries.append((0, frames, False))
    return entries


def _has_text(node: Dict[str, Any]) -> bool:
    style = node.get("s")
    return isinstance(style, dict) and isinstance(style.get("t"), str)
