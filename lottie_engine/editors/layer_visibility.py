"""Non-destructive layer hiding.

Hiding only sets session flags on the live document. A zero-duration layer
(``op == ip``) is the portable encoding of "invisible", and it is applied to
the copy produced for persistence, never to the document being edited.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from lottie_engine.document.handles import Path, format_path
from lottie_engine.document.model import HIDDEN_FLAG, ORIGINAL_END_FRAME, SESSION_FIELDS, layer_type_name
from lottie_engine.document.property_index import iter_layers
from lottie_engine.utils.config import settings


@dataclass
class LayerSummary:
    index: int
    path: str
    name: str
    type_name: str
    visible: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "path": self.path,
            "name": self.name,
            "type": self.type_name,
            "visible": self.visible,
        }


def set_hidden(layer: Dict[str, Any], hidden: bool, default_op: Optional[float] = None) -> None:
    """Flag ``layer`` as hidden or shown for the rest of the session.

    The first hide records the end frame so showing restores it exactly.
    Showing a layer that was never hidden leaves its end frame untracked.
    """
    if hidden and ORIGINAL_END_FRAME not in layer:
        fallback = settings.default_frame_end if default_op is None else default_op
        layer[ORIGINAL_END_FRAME] = layer.get("op", fallback)
    layer[HIDDEN_FLAG] = bool(hidden)
    if not hidden and "op" in layer and ORIGINAL_END_FRAME in layer:
        layer["op"] = layer[ORIGINAL_END_FRAME]


def is_hidden(layer: Any) -> bool:
    return isinstance(layer, dict) and layer.get(HIDDEN_FLAG) is True


def is_visible(layer: Dict[str, Any], document_op: Optional[float] = None) -> bool:
    if HIDDEN_FLAG in layer:
        return not layer[HIDDEN_FLAG]
    ip = layer.get("ip", 0)
    op = layer.get("op", settings.default_frame_end if document_op is None else document_op)
    return op > ip


def list_layers(document: Dict[str, Any]) -> List[LayerSummary]:
    """Summaries of the root layers, in document order."""
    document_op = document.get("op")
    summaries = []
    for index, layer in enumerate(document.get("layers") or []):
        if not isinstance(layer, dict):
            continue
        summaries.append(
            LayerSummary(
                index=index,
                path=format_path(("layers", index)),
                name=layer.get("nm") or f"Layer {index + 1}",
                type_name=layer_type_name(layer.get("ty")),
                visible=is_visible(layer, document_op),
            )
        )
    return summaries


def strip_session_fields(node: Any) -> Any:
    """Remove session-only keys from ``node`` and everything below it, in place."""
    if isinstance(node, list):
        for item in node:
            strip_session_fields(item)
    elif isinstance(node, dict):
        for key in SESSION_FIELDS:
            node.pop(key, None)
        for value in node.values():
            if isinstance(value, (dict, list)):
                strip_session_fields(value)
    return node


def materialize_for_persist(document: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy with hidden layers collapsed to zero duration and session keys removed."""
    result = copy.deepcopy(document)
    for _, layer in iter_layers(result):
        if is_hidden(layer):
            layer["op"] = layer.get("ip", 0)
    return strip_session_fields(result)


def without_hidden_layers(document: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy for playback previews: hidden layers are dropped entirely."""
    result = copy.deepcopy(document)

    def _filter(layers: Any) -> Any:
        if not isinstance(layers, list):
            return layers
        kept = [layer for layer in layers if not is_hidden(layer)]
        for layer in kept:
            if isinstance(layer, dict) and "layers" in layer:
                layer["layers"] = _filter(layer["layers"])
        return kept

    if "layers" in result:
        result["layers"] = _filter(result["layers"])
    for asset in result.get("assets") or []:
        if isinstance(asset, dict) and "layers" in asset:
            asset["layers"] = _filter(asset["layers"])
    return strip_session_fields(result)


def layer_at(document: Dict[str, Any], index: int) -> Dict[str, Any]:
    layers = document.get("layers")
    if not isinstance(layers, list) or not 0 <= index < len(layers) or not isinstance(layers[index], dict):
        raise IndexError(f"Layer not found at index {index}")
    return layers[index]


def hidden_layer_paths(document: Dict[str, Any]) -> List[Path]:
    return [path for path, layer in iter_layers(document) if is_hidden(layer)]
