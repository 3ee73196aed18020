"""Deterministic document mutations from a declarative edit list."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Tuple

from lottie_engine.document.handles import TextSpan, format_path
from lottie_engine.editors.color_editor import ColorEditor
from lottie_engine.editors.layer_visibility import layer_at, set_hidden
from lottie_engine.editors.text_editor import extract_text_spans, update_text


def _find_span(document: Dict[str, Any], edit: Dict[str, Any]) -> TextSpan:
    spans = extract_text_spans(document)
    if "span" in edit:
        index = edit["span"]
        if not isinstance(index, int) or not 0 <= index < len(spans):
            raise ValueError(f"text span {index!r} not found")
        return spans[index]
    layer_name = edit.get("layer_name")
    if not layer_name:
        raise ValueError("span or layer_name required for update_text")
    keyframe = edit.get("keyframe", 0)
    for span in spans:
        if span.layer_name == layer_name and span.keyframe_index == keyframe:
            return span
    raise ValueError(f"text layer '{layer_name}' keyframe {keyframe} not found")


def _layer_index(edit: Dict[str, Any], action: str) -> int:
    index = edit.get("index")
    if not isinstance(index, int) or isinstance(index, bool):
        raise ValueError(f"index required for {action}")
    return index


def apply_edits(document: Dict[str, Any], edits: List[Dict[str, Any]]) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Apply ``edits`` to a copy of ``document`` and return (new_document, patches)."""
    new_document = copy.deepcopy(document)
    colors = ColorEditor()
    patches: List[Dict[str, Any]] = []

    for edit in edits:
        action = (edit.get("action") or "").strip()
        if not action:
            raise ValueError("Edit action is required")

        if action == "replace_color":
            old, new = edit.get("from"), edit.get("to")
            if not old or not new:
                raise ValueError("from and to required for replace_color")
            count = colors.replace_color(new_document, old, new)
            patches.append({"op": "replace_color", "from": old, "to": new, "count": count})
        elif action == "update_text":
            if not isinstance(edit.get("text"), str):
                raise ValueError("text required for update_text")
            span = _find_span(new_document, edit)
            update_text(new_document, span, edit["text"])
            patches.append(
                {
                    "op": "update_text",
                    "path": format_path(span.owner_path),
                    "before": span.text,
                    "after": edit["text"],
                }
            )
        elif action in ("hide_layer", "show_layer"):
            index = _layer_index(edit, action)
            try:
                layer = layer_at(new_document, index)
            except IndexError as exc:
                raise ValueError(str(exc)) from exc
            set_hidden(layer, action == "hide_layer", default_op=new_document.get("op"))
            patches.append({"op": action, "index": index, "name": layer.get("nm")})
        else:
            raise ValueError(f"Unsupported action: {action}")

    return new_document, patches
