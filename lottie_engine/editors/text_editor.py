"""Text layer extraction and in-place editing."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Optional

from lottie_engine.document.handles import TextSpan, resolve, walk_path
from lottie_engine.document.property_index import find_properties, text_document_entries, text_predicate
from lottie_engine.errors import StaleReference

logger = logging.getLogger(__name__)


def extract_text_spans(document: Any, max_depth: Optional[int] = None) -> List[TextSpan]:
    """Return one span per text keyframe (or static text document) of every text layer."""
    spans: List[TextSpan] = []
    for match in find_properties(document, text_predicate, max_depth=max_depth):
        layer_path = match.path[:-2]
        layer = walk_path(document, layer_path)
        name = layer.get("nm") or f"Text Layer {len({s.layer_path for s in spans}) + 1}"
        for index, owner, keyframed in text_document_entries(layer):
            spans.append(
                TextSpan(
                    layer_path=layer_path,
                    layer_name=name,
                    keyframe_index=index,
                    text=owner["s"]["t"],
                    is_keyframed=keyframed,
                    owner=owner,
                )
            )
    return spans


def update_text(document: Any, span: TextSpan, new_text: str) -> TextSpan:
    """Write ``new_text`` through to the node ``span`` was extracted from.

    Raises ``StaleReference`` when the layer or keyframe can no longer be
    found, leaving the document untouched.
    """
    if not isinstance(new_text, str):
        raise TypeError("new_text must be a string")
    try:
        owner = resolve(document, span)
    except StaleReference:
        logger.debug("Text span %s is stale", span.owner_path)
        raise
    owner["s"]["t"] = new_text
    return dataclasses.replace(span, text=new_text)
