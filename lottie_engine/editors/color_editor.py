"""Color extraction and replacement.

Colors are stored as 0-1 channel lists under ``c`` / ``s`` / ``fc`` / ``sc``,
either directly or as the static ``k`` of an animatable property. The editor
keeps an index of where each hex color occurs so repeated edits from a color
picker do not re-walk the whole tree.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from lottie_engine.document.handles import ColorLocation, resolve
from lottie_engine.document.model import fingerprint, is_color_value
from lottie_engine.document.property_index import color_predicate, find_properties
from lottie_engine.errors import StaleReference
from lottie_engine.utils.colors import (
    channels_to_hex,
    color_distance,
    colors_match,
    hex_to_channels,
    normalize_hex,
)
from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)


def find_color_locations(document: Any, max_depth: Optional[int] = None) -> Dict[str, List[ColorLocation]]:
    locations: Dict[str, List[ColorLocation]] = {}
    for match in find_properties(document, color_predicate, max_depth=max_depth):
        hex_color = channels_to_hex(match.owner[match.key])
        locations.setdefault(hex_color, []).append(
            ColorLocation(owner_path=match.path, key=match.key, owner=match.owner)
        )
    return locations


class ColorEditor:
    """Extracts the distinct colors of a document and rewrites them in place."""

    def __init__(self, tolerance: Optional[float] = None, max_depth: Optional[int] = None):
        self.tolerance = settings.color_tolerance if tolerance is None else tolerance
        self.max_depth = max_depth
        self._locations: Dict[str, List[ColorLocation]] = {}
        self._fingerprint: Optional[str] = None
        self._document_id: Optional[int] = None

    def invalidate(self) -> None:
        self._locations = {}
        self._fingerprint = None
        self._document_id = None

    def _cache_is_current(self, document: Any) -> bool:
        return (
            self._fingerprint is not None
            and self._document_id == id(document)
            and self._fingerprint == fingerprint(document)
        )

    def extract_colors(self, document: Any) -> Set[str]:
        """Return the set of lowercase ``#rrggbb`` colors used by ``document``."""
        if not self._cache_is_current(document) or not self._locations:
            logger.debug("Rebuilding color index")
            self._locations = find_color_locations(document, max_depth=self.max_depth)
            self._fingerprint = fingerprint(document)
            self._document_id = id(document)
        return set(self._locations)

    def locations(self, hex_color: str) -> List[ColorLocation]:
        return list(self._locations.get(normalize_hex(hex_color), []))

    def _cached_locations(self, document: Any, hex_color: str) -> Optional[List[ColorLocation]]:
        if hex_color not in self._locations or not self._cache_is_current(document):
            return None
        locations = self._locations[hex_color]
        try:
            for location in locations:
                owner = resolve(document, location)
                if channels_to_hex(owner[location.key]) != hex_color:
                    raise StaleReference(f"{location.path} no longer holds {hex_color}")
        except StaleReference as exc:
            logger.debug("Color index is stale: %s", exc)
            return None
        return locations

    def replace_color(self, document: Any, old_hex: str, new_hex: str) -> int:
        """Rewrite every occurrence of ``old_hex`` with ``new_hex``.

        Alpha channels are preserved. Returns the number of occurrences
        rewritten.
        """
        old_key = normalize_hex(old_hex)
        new_key = normalize_hex(new_hex)
        new_rgb = hex_to_channels(new_key)
        if old_key == new_key:
            return 0

        locations = self._cached_locations(document, old_key)
        if locations is not None:
            for location in locations:
                channels = location.owner[location.key]
                channels[0], channels[1], channels[2] = new_rgb
            self._locations.setdefault(new_key, []).extend(locations)
            del self._locations[old_key]
            self._fingerprint = fingerprint(document)
            return len(locations)

        count = replace_color_in_tree(document, hex_to_channels(old_key), new_rgb, self.tolerance, self.max_depth)
        self.invalidate()
        return count

    def apply_palette_color(self, document: Any, palette_hex: str) -> Optional[str]:
        """Replace the document color closest to ``palette_hex`` with it."""
        target = normalize_hex(palette_hex)
        colors = self.extract_colors(document)
        if not colors:
            return None
        closest = min(sorted(colors), key=lambda existing: color_distance(target, existing))
        self.replace_color(document, closest, target)
        return closest


def replace_color_in_tree(
    document: Any,
    old_rgb,
    new_rgb,
    tolerance: Optional[float] = None,
    max_depth: Optional[int] = None,
) -> int:
    """Full walk fallback: rewrite every color within ``tolerance`` of ``old_rgb``."""
    count = 0
    for match in find_properties(document, color_predicate, max_depth=max_depth):
        channels = match.owner[match.key]
        if is_color_value(channels) and colors_match(channels, old_rgb, tolerance):
            channels[0], channels[1], channels[2] = new_rgb
            count += 1
    return count
