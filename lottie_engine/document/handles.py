"""Handles that point into a live document.

Editors hold handles instead of bare references into the tree. Every write
goes through :func:`resolve`, which walks the recorded path from the root and
checks the node found is still the object the handle was taken from, so an
edit against a replaced document fails loudly instead of writing into a
detached node.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from lottie_engine.document.model import is_color_value
from lottie_engine.errors import StaleReference

PathStep = Union[str, int]
Path = Tuple[PathStep, ...]


def format_path(path: Path) -> str:
    """Render ``("layers", 0, "t")`` as ``layers[0].t``."""
    out = ""
    for step in path:
        if isinstance(step, int):
            out += f"[{step}]"
        else:
            out += f".{step}" if out else str(step)
    return out


def walk_path(document: Any, path: Path) -> Any:
    node = document
    for step in path:
        if isinstance(node, dict) and not isinstance(step, int) and step in node:
            node = node[step]
        elif isinstance(node, list) and isinstance(step, int) and 0 <= step < len(node):
            node = node[step]
        else:
            raise StaleReference(f"Path {format_path(path)} no longer exists in the document")
    return node


@dataclass(frozen=True)
class ColorLocation:
    """``owner[key]`` holds the channel list of one color occurrence."""
    owner_path: Path
    key: str
    owner: Dict[str, Any] = field(compare=False, repr=False)

    @property
    def path(self) -> str:
        return format_path(self.owner_path + (self.key,))


@dataclass(frozen=True)
class TextSpan:
    """One editable text value; ``owner["s"]["t"]`` is the string."""
    layer_path: Path
    layer_name: str
    keyframe_index: int
    text: str
    is_keyframed: bool
    owner: Dict[str, Any] = field(compare=False, repr=False)

    @property
    def owner_path(self) -> Path:
        base = self.layer_path + ("t", "d", "k")
        return base + (self.keyframe_index,) if self.is_keyframed else base


Handle = Union[ColorLocation, TextSpan]


def resolve(document: Any, handle: Handle) -> Dict[str, Any]:
    """Return the live owner node of ``handle`` or raise ``StaleReference``."""
    node = walk_path(document, handle.owner_path)
    if node is not handle.owner:
        raise StaleReference(f"Node at {format_path(handle.owner_path)} was replaced")
    if isinstance(handle, ColorLocation):
        if not is_color_value(node.get(handle.key)):
            raise StaleReference(f"{handle.path} no longer holds a color")
    else:
        style = node.get("s")
        if not isinstance(style, dict) or not isinstance(style.get("t"), str):
            raise StaleReference(f"{format_path(handle.owner_path)} no longer holds text")
    return node
