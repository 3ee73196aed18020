"""Compile interaction rules into playback-control bindings.

The compiler never touches a DOM or a real player. It receives a ``Player``
and a ``Container`` through small protocols and returns ``Binding`` objects;
the host wires each binding's ``kind`` to its own event source and calls
``Binding.dispatch`` when the event fires.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from lottie_engine.interactions.rules import ClickRule, HoverRule, LinkRule, ScrollRule

logger = logging.getLogger(__name__)

FORWARD = 1
REVERSE = -1


class Player(Protocol):
    total_frames: float
    is_paused: bool

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def stop(self) -> None: ...

    def set_direction(self, direction: int) -> None: ...

    def set_speed(self, speed: float) -> None: ...

    def go_to_and_stop(self, value: float, is_frame: bool = True) -> None: ...

    def go_to_and_play(self, value: float, is_frame: bool = True) -> None: ...


class Container(Protocol):
    def find_layer_elements(self, layer_name: str) -> Sequence[Any]: ...


Navigator = Callable[[str, str], None]


class BindingKind(str, Enum):
    SCROLL = "scroll"
    INTERSECTION = "intersection"
    CLICK = "click"
    POINTER_ENTER = "pointerenter"
    POINTER_LEAVE = "pointerleave"


@dataclass(frozen=True)
class ScrollEvent:
    """Scroll position plus the element's bounding box relative to the viewport."""

    scroll_y: float
    viewport_height: float
    element_top: float
    element_height: float


@dataclass(frozen=True)
class IntersectionEvent:
    is_intersecting: bool
    ratio: float = 1.0


@dataclass(frozen=True)
class PointerEvent:
    type: str = "click"


@dataclass
class Binding:
    kind: BindingKind
    target: Any
    handler: Callable[[Any], None]
    rule: Any
    options: Dict[str, Any] = field(default_factory=dict)

    def dispatch(self, event: Any = None) -> None:
        self.handler(event)


def run_action(player: Player, action: str) -> None:
    if action == "play":
        player.play()
    elif action == "pause":
        player.pause()
    elif action == "toggle":
        if player.is_paused:
            player.play()
        else:
            player.pause()
    elif action == "restart":
        player.go_to_and_play(0, True)
    else:
        raise ValueError(f"Unknown playback action: {action}")


def _play(player: Player, direction: int) -> None:
    player.set_direction(direction)
    player.play()


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def in_trigger_zone(event: ScrollEvent, offset: float) -> bool:
    """The element is on screen and its top has crossed the offset line."""
    on_screen = event.element_top < event.viewport_height and event.element_top + event.element_height > 0
    return on_screen and event.element_top <= event.viewport_height * (1 - offset)


def scroll_progress(event: ScrollEvent, offset: float = 0.0) -> float:
    """Fraction of the element's passage through the viewport, re-based past ``offset``."""
    travel = event.viewport_height + event.element_height
    if travel <= 0:
        return 0.0
    raw = _clamp((event.viewport_height - event.element_top) / travel)
    if offset >= 1:
        return 1.0 if raw >= 1 else 0.0
    return _clamp((raw - offset) / (1 - offset))


def _compile_scroll(rule: ScrollRule, player: Player, container: Any, navigator: Navigator) -> List[Binding]:
    if rule.trigger == "onViewport":
        return [_viewport_binding(rule, player, container)]
    if rule.trigger == "onScrollProgress":
        return [_progress_binding(rule, player, container)]

    state: Dict[str, Optional[float]] = {"last": None}

    def on_scroll(event: ScrollEvent) -> None:
        last, state["last"] = state["last"], event.scroll_y
        if last is None or event.scroll_y == last or not in_trigger_zone(event, rule.offset):
            return
        if event.scroll_y > last and rule.direction in ("forward", "both"):
            _play(player, FORWARD)
        elif event.scroll_y < last and rule.direction in ("backward", "both"):
            _play(player, REVERSE)
        else:
            player.pause()

    return [Binding(BindingKind.SCROLL, container, on_scroll, rule, {"passive": True})]


def _viewport_binding(rule: ScrollRule, player: Player, container: Any) -> Binding:
    state = {"inside": False}

    def on_intersection(event: IntersectionEvent) -> None:
        inside = event.is_intersecting and event.ratio >= rule.offset
        if inside == state["inside"]:
            return
        state["inside"] = inside
        if inside:
            _play(player, REVERSE if rule.direction == "backward" else FORWARD)
        elif rule.direction == "both":
            _play(player, REVERSE)
        else:
            player.pause()

    return Binding(BindingKind.INTERSECTION, container, on_intersection, rule, {"threshold": rule.offset})


def _progress_binding(rule: ScrollRule, player: Player, container: Any) -> Binding:
    def on_scroll(event: ScrollEvent) -> None:
        progress = scroll_progress(event, rule.offset)
        if rule.direction == "backward":
            progress = 1 - progress
        last_frame = max(float(player.total_frames) - 1, 0.0)
        player.go_to_and_stop(progress * last_frame, True)

    return Binding(BindingKind.SCROLL, container, on_scroll, rule, {"passive": True})


def _compile_click(rule: ClickRule, player: Player, container: Any, navigator: Navigator) -> List[Binding]:
    return [Binding(BindingKind.CLICK, container, lambda event: run_action(player, rule.action), rule)]


def _compile_hover(rule: HoverRule, player: Player, container: Any, navigator: Navigator) -> List[Binding]:
    return [
        Binding(BindingKind.POINTER_ENTER, container, lambda event: run_action(player, rule.on_enter), rule),
        Binding(BindingKind.POINTER_LEAVE, container, lambda event: run_action(player, rule.on_leave), rule),
    ]


def _compile_link(rule: LinkRule, player: Player, container: Any, navigator: Navigator) -> List[Binding]:
    def navigate(event: Any) -> None:
        navigator(rule.url, rule.target)

    if not rule.layer_name:
        return [Binding(BindingKind.CLICK, container, navigate, rule, {"cursor": "pointer"})]

    finder = getattr(container, "find_layer_elements", None)
    elements = list(finder(rule.layer_name)) if finder else []
    if not elements:
        logger.warning("No elements found for layer %r; link to %s not bound", rule.layer_name, rule.url)
        return []
    return [Binding(BindingKind.CLICK, element, navigate, rule, {"cursor": "pointer"}) for element in elements]


_STRATEGIES = {
    "scroll": _compile_scroll,
    "click": _compile_click,
    "hover": _compile_hover,
    "link": _compile_link,
}


def _log_navigation(url: str, target: str) -> None:
    logger.info("Navigate to %s (%s)", url, target)


def compile_interactions(
    rules: Sequence[Any],
    player: Player,
    container: Any,
    navigator: Optional[Navigator] = None,
) -> List[Binding]:
    """Turn normalized rules into bindings; disabled rules produce none."""
    navigate = navigator or _log_navigation
    bindings: List[Binding] = []
    for rule in rules:
        if not rule.enabled:
            continue
        strategy = _STRATEGIES.get(rule.type)
        if strategy is None:
            raise ValueError(f"Unknown interaction type: {rule.type}")
        bindings.extend(strategy(rule, player, container, navigate))
    return bindings
