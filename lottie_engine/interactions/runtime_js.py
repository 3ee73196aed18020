"""Generate the browser script that applies interaction rules to lottie-web.

Each rule becomes one self-contained block mirroring the binding strategies
in ``compiler``. Values are emitted through ``json.dumps`` so rule content
never reaches the page unescaped.
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Sequence

logger = logging.getLogger(__name__)

LAYER_NAME_ATTRIBUTE = "data-layer-name"

_PRELUDE = [
    "function runAction(action) {",
    "  if (action === 'play') { anim.play(); }",
    "  else if (action === 'pause') { anim.pause(); }",
    "  else if (action === 'toggle') { if (anim.isPaused) { anim.play(); } else { anim.pause(); } }",
    "  else if (action === 'restart') { anim.goToAndPlay(0, true); }",
    "}",
    "function playDirection(direction) { anim.setDirection(direction); anim.play(); }",
    "function inTriggerZone(offset) {",
    "  var rect = container.getBoundingClientRect();",
    "  var vh = window.innerHeight;",
    "  return rect.top < vh && rect.bottom > 0 && rect.top <= vh * (1 - offset);",
    "}",
    "function scrollProgress(offset) {",
    "  var rect = container.getBoundingClientRect();",
    "  var vh = window.innerHeight;",
    "  var travel = vh + rect.height;",
    "  if (travel <= 0) { return 0; }",
    "  var raw = Math.min(1, Math.max(0, (vh - rect.top) / travel));",
    "  if (offset >= 1) { return raw >= 1 ? 1 : 0; }",
    "  return Math.min(1, Math.max(0, (raw - offset) / (1 - offset)));",
    "}",
    "function tagLayers() {",
    "  var elements = (anim.renderer && anim.renderer.elements) || [];",
    "  elements.forEach(function (element) {",
    "    if (element && element.data && element.data.nm && element.layerElement) {",
    f"      element.layerElement.setAttribute('{LAYER_NAME_ATTRIBUTE}', element.data.nm);",
    "    }",
    "  });",
    "}",
    "function onReady(callback) {",
    "  if (anim.isLoaded) { callback(); } else { anim.addEventListener('DOMLoaded', callback); }",
    "}",
]


def _js(value: Any) -> str:
    return json.dumps(value).replace("</", "<\\/")


def _scroll_block(rule: Any) -> List[str]:
    offset = _js(rule.offset)
    if rule.trigger == "onViewport":
        if rule.direction == "backward":
            enter = "playDirection(-1);"
        else:
            enter = "playDirection(1);"
        leave = "playDirection(-1);" if rule.direction == "both" else "anim.pause();"
        return [
            "(function () {",
            "  var inside = false;",
            "  var observer = new IntersectionObserver(function (entries) {",
            "    entries.forEach(function (entry) {",
            f"      var now = entry.isIntersecting && entry.intersectionRatio >= {offset};",
            "      if (now === inside) { return; }",
            "      inside = now;",
            f"      if (now) {{ {enter} }} else {{ {leave} }}",
            "    });",
            f"  }}, {{ threshold: {offset} }});",
            "  observer.observe(container);",
            "})();",
        ]
    if rule.trigger == "onScrollProgress":
        invert = "progress = 1 - progress;" if rule.direction == "backward" else ""
        return [
            "(function () {",
            "  function seek() {",
            f"    var progress = scrollProgress({offset});",
            f"    {invert}",
            "    anim.goToAndStop(progress * Math.max(anim.totalFrames - 1, 0), true);",
            "  }",
            "  window.addEventListener('scroll', seek, { passive: true });",
            "  onReady(seek);",
            "})();",
        ]
    forward = "true" if rule.direction in ("forward", "both") else "false"
    backward = "true" if rule.direction in ("backward", "both") else "false"
    return [
        "(function () {",
        "  var last = window.scrollY;",
        "  window.addEventListener('scroll', function () {",
        "    var current = window.scrollY;",
        "    var delta = current - last;",
        "    last = current;",
        f"    if (delta === 0 || !inTriggerZone({offset})) {{ return; }}",
        f"    if (delta > 0 && {forward}) {{ playDirection(1); }}",
        f"    else if (delta < 0 && {backward}) {{ playDirection(-1); }}",
        "    else { anim.pause(); }",
        "  }, { passive: true });",
        "})();",
    ]


def _click_block(rule: Any) -> List[str]:
    return [f"container.addEventListener('click', function () {{ runAction({_js(rule.action)}); }});"]


def _hover_block(rule: Any) -> List[str]:
    return [
        f"container.addEventListener('mouseenter', function () {{ runAction({_js(rule.on_enter)}); }});",
        f"container.addEventListener('mouseleave', function () {{ runAction({_js(rule.on_leave)}); }});",
    ]


def _link_block(rule: Any) -> List[str]:
    navigate = f"function () {{ window.open({_js(rule.url)}, {_js(rule.target)}); }}"
    if not rule.layer_name:
        return [
            "container.style.cursor = 'pointer';",
            f"container.addEventListener('click', {navigate});",
        ]
    selector = _js(f"[{LAYER_NAME_ATTRIBUTE}=")
    return [
        "onReady(function () {",
        "  tagLayers();",
        f"  var selector = {selector} + JSON.stringify({_js(rule.layer_name)}) + ']';",
        "  container.querySelectorAll(selector).forEach(function (node) {",
        "    node.style.cursor = 'pointer';",
        f"    node.addEventListener('click', {navigate});",
        "  });",
        "});",
    ]


_BLOCKS = {
    "scroll": _scroll_block,
    "click": _click_block,
    "hover": _hover_block,
    "link": _link_block,
}


def generate_interaction_js(rules: Sequence[Any], container_id: str, player_var: str = "animation") -> str:
    """Return a script binding ``rules`` to the player held in ``window[player_var]``."""
    enabled = [rule for rule in rules if rule.enabled]
    if not enabled:
        return ""
    lines: List[str] = ["(function (anim, container) {", "  if (!anim || !container) { return; }"]
    lines.extend(f"  {line}" for line in _PRELUDE)
    for index, rule in enumerate(enabled):
        lines.append(f"  // rule {index}: {rule.type}")
        lines.extend(f"  {line}" for line in _BLOCKS[rule.type](rule))
    lines.append(f"}})(window[{_js(player_var)}], document.getElementById({_js(container_id)}));")
    logger.debug("Generated interaction script for %d rules", len(enabled))
    return "\n".join(lines)
