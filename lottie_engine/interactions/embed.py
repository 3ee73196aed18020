"""HTML embedding and host mounting for playback.

``render_embed`` produces a self-contained snippet for web pages: a container
``div`` plus a script that loads lottie-web when the page does not already
provide it. ``mount`` is the equivalent for a host that supplies its own
player through a factory.
"""
from __future__ import annotations

import html
import json
import logging
import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional

from lottie_engine.interactions.compiler import Binding, Navigator, Player, compile_interactions
from lottie_engine.interactions.rules import AnimationMetadata
from lottie_engine.interactions.runtime_js import generate_interaction_js
from lottie_engine.normalizer import prepare_for_playback
from lottie_engine.utils.config import settings

logger = logging.getLogger(__name__)

PlayerFactory = Callable[[Any, Dict[str, Any], Dict[str, Any]], Player]


def _element_id() -> str:
    return f"lottie-{uuid.uuid4().hex[:13]}"


@dataclass
class EmbedOptions:
    loop: bool = True
    autoplay: Optional[bool] = None
    renderer: str = "svg"
    width: str = "100%"
    height: str = "auto"
    id: str = field(default_factory=_element_id)
    css_class: str = "lottie-animation"
    player_var: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EmbedOptions":
        data = dict(data or {})
        if "class" in data:
            data["css_class"] = data.pop("class")
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known and value is not None})


def _script_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":")).replace("</", "<\\/")


def _drives_playback(metadata: AnimationMetadata) -> bool:
    return any(rule.enabled and rule.type == "scroll" for rule in metadata.interactions)


def render_embed(
    document: Dict[str, Any],
    metadata: Optional[AnimationMetadata] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:
    """Return the HTML snippet that plays ``document`` with ``metadata`` applied."""
    metadata = metadata or AnimationMetadata()
    opts = EmbedOptions.from_dict(options)
    autoplay = (not _drives_playback(metadata)) if opts.autoplay is None else opts.autoplay
    player_var = opts.player_var or "lottie_" + opts.id.replace("-", "_")

    style = f"width: {opts.width}; height: {opts.height};"
    if metadata.background_color:
        style += f" background-color: {metadata.background_color};"
    attributes = {"id": opts.id, "class": opts.css_class, "style": style}
    attribute_string = "".join(f' {name}="{html.escape(str(value), quote=True)}"' for name, value in attributes.items())

    load_options = {
        "container": None,
        "renderer": opts.renderer,
        "loop": opts.loop,
        "autoplay": autoplay,
        "animationData": prepare_for_playback(document),
    }
    interaction_js = generate_interaction_js(metadata.interactions, opts.id, player_var)

    lines: List[str] = [
        f"<div{attribute_string}></div>",
        "<script>",
        "(function () {",
        f"  var options = {_script_json(load_options)};",
        f"  var containerId = {_script_json(opts.id)};",
        "  function start() {",
        "    options.container = document.getElementById(containerId);",
        "    var animation = lottie.loadAnimation(options);",
        f"    animation.setSpeed({_script_json(metadata.speed)});",
        f"    window[{_script_json(player_var)}] = animation;",
    ]
    if interaction_js:
        lines.extend(f"    {line}" for line in interaction_js.splitlines())
    lines.extend(
        [
            "  }",
            "  function init() {",
            "    if (typeof lottie === 'undefined') {",
            "      var script = document.createElement('script');",
            f"      script.src = {_script_json(settings.player_cdn_url)};",
            "      script.onload = start;",
            "      document.head.appendChild(script);",
            "    } else {",
            "      start();",
            "    }",
            "  }",
            "  if (document.readyState === 'loading') {",
            "    document.addEventListener('DOMContentLoaded', init);",
            "  } else {",
            "    init();",
            "  }",
            "})();",
            "</script>",
        ]
    )
    return "\n".join(lines)


@dataclass
class MountedAnimation:
    player: Player
    bindings: List[Binding]
    animation_data: Dict[str, Any]


def mount(
    document: Dict[str, Any],
    container: Any,
    factory: PlayerFactory,
    metadata: Optional[AnimationMetadata] = None,
    navigator: Optional[Navigator] = None,
    loop: bool = True,
) -> MountedAnimation:
    """Create a player through ``factory`` and bind the metadata's interactions to it."""
    metadata = metadata or AnimationMetadata()
    animation_data = prepare_for_playback(document)
    options = {"loop": loop, "autoplay": not _drives_playback(metadata)}
    player = factory(container, animation_data, options)
    player.set_speed(metadata.speed)
    bindings = compile_interactions(metadata.interactions, player, container, navigator)
    logger.debug("Mounted animation with %d bindings", len(bindings))
    return MountedAnimation(player=player, bindings=bindings, animation_data=animation_data)
