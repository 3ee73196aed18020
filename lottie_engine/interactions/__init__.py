"""Interaction rules and their playback bindings."""
from lottie_engine.interactions.compiler import Binding, BindingKind, compile_interactions
from lottie_engine.interactions.embed import mount, render_embed
from lottie_engine.interactions.rules import AnimationMetadata, normalize_rules, normalize_rules_with_report
from lottie_engine.interactions.runtime_js import generate_interaction_js

__all__ = [
    "Binding",
    "BindingKind",
    "compile_interactions",
    "mount",
    "render_embed",
    "AnimationMetadata",
    "normalize_rules",
    "normalize_rules_with_report",
    "generate_interaction_js",
]
