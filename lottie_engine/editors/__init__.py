"""In-place editors for colors, text and layer visibility."""
from lottie_engine.editors.color_editor import ColorEditor
from lottie_engine.editors.layer_visibility import list_layers, materialize_for_persist, set_hidden
from lottie_engine.editors.text_editor import extract_text_spans, update_text

__all__ = [
    "ColorEditor",
    "list_layers",
    "materialize_for_persist",
    "set_hidden",
    "extract_text_spans",
    "update_text",
]
