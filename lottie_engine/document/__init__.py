"""Document model, property index and edit handles."""
from lottie_engine.document.handles import ColorLocation, TextSpan, resolve
from lottie_engine.document.model import LayerType, PropertyShape, classify_property
from lottie_engine.document.property_index import PropertyMatch, find_properties, iter_layers

__all__ = [
    "ColorLocation",
    "TextSpan",
    "resolve",
    "LayerType",
    "PropertyShape",
    "classify_property",
    "PropertyMatch",
    "find_properties",
    "iter_layers",
]
