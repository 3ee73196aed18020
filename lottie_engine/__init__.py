"""Lottie Document Engine.

Decode, validate, edit and replay Lottie animations.

Components:
- codec / validator: container detection, gzip round trip, structural checks
- document: property index, path handles, layer and property model
- editors: colors, text and non-destructive layer visibility
- normalizer: repairs keyframe data before persistence or playback
- interactions: scroll / click / hover / link rules compiled to player bindings
- services: editing session with undo history and debounced preview renders
"""

from lottie_engine.codec import (
    DecodedDocument,
    LottieFormat,
    compress,
    decode_document,
    decompress,
    detect_format,
    encode_document,
)
from lottie_engine.validator import ValidationOutcome, check_document, validate_document
from lottie_engine.errors import (
    DecodeError,
    DocumentError,
    EmptyInput,
    FileTooLarge,
    InvalidColor,
    InvalidField,
    LottieError,
    MalformedJson,
    MissingFields,
    NotAnObject,
    StaleReference,
    UnsupportedTrigger,
)
from lottie_engine.normalizer import normalize, normalize_in_place, prepare_for_playback
from lottie_engine.services.editing_session import EditingSession, PersistResult

__all__ = [
    # Codec
    "DecodedDocument",
    "LottieFormat",
    "compress",
    "decode_document",
    "decompress",
    "detect_format",
    "encode_document",
    # Validation
    "ValidationOutcome",
    "check_document",
    "validate_document",
    # Errors
    "DecodeError",
    "DocumentError",
    "EmptyInput",
    "FileTooLarge",
    "InvalidColor",
    "InvalidField",
    "LottieError",
    "MalformedJson",
    "MissingFields",
    "NotAnObject",
    "StaleReference",
    "UnsupportedTrigger",
    # Normalizer
    "normalize",
    "normalize_in_place",
    "prepare_for_playback",
    # Session
    "EditingSession",
    "PersistResult",
]
