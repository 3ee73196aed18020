"""Structural validation of Lottie animation documents.

Failures are reported in a fixed order so messages stay specific:
empty input, malformed JSON, non-object root, missing fields, then
field-level type and range problems.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from lottie_engine.errors import (
    DocumentError,
    EmptyInput,
    InvalidField,
    MalformedJson,
    MissingFields,
    NotAnObject,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("v", "fr", "w", "h")
FIELD_ORDER = REQUIRED_FIELDS + ("layers", "assets")

LOTTIE_ROOT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": list(REQUIRED_FIELDS),
    "properties": {
        "v": {"type": ["string", "number"]},
        "fr": {"type": "number", "exclusiveMinimum": 0},
        "w": {"type": "number", "exclusiveMinimum": 0},
        "h": {"type": "number", "exclusiveMinimum": 0},
        "layers": {"type": "array"},
        "assets": {"type": "array"},
    },
    "additionalProperties": True,
}

FIELD_REASONS = {
    "v": "version must be a string or a number",
    "fr": "frame rate must be a positive number",
    "w": "width must be a positive number",
    "h": "height must be a positive number",
    "layers": "layers must be an array",
    "assets": "assets must be an array",
}

_VALIDATOR = Draft202012Validator(LOTTIE_ROOT_SCHEMA)


@dataclass
class ValidationOutcome:
    valid: bool
    code: Optional[str] = None
    error: Optional[str] = None
    document: Optional[Dict[str, Any]] = None
    format: Optional[str] = None
    missing: List[str] = field(default_factory=list)


def _parse(data: Any, constants: List[str]) -> Any:
    """Decode ``data``; ``NaN``/``Infinity`` literals are collected in ``constants``."""

    def _record(name: str) -> float:
        constants.append(name)
        return float(name)

    if data is None:
        raise EmptyInput()
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedJson(str(exc)) from exc
    if isinstance(data, str):
        text = data.strip()
        if not text:
            raise EmptyInput()
        try:
            return json.loads(text, parse_constant=_record)
        except json.JSONDecodeError as exc:
            raise MalformedJson(str(exc)) from exc
    return data


def _field_of(error) -> str:
    if error.path:
        return str(error.path[0])
    return ""


def _is_non_finite(value: Any) -> bool:
    return isinstance(value, float) and not math.isfinite(value)


def validate_document(data: Any) -> Dict[str, Any]:
    """Validate bytes, text or an already-parsed value.

    Returns the parsed document unchanged; raises a ``DocumentError``
    subclass naming the problem otherwise.
    """
    constants: List[str] = []
    document = _parse(data, constants)
    if not isinstance(document, dict):
        raise NotAnObject()

    missing = [name for name in REQUIRED_FIELDS if name not in document]
    if missing:
        raise MissingFields(missing)

    # the schema bounds accept NaN and Infinity
    invalid = {_field_of(e) for e in _VALIDATOR.iter_errors(document) if _field_of(e) in FIELD_ORDER}
    invalid.update(name for name in REQUIRED_FIELDS if _is_non_finite(document[name]))
    if invalid:
        name = min(invalid, key=FIELD_ORDER.index)
        raise InvalidField(name, FIELD_REASONS[name])
    if constants:
        raise MalformedJson(f"{constants[0]} is not a valid JSON number")
    return document


def check_document(data: Any, filename: Optional[str] = None) -> ValidationOutcome:
    """Non-raising variant that also handles the compressed container."""
    from lottie_engine.codec import decode_document

    try:
        if isinstance(data, (bytes, bytearray, str)):
            decoded = decode_document(data, filename)
            return ValidationOutcome(valid=True, document=decoded.document, format=decoded.format.value)
        return ValidationOutcome(valid=True, document=validate_document(data))
    except DocumentError as exc:
        logger.debug("Lottie validation failed: %s", exc.message)
        return ValidationOutcome(
            valid=False,
            code=exc.code,
            error=exc.message,
            missing=list(getattr(exc, "names", [])),
        )
