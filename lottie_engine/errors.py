"""Typed errors raised by the document engine.

Every error carries a stable ``code`` so calling UIs can map failures to
localized guidance without depending on message wording.
"""
from __future__ import annotations

from typing import ClassVar, Iterable, List


class LottieError(Exception):
    """Base class for engine errors."""

    code: ClassVar[str] = "LOTTIE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "error": self.message}


class DocumentError(LottieError, ValueError):
    """Raised when bytes cannot become a valid animation document."""

    code = "INVALID_DOCUMENT"


class EmptyInput(DocumentError):
    code = "EMPTY_INPUT"

    def __init__(self, message: str = "The file is empty."):
        super().__init__(message)


class MalformedJson(DocumentError):
    code = "MALFORMED_JSON"

    def __init__(self, parser_message: str):
        super().__init__(f"Invalid JSON format: {parser_message}")
        self.parser_message = parser_message


class NotAnObject(DocumentError):
    code = "NOT_AN_OBJECT"

    def __init__(self, message: str = "Lottie file must be a JSON object."):
        super().__init__(message)


class MissingFields(DocumentError):
    code = "MISSING_FIELDS"

    def __init__(self, names: Iterable[str]):
        self.names: List[str] = list(names)
        super().__init__(
            "Missing required Lottie properties: "
            + ", ".join(self.names)
            + ". This does not appear to be a valid Lottie animation file."
        )


class InvalidField(DocumentError):
    code = "INVALID_FIELD"

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Invalid Lottie property '{name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DecodeError(DocumentError):
    code = "DECODE_ERROR"

    def __init__(self, message: str = "Failed to decompress .lottie file. The file may be corrupted or in an unsupported format."):
        super().__init__(message)


class FileTooLarge(DocumentError):
    code = "FILE_TOO_LARGE"

    def __init__(self, max_size_mb: int):
        self.max_size_mb = max_size_mb
        super().__init__(f"File size exceeds the maximum allowed size of {max_size_mb}MB.")


class StaleReference(LottieError):
    """An edit targeted a location that no longer exists in the document."""

    code = "STALE_REFERENCE"


class InvalidColor(LottieError, ValueError):
    code = "INVALID_COLOR"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid hex color: {value!r}")


class UnsupportedTrigger(LottieError):
    """Describes an interaction rule dropped during normalization.

    Never raised out of normalization; collected for diagnostics.
    """

    code = "UNSUPPORTED_TRIGGER"
