"""Format detection and gzip round-tripping for ``.json`` / ``.lottie`` files."""
from __future__ import annotations

import gzip
import json
import logging
import zlib
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, Optional

from lottie_engine.errors import DecodeError, EmptyInput, FileTooLarge
from lottie_engine.utils.config import settings
from lottie_engine.validator import validate_document

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
JSON_OPENERS = (b"{", b"[")


class LottieFormat(str, Enum):
    """On-disk container of an animation document."""
    PLAIN = "plain"
    COMPRESSED = "compressed"

    @property
    def extension(self) -> str:
        return ".lottie" if self is LottieFormat.COMPRESSED else ".json"


EXTENSION_FORMATS = {
    ".lottie": LottieFormat.COMPRESSED,
    ".json": LottieFormat.PLAIN,
}


@dataclass
class DecodedDocument:
    document: Dict[str, Any]
    format: LottieFormat


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def detect_format(data: bytes | str, filename: Optional[str] = None) -> LottieFormat:
    """Detect whether ``data`` is plain JSON or a gzip container.

    Magic bytes decide first, then the first non-whitespace character. The
    filename extension only breaks ties when the content is ambiguous.
    """
    raw = _as_bytes(data)
    if raw[:2] == GZIP_MAGIC:
        return LottieFormat.COMPRESSED
    stripped = raw.lstrip()
    if stripped[:1] in JSON_OPENERS:
        return LottieFormat.PLAIN
    if filename:
        hinted = EXTENSION_FORMATS.get(PurePath(filename).suffix.lower())
        if hinted is not None:
            return hinted
    return LottieFormat.PLAIN


def _inflate(data: bytes, wbits: int, limit: int, limit_mb: int) -> bytes:
    inflater = zlib.decompressobj(wbits)
    output = inflater.decompress(data, limit + 1)
    if len(output) > limit:
        raise FileTooLarge(limit_mb)
    if not inflater.eof:
        raise zlib.error("incomplete or truncated stream")
    return output


def decompress(data: bytes, max_size_mb: Optional[int] = None) -> bytes:
    """Gzip-decode ``data``, falling back to a raw deflate stream.

    The inflated size is held to the same limit as uploads; a larger
    payload raises ``FileTooLarge`` before it is fully expanded.
    """
    limit_mb = settings.max_file_size_mb if max_size_mb is None else max_size_mb
    limit = limit_mb * 1024 * 1024
    try:
        return _inflate(data, 16 + zlib.MAX_WBITS, limit, limit_mb)
    except zlib.error as exc:
        logger.debug("gzip decode failed, trying raw deflate: %s", exc)
    try:
        return _inflate(data, -zlib.MAX_WBITS, limit, limit_mb)
    except zlib.error as exc:
        raise DecodeError() from exc


def compress(data: bytes, level: Optional[int] = None) -> bytes:
    """Gzip-encode ``data``.

    ``mtime`` is pinned so identical input always yields identical bytes.
    """
    compresslevel = settings.compression_level if level is None else level
    return gzip.compress(data, compresslevel=compresslevel, mtime=0)


def serialize_document(document: Dict[str, Any]) -> bytes:
    return json.dumps(document, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")


def decode_document(data: bytes | str, filename: Optional[str] = None) -> DecodedDocument:
    """Detect, decompress and validate raw bytes."""
    raw = _as_bytes(data)
    if not raw.strip():
        raise EmptyInput()
    fmt = detect_format(raw, filename)
    if fmt is LottieFormat.COMPRESSED:
        raw = decompress(raw)
    document = validate_document(raw)
    return DecodedDocument(document=document, format=fmt)


def encode_document(document: Dict[str, Any], fmt: LottieFormat = LottieFormat.PLAIN) -> bytes:
    payload = serialize_document(document)
    if fmt is LottieFormat.COMPRESSED:
        return compress(payload)
    return payload


def output_filename(filename: str, fmt: LottieFormat) -> str:
    """Return ``filename`` with the suffix matching ``fmt``."""
    path = PurePath(filename or "animation")
    if path.suffix.lower() in EXTENSION_FORMATS:
        path = path.with_suffix("")
    return f"{path}{fmt.extension}"


def check_file_size(size_in_bytes: int, max_size_mb: Optional[int] = None) -> None:
    limit_mb = settings.max_file_size_mb if max_size_mb is None else max_size_mb
    if size_in_bytes == 0:
        raise EmptyInput("File is empty.")
    if size_in_bytes > limit_mb * 1024 * 1024:
        raise FileTooLarge(limit_mb)
