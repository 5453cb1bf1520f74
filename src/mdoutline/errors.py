"""Exception hierarchy and the closed error taxonomy used for fallback decisions."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of any failure raised during extraction."""

    TIMEOUT = "timeout"
    DOCUMENT_TOO_LARGE = "document_too_large"
    INVALID_HEADER = "invalid_header"
    PARSING_FAILED = "parsing_failed"
    CACHE_ERROR = "cache_error"
    UNKNOWN = "unknown"


class MdOutlineError(Exception):
    """Base class for errors raised by the engine."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, uri: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.uri = uri


class ExtractionTimeoutError(MdOutlineError):
    """Raised when a monitored operation does not finish before its deadline."""

    kind = ErrorKind.TIMEOUT


class DocumentTooLargeError(MdOutlineError):
    """Raised before parsing when a document exceeds the configured byte ceiling."""

    kind = ErrorKind.DOCUMENT_TOO_LARGE

    def __init__(self, size: int, limit: int, *, uri: str | None = None) -> None:
        super().__init__(f"Document too large: {size} bytes (max: {limit})", uri=uri)
        self.size = size
        self.limit = limit


class InvalidHeaderError(MdOutlineError):
    """Raised when a requested line is out of range or is not a valid header."""

    kind = ErrorKind.INVALID_HEADER


class ParsingError(MdOutlineError):
    """Raised when building the section list fails unexpectedly."""

    kind = ErrorKind.PARSING_FAILED


class CacheError(MdOutlineError):
    """Raised when the section cache cannot be read or written."""

    kind = ErrorKind.CACHE_ERROR


_MESSAGE_RULES: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (ErrorKind.TIMEOUT, ("timeout", "timed out")),
    (ErrorKind.DOCUMENT_TOO_LARGE, ("too large", "memory")),
    (ErrorKind.INVALID_HEADER, ("invalid header", "not a header", "not a valid header", "out of range")),
    (ErrorKind.PARSING_FAILED, ("parsing", "parse")),
    (ErrorKind.CACHE_ERROR, ("cache",)),
)


def classify_error(error: BaseException) -> ErrorKind:
    """Map any exception onto exactly one :class:`ErrorKind`.

    Engine exceptions carry their kind. Foreign exceptions are matched by type first and then
    by substrings of their lower-cased message; anything left over is ``UNKNOWN``.
    """

    if isinstance(error, MdOutlineError):
        return error.kind
    if isinstance(error, TimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, MemoryError):
        return ErrorKind.DOCUMENT_TOO_LARGE

    message = str(error).lower()
    for kind, needles in _MESSAGE_RULES:
        if any(needle in message for needle in needles):
            return kind
    return ErrorKind.UNKNOWN
