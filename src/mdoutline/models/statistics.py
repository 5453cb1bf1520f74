"""Error statistics and structured error log entries."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from mdoutline.errors import ErrorKind
from mdoutline.models.extraction import FallbackStrategy


class ErrorStatistics(BaseModel):
    """Counters accumulated by the fallback controller."""

    total_errors: int = 0
    errors_by_kind: dict[ErrorKind, int] = Field(default_factory=dict)
    errors_by_document_type: dict[str, int] = Field(default_factory=dict)
    fallback_usage: dict[FallbackStrategy, int] = Field(default_factory=dict)
    last_error_time: datetime | None = None


class ErrorLogEntry(BaseModel):
    """One classified extraction failure."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    kind: ErrorKind
    document: str
    document_type: str
    line_number: int | None = None
    fallback: FallbackStrategy
    message: str
