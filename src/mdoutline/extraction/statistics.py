"""Error statistics owned by a fallback controller instance."""

from __future__ import annotations

import threading
from collections import deque
from datetime import UTC, datetime

from mdoutline.errors import ErrorKind
from mdoutline.models.extraction import FallbackStrategy
from mdoutline.models.statistics import ErrorLogEntry, ErrorStatistics


class ErrorStatisticsRecorder:
    """Thread-safe counters plus a bounded log of recent classified errors."""

    def __init__(self, log_capacity: int = 100):
        self._lock = threading.Lock()
        self._stats = ErrorStatistics()
        self._entries: deque[ErrorLogEntry] = deque(maxlen=log_capacity)

    def record(self, kind: ErrorKind, document_type: str, strategy: FallbackStrategy) -> None:
        with self._lock:
            stats = self._stats
            stats.total_errors += 1
            stats.last_error_time = datetime.now(UTC)
            stats.errors_by_kind[kind] = stats.errors_by_kind.get(kind, 0) + 1
            stats.errors_by_document_type[document_type] = (
                stats.errors_by_document_type.get(document_type, 0) + 1
            )
            stats.fallback_usage[strategy] = stats.fallback_usage.get(strategy, 0) + 1

    def append(self, entry: ErrorLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> list[ErrorLogEntry]:
        """Most recent entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def snapshot(self) -> ErrorStatistics:
        """Independent copy of the current counters."""
        with self._lock:
            return self._stats.model_copy(deep=True)

    def reset(self) -> None:
        with self._lock:
            self._stats = ErrorStatistics()
            self._entries.clear()
