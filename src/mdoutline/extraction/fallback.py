"""Error classification, monitored execution and fallback recovery.

The controller turns any failure raised during content extraction into an
:class:`ExtractionResult`: the error is classified onto :class:`ErrorKind`, a
:class:`FallbackStrategy` is chosen deterministically from that kind, statistics are
recorded and the fallback is executed. A fallback that fails itself still produces a
result; nothing escapes to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, TypeVar

from mdoutline.config import Settings, load_settings
from mdoutline.core.monitor import Operation, PerformanceMonitor, Stopwatch, call_with_deadline
from mdoutline.errors import DocumentTooLargeError, ErrorKind, classify_error
from mdoutline.extraction.lines import task_with_sub_content
from mdoutline.extraction.statistics import ErrorStatisticsRecorder
from mdoutline.logging import get_logger, log_event
from mdoutline.models.document import TextDocument, document_lines, document_size
from mdoutline.models.extraction import (
    ExtractionContext,
    ExtractionResult,
    ExtractionType,
    FallbackStrategy,
)
from mdoutline.models.statistics import ErrorLogEntry, ErrorStatistics
from mdoutline.sections.extractor import detect_header_level, legacy_section_content

logger = get_logger(__name__)

T = TypeVar("T")


class ExtractionState(str, Enum):
    """Lifecycle of one extraction request."""

    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    FALLBACK_SELECTED = "fallback_selected"
    FALLBACK_EXECUTED = "fallback_executed"
    RECOVERED = "recovered"
    PERMANENTLY_FAILED = "permanently_failed"


_LINE_ONLY_KINDS = frozenset(
    {ErrorKind.TIMEOUT, ErrorKind.DOCUMENT_TOO_LARGE, ErrorKind.CACHE_ERROR}
)

_TUNABLE_FIELDS = frozenset(
    {"slow_operation_ms", "default_timeout_ms", "max_request_bytes", "verbose_logging"}
)


def log_transition(state: ExtractionState, context: ExtractionContext, **fields: Any) -> None:
    """Log one lifecycle step of an extraction request at DEBUG."""
    logger.debug(
        "extraction %s line=%s type=%s %s",
        state.value,
        context.line_number,
        context.document_type.value,
        " ".join(f"{key}={value}" for key, value in fields.items()),
    )


class FallbackController:
    """Owns monitored execution, fallback selection and error statistics."""

    def __init__(
        self,
        settings: Settings | None = None,
        recorder: ErrorStatisticsRecorder | None = None,
        monitor: PerformanceMonitor | None = None,
    ):
        self.settings = settings or load_settings()
        self.recorder = recorder or ErrorStatisticsRecorder(self.settings.error_log_capacity)
        self.monitor = monitor or PerformanceMonitor(self.settings.slow_operation_ms)

    async def monitor_performance(
        self,
        operation: Operation[T],
        context: ExtractionContext,
        timeout_ms: float | None = None,
        *,
        label: str = "monitored_operation",
    ) -> T:
        """Run ``operation`` under a deadline and report slow completions.

        Raises:
            ExtractionTimeoutError: ``timeout_ms`` (default ``default_timeout_ms``) elapsed.
        """

        deadline_ms = timeout_ms if timeout_ms is not None else self.settings.default_timeout_ms
        stopwatch = Stopwatch()
        try:
            result = await call_with_deadline(operation, deadline_ms)
        except Exception:
            self.monitor.record_operation(label, stopwatch.elapsed_ms, success=False)
            raise

        duration_ms = stopwatch.elapsed_ms
        if self.monitor.record_operation(label, duration_ms):
            log_event(
                logger,
                logging.WARNING,
                "slow_operation",
                operation=label,
                duration_ms=round(duration_ms, 1),
                document=context.document.uri,
                document_type=context.document_type.value,
                line=context.line_number,
                document_bytes=document_size(context.document),
            )
        return result

    def validate_document_size(self, document: TextDocument) -> None:
        """Raise :class:`DocumentTooLargeError` above ``max_request_bytes``."""

        size = document_size(document)
        if size > self.settings.max_request_bytes:
            raise DocumentTooLargeError(size, self.settings.max_request_bytes, uri=document.uri)

    @staticmethod
    def classify_error(error: BaseException) -> ErrorKind:
        return classify_error(error)

    @staticmethod
    def determine_fallback_strategy(kind: ErrorKind, context: ExtractionContext) -> FallbackStrategy:
        """Pick the fallback for ``kind``. A selection always wins."""

        if context.has_selection:
            return FallbackStrategy.SELECTION_ONLY
        if kind in _LINE_ONLY_KINDS:
            return FallbackStrategy.LINE_ONLY
        return FallbackStrategy.LEGACY_EXTRACTION

    def execute_fallback_strategy(
        self,
        strategy: FallbackStrategy,
        context: ExtractionContext,
        original_error: BaseException,
    ) -> ExtractionResult:
        """Run ``strategy``; failures of the fallback itself become an unsuccessful result."""

        try:
            if strategy is FallbackStrategy.SELECTION_ONLY:
                return self._selection_only(context)
            if strategy is FallbackStrategy.LINE_ONLY:
                return self._line_only(context)
            return self._legacy_extraction(context)
        except Exception as exc:
            logger.error("Fallback %s failed: %s", strategy.value, exc)
            return ExtractionResult.failed(
                ExtractionType.FALLBACK,
                f"Original error: {original_error}. Fallback error: {exc}",
                strategy=strategy,
            )

    def handle_extraction_error(
        self, error: BaseException, context: ExtractionContext
    ) -> ExtractionResult:
        """Classify ``error``, record it and return the fallback result."""

        kind = self.classify_error(error)
        log_transition(ExtractionState.FAILED, context, kind=kind.value)

        strategy = self.determine_fallback_strategy(kind, context)
        log_transition(ExtractionState.FALLBACK_SELECTED, context, strategy=strategy.value)

        document_type = context.document_type.value
        self.recorder.record(kind, document_type, strategy)
        entry = ErrorLogEntry(
            kind=kind,
            document=context.document.uri,
            document_type=document_type,
            line_number=context.line_number,
            fallback=strategy,
            message=str(error),
        )
        self.recorder.append(entry)
        log_event(
            logger,
            logging.WARNING,
            "extraction_error",
            kind=kind.value,
            document=entry.document,
            document_type=document_type,
            line=entry.line_number,
            fallback=strategy.value,
            message=entry.message,
        )
        if self.settings.verbose_logging:
            logger.warning("Extraction error traceback", exc_info=error)

        result = self.execute_fallback_strategy(strategy, context, error)
        log_transition(ExtractionState.FALLBACK_EXECUTED, context, success=result.success)
        log_transition(
            ExtractionState.RECOVERED if result.success else ExtractionState.PERMANENTLY_FAILED,
            context,
        )
        return result

    def get_error_statistics(self) -> ErrorStatistics:
        return self.recorder.snapshot()

    def get_error_log(self) -> list[ErrorLogEntry]:
        return self.recorder.entries

    def reset_statistics(self) -> None:
        self.recorder.reset()
        self.monitor.reset_metrics()

    def update_performance_config(self, **changes: Any) -> None:
        """Update the tunable subset of settings at runtime.

        Raises:
            ValueError: An unknown field was given.
        """

        unknown = set(changes) - _TUNABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown performance settings: {sorted(unknown)}")
        self.settings = self.settings.model_copy(update=changes)
        self.monitor.slow_threshold_ms = self.settings.slow_operation_ms

    # Fallback strategies

    @staticmethod
    def _selection_only(context: ExtractionContext) -> ExtractionResult:
        if not context.has_selection:
            return ExtractionResult.failed(
                ExtractionType.SELECTION,
                "No selection available",
                strategy=FallbackStrategy.SELECTION_ONLY,
            )
        return ExtractionResult(
            content=context.selected_text or "",
            type=ExtractionType.SELECTION,
            success=True,
            strategy=FallbackStrategy.SELECTION_ONLY,
        )

    @staticmethod
    def _line_only(context: ExtractionContext) -> ExtractionResult:
        lines = document_lines(context.document)
        line_number = context.line_number
        if line_number is None or not 0 <= line_number < len(lines):
            return ExtractionResult.failed(
                ExtractionType.LINE, "Invalid line number", strategy=FallbackStrategy.LINE_ONLY
            )
        return ExtractionResult(
            content=lines[line_number],
            type=ExtractionType.LINE,
            success=True,
            strategy=FallbackStrategy.LINE_ONLY,
        )

    def _legacy_extraction(self, context: ExtractionContext) -> ExtractionResult:
        lines = document_lines(context.document)
        line_number = context.line_number
        if line_number is not None and 0 <= line_number < len(lines):
            if detect_header_level(lines[line_number]) != -1:
                return ExtractionResult(
                    content=legacy_section_content(lines, line_number),
                    type=ExtractionType.FALLBACK,
                    success=True,
                    strategy=FallbackStrategy.LEGACY_EXTRACTION,
                )
            if context.document_type.is_checklist_document:
                return ExtractionResult(
                    content=task_with_sub_content(lines, line_number),
                    type=ExtractionType.LINE,
                    success=True,
                    strategy=FallbackStrategy.LEGACY_EXTRACTION,
                )
        return self._line_only(context)
