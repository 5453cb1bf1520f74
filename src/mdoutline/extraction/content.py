"""Content extraction policy: selection, then section, then line."""

from __future__ import annotations

from mdoutline.config import Settings, load_settings
from mdoutline.core.monitor import PerformanceMonitor, Stopwatch
from mdoutline.errors import InvalidHeaderError
from mdoutline.extraction.fallback import ExtractionState, FallbackController, log_transition
from mdoutline.extraction.lines import task_with_sub_content
from mdoutline.logging import document_context
from mdoutline.models.document import DocumentType, document_lines
from mdoutline.models.extraction import (
    ExtractionContext,
    ExtractionResult,
    ExtractionStrategy,
    ExtractionType,
)
from mdoutline.models.section import ExtractionOptions
from mdoutline.sections.extractor import MarkdownSectionExtractor, detect_header_level


class SectionContentExtractor:
    """Decides what content a request at a given line refers to.

    ``extract_content`` never raises: every failure is routed through the
    :class:`FallbackController` and comes back as an :class:`ExtractionResult`.
    """

    def __init__(
        self,
        strategy: ExtractionStrategy | None = None,
        settings: Settings | None = None,
        section_extractor: MarkdownSectionExtractor | None = None,
        controller: FallbackController | None = None,
    ):
        self.settings = settings or load_settings()
        self._strategy = strategy or ExtractionStrategy()
        self._section_extractor = section_extractor or MarkdownSectionExtractor(self.settings)
        self.controller = controller or FallbackController(self.settings)
        self._metrics = PerformanceMonitor(self.settings.slow_operation_ms)

    @property
    def strategy(self) -> ExtractionStrategy:
        return self._strategy

    @property
    def section_extractor(self) -> MarkdownSectionExtractor:
        return self._section_extractor

    async def extract_content(self, context: ExtractionContext) -> ExtractionResult:
        """Resolve the content for ``context``.

        A non-blank selection is returned verbatim. Otherwise the request is size-checked
        and run under the document type's timeout: heading lines yield their section, other
        lines yield the line itself (a task plus its sub-content in tasks documents).
        """

        with document_context(uri=context.document.uri, operation="extract_content"):
            stopwatch = Stopwatch()
            log_transition(ExtractionState.ATTEMPTING, context)
            try:
                if context.has_selection:
                    result = ExtractionResult(
                        content=context.selected_text or "",
                        type=ExtractionType.SELECTION,
                        success=True,
                    )
                else:
                    self.controller.validate_document_size(context.document)
                    options = self.get_extraction_options(context.document_type)

                    async def run() -> ExtractionResult:
                        return await self._extract(context, options)

                    result = await self.controller.monitor_performance(
                        run, context, options.timeout_ms, label="extract_content"
                    )
                log_transition(ExtractionState.SUCCEEDED, context, type=result.type.value)
            except Exception as exc:
                result = self.controller.handle_extraction_error(exc, context)
            finally:
                self._metrics.record_operation(context.document_type.value, stopwatch.elapsed_ms)
            return result

    def should_extract_section(self, context: ExtractionContext) -> bool:
        if context.force_section:
            return True
        if not context.document_type.is_heading_document:
            return False
        return self._is_header_line(context)

    def get_extraction_options(self, document_type: DocumentType) -> ExtractionOptions:
        return self._strategy.options_for(document_type)

    def update_strategy(self, **options_by_type: ExtractionOptions) -> None:
        """Replace the options of the named document types, e.g. ``tasks=ExtractionOptions()``."""

        self._strategy = self._strategy.merged(**options_by_type)

    def get_performance_metrics(self) -> dict[str, float]:
        """Moving average request duration in milliseconds, per document type."""

        return self._metrics.moving_averages()

    def cleanup(self) -> None:
        self._section_extractor.clear_cache()
        self._metrics.reset_metrics()

    async def _extract(
        self, context: ExtractionContext, options: ExtractionOptions
    ) -> ExtractionResult:
        if self.should_extract_section(context):
            section_result = await self._extract_section(context, options)
            if section_result.success and section_result.content.strip():
                return section_result

        line_result = self._extract_line(context)
        if line_result.success and line_result.content.strip():
            return line_result

        return ExtractionResult.failed(ExtractionType.FALLBACK, "No content could be extracted")

    async def _extract_section(
        self, context: ExtractionContext, options: ExtractionOptions
    ) -> ExtractionResult:
        line_number = context.line_number
        if line_number is None:
            return ExtractionResult.failed(ExtractionType.SECTION, "Line number not provided")

        lines = document_lines(context.document)
        if not 0 <= line_number < len(lines):
            raise InvalidHeaderError(
                f"Invalid header line number: {line_number} is out of range",
                uri=context.document.uri,
            )
        if detect_header_level(lines[line_number]) == -1:
            raise InvalidHeaderError(
                "Specified line is not a valid header", uri=context.document.uri
            )

        extractor = self._section_extractor
        content = await self.controller.monitor_performance(
            lambda: extractor.get_section_content(context.document, line_number, options),
            context,
            options.timeout_ms,
            label="get_section_content",
        )
        section = extractor.find_section(context.document, line_number)
        return ExtractionResult(
            content=content, type=ExtractionType.SECTION, success=True, section=section
        )

    @staticmethod
    def _extract_line(context: ExtractionContext) -> ExtractionResult:
        line_number = context.line_number
        if line_number is None:
            return ExtractionResult.failed(ExtractionType.LINE, "Line number not provided")

        lines = document_lines(context.document)
        if not 0 <= line_number < len(lines):
            return ExtractionResult.failed(ExtractionType.LINE, "Line number out of range")

        if context.document_type.is_checklist_document:
            content = task_with_sub_content(lines, line_number)
        else:
            content = lines[line_number]
        return ExtractionResult(content=content, type=ExtractionType.LINE, success=True)

    @staticmethod
    def _is_header_line(context: ExtractionContext) -> bool:
        line_number = context.line_number
        if line_number is None:
            return False
        lines = document_lines(context.document)
        if not 0 <= line_number < len(lines):
            return False
        return detect_header_level(lines[line_number]) != -1
