"""Content extraction policy and fallback recovery."""

from __future__ import annotations

from mdoutline.extraction.content import SectionContentExtractor
from mdoutline.extraction.fallback import ExtractionState, FallbackController
from mdoutline.extraction.lines import indent_width, is_task_item, task_with_sub_content
from mdoutline.extraction.statistics import ErrorStatisticsRecorder

__all__ = [
    "ErrorStatisticsRecorder",
    "ExtractionState",
    "FallbackController",
    "SectionContentExtractor",
    "indent_width",
    "is_task_item",
    "task_with_sub_content",
]
