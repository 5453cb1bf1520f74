"""Pydantic models and plain records used across the project."""

from __future__ import annotations

from mdoutline.models.document import (
    DocumentType,
    MarkdownDocument,
    TextDocument,
    detect_document_type,
    document_lines,
    document_size,
)
from mdoutline.models.extraction import (
    ExtractionContext,
    ExtractionResult,
    ExtractionStrategy,
    ExtractionType,
    FallbackStrategy,
)
from mdoutline.models.section import ExtractionOptions, LineRange, Section
from mdoutline.models.statistics import ErrorLogEntry, ErrorStatistics
from mdoutline.models.task import HierarchicalTask, HierarchyNode, IndentStyle, TaskStatus

__all__ = [
    "DocumentType",
    "ErrorLogEntry",
    "ErrorStatistics",
    "ExtractionContext",
    "ExtractionOptions",
    "ExtractionResult",
    "ExtractionStrategy",
    "ExtractionType",
    "FallbackStrategy",
    "HierarchicalTask",
    "HierarchyNode",
    "IndentStyle",
    "LineRange",
    "MarkdownDocument",
    "Section",
    "TaskStatus",
    "TextDocument",
    "detect_document_type",
    "document_lines",
    "document_size",
]
