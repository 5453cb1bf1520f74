"""Markdown section parsing."""

from __future__ import annotations

from mdoutline.sections.extractor import (
    DEFAULT_EXTRACTION_OPTIONS,
    HeaderLine,
    MarkdownSectionExtractor,
    detect_header_level,
    find_header_lines,
    find_section_boundary,
    legacy_section_content,
    trim_empty_lines,
)

__all__ = [
    "DEFAULT_EXTRACTION_OPTIONS",
    "HeaderLine",
    "MarkdownSectionExtractor",
    "detect_header_level",
    "find_header_lines",
    "find_section_boundary",
    "legacy_section_content",
    "trim_empty_lines",
]
