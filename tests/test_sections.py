"""Tests for section parsing and boundaries."""

from __future__ import annotations

import pytest

from mdoutline.config import Settings
from mdoutline.errors import DocumentTooLargeError, InvalidHeaderError
from mdoutline.models import ExtractionOptions, MarkdownDocument
from mdoutline.sections import (
    MarkdownSectionExtractor,
    detect_header_level,
    find_section_boundary,
    legacy_section_content,
)


def test_detect_header_level() -> None:
    """Headings need 1-6 hashes, whitespace and text."""
    assert detect_header_level("# A") == 1
    assert detect_header_level("###### Six") == 6
    assert detect_header_level("## Trailing   ") == 2
    assert detect_header_level("####### Seven") == -1
    assert detect_header_level("#NoSpace") == -1
    assert detect_header_level("#   ") == -1
    assert detect_header_level("  # Indented") == -1
    assert detect_header_level("plain text") == -1


def test_sections_are_half_open_and_nested(settings: Settings) -> None:
    """Each heading ends at the next heading of equal or higher rank."""
    doc = MarkdownDocument(uri="doc.md", text="# A\n## A.1\n## A.2\n# B")
    sections = MarkdownSectionExtractor(settings).extract_sections(doc)

    assert [(s.clean_title, s.start_line, s.end_line) for s in sections] == [
        ("A", 0, 3),
        ("A.1", 1, 2),
        ("A.2", 2, 3),
        ("B", 3, 4),
    ]
    first = sections[0]
    assert first.content == "# A\n## A.1\n## A.2"
    assert first.body_content == "## A.1\n## A.2"
    assert first.range.end_line == 2
    assert first.range.end_char == len("## A.2")


def test_find_section_boundary_respects_depth_and_subsections() -> None:
    """Depth and subsection options cut the section early."""
    lines = ["# A", "## B", "### C", "#### D", "text"]

    assert find_section_boundary(lines, 0, 1) == (0, 5)
    assert find_section_boundary(lines, 0, 1, ExtractionOptions(max_depth=1)) == (0, 2)
    assert find_section_boundary(lines, 0, 1, ExtractionOptions(include_subsections=False)) == (0, 1)
    assert find_section_boundary(lines, 1, 2) == (1, 5)


def test_get_section_content_options(settings: Settings) -> None:
    """Header removal and blank-line trimming apply to the extracted block."""
    doc = MarkdownDocument(
        uri="doc.md", text="# Title\n\nBody\n\n## Sub\nsub text\n\n# Next"
    )
    extractor = MarkdownSectionExtractor(settings)

    assert extractor.get_section_content(doc, 0) == "# Title\n\nBody\n\n## Sub\nsub text"
    assert (
        extractor.get_section_content(doc, 0, ExtractionOptions(include_header=False))
        == "Body\n\n## Sub\nsub text"
    )
    assert (
        extractor.get_section_content(doc, 0, ExtractionOptions(include_subsections=False))
        == "# Title\n\nBody"
    )


def test_get_section_content_rejects_non_headers(settings: Settings) -> None:
    """Out-of-range and non-heading lines are invalid headers."""
    doc = MarkdownDocument(uri="doc.md", text="# Title\n\nBody")
    extractor = MarkdownSectionExtractor(settings)

    with pytest.raises(InvalidHeaderError):
        extractor.get_section_content(doc, 2)
    with pytest.raises(InvalidHeaderError):
        extractor.get_section_content(doc, 99)
    with pytest.raises(InvalidHeaderError):
        extractor.get_section_content(doc, -1)


def test_cache_returns_same_result_until_version_changes(settings: Settings) -> None:
    """Results are cached per (uri, version)."""
    extractor = MarkdownSectionExtractor(settings)
    doc = MarkdownDocument(uri="doc.md", text="# A\ntext")

    first = extractor.extract_sections(doc)
    assert extractor.extract_sections(doc) == first
    stats = extractor.cache_stats()
    assert (stats.hits, stats.misses, stats.size) == (1, 1, 1)

    updated = doc.with_text("# A\n# B")
    assert updated.version == doc.version + 1
    second = extractor.extract_sections(updated)
    assert second != first
    assert [s.clean_title for s in second] == ["A", "B"]

    extractor.clear_cache()
    assert extractor.cache_stats().size == 0


def test_cached_sections_are_not_shared_with_callers(settings: Settings) -> None:
    """Mutating a returned list does not change what the cache returns next."""
    extractor = MarkdownSectionExtractor(settings)
    doc = MarkdownDocument(uri="doc.md", text="# A\n## B")

    extractor.extract_sections(doc).clear()
    cached = extractor.extract_sections(doc)
    assert [s.clean_title for s in cached] == ["A", "B"]

    cached.pop()
    assert len(extractor.extract_sections(doc)) == 2
    assert extractor.cache_stats().hits == 2


def test_cache_evicts_oldest_snapshot() -> None:
    """The cache holds at most section_cache_size snapshots."""
    extractor = MarkdownSectionExtractor(Settings(_env_file=None, section_cache_size=2))
    for name in ("a.md", "b.md", "c.md"):
        extractor.extract_sections(MarkdownDocument(uri=name, text="# X"))

    stats = extractor.cache_stats()
    assert stats.size == 2
    assert stats.evictions == 1


def test_oversized_document_is_rejected_in_bytes() -> None:
    """Size is measured on the UTF-8 encoding, before parsing."""
    extractor = MarkdownSectionExtractor(Settings(_env_file=None, max_document_bytes=10))

    extractor.extract_sections(MarkdownDocument(uri="ok.md", text="# 1234567"))
    with pytest.raises(DocumentTooLargeError) as excinfo:
        extractor.extract_sections(MarkdownDocument(uri="big.md", text="é" * 6))
    assert "12 bytes" in str(excinfo.value)


def test_find_section(settings: Settings) -> None:
    """find_section looks a section up by its heading line."""
    doc = MarkdownDocument(uri="doc.md", text="intro\n# A\nbody")
    extractor = MarkdownSectionExtractor(settings)

    section = extractor.find_section(doc, 1)
    assert section is not None and section.clean_title == "A"
    assert extractor.find_section(doc, 0) is None


def test_legacy_section_content_stops_at_any_heading() -> None:
    """The reduced outline ends at the next heading of any level."""
    lines = ["# A", "intro", "", "## B", "b text"]

    assert legacy_section_content(lines, 0) == "# A\nintro"
    assert legacy_section_content(lines, 3) == "## B\nb text"
    assert legacy_section_content(lines, 1) == ""
