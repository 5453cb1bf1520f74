"""Markdown section extraction.

Turns document lines into an ordered list of :class:`Section` records with exact, half-open
line boundaries, and extracts the content belonging to one heading under a set of
:class:`ExtractionOptions`.
"""

from __future__ import annotations

import re
import time
from typing import NamedTuple, Sequence

from mdoutline.config import Settings, load_settings
from mdoutline.core.cache import CacheStats, LRUCache
from mdoutline.errors import (
    CacheError,
    DocumentTooLargeError,
    ExtractionTimeoutError,
    InvalidHeaderError,
    MdOutlineError,
    ParsingError,
)
from mdoutline.logging import get_logger
from mdoutline.models.document import TextDocument, document_lines, document_size
from mdoutline.models.section import ExtractionOptions, LineRange, Section

logger = get_logger(__name__)

_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")

DEFAULT_EXTRACTION_OPTIONS = ExtractionOptions()


class HeaderLine(NamedTuple):
    line_number: int
    level: int
    title: str


def detect_header_level(line: str) -> int:
    """Return the heading level (1-6) of ``line``, or -1 when it is not a heading.

    Trailing whitespace is ignored; a heading needs 1-6 ``#`` followed by whitespace and
    some text.
    """

    match = _HEADER_RE.match(line.rstrip())
    return len(match.group(1)) if match else -1


def find_header_lines(lines: Sequence[str]) -> list[HeaderLine]:
    """Return every heading in ``lines`` in document order."""

    headers: list[HeaderLine] = []
    for index, line in enumerate(lines):
        match = _HEADER_RE.match(line.rstrip())
        if match:
            headers.append(HeaderLine(index, len(match.group(1)), match.group(2).strip()))
    return headers


def find_section_boundary(
    lines: Sequence[str],
    start_line: int,
    header_level: int,
    options: ExtractionOptions = DEFAULT_EXTRACTION_OPTIONS,
) -> tuple[int, int]:
    """Return the half-open ``(start, end)`` line range of the section at ``start_line``.

    The section stops at the first later heading that is of the same or higher rank, at
    any heading when subsections are excluded, or at a descendant heading deeper than
    ``header_level + options.max_depth``.
    """

    end_line = len(lines)
    for index in range(start_line + 1, len(lines)):
        level = detect_header_level(lines[index])
        if level == -1:
            continue
        if level <= header_level:
            end_line = index
            break
        if not options.include_subsections:
            end_line = index
            break
        if level - header_level > options.max_depth:
            end_line = index
            break
    return start_line, end_line


def trim_empty_lines(lines: Sequence[str]) -> list[str]:
    """Drop leading and trailing blank lines."""

    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return list(lines[start:end])


def legacy_section_content(lines: Sequence[str], header_line: int) -> str:
    """Reduced extraction: the heading plus everything up to the next heading of any level.

    No size checks, caching or options apply. Returns an empty string when ``header_line``
    is not a heading.
    """

    if not 0 <= header_line < len(lines) or detect_header_level(lines[header_line]) == -1:
        return ""
    end = len(lines)
    for index in range(header_line + 1, len(lines)):
        if detect_header_level(lines[index]) != -1:
            end = index
            break
    return "\n".join(trim_empty_lines(lines[header_line:end]))


class _Deadline:
    """Cooperative deadline checked between extraction phases."""

    def __init__(self, timeout_ms: float):
        self.timeout_ms = timeout_ms
        self._started = time.perf_counter()

    def check(self) -> None:
        elapsed_ms = (time.perf_counter() - self._started) * 1000
        if elapsed_ms > self.timeout_ms:
            raise ExtractionTimeoutError(f"Section extraction timeout after {self.timeout_ms:.0f}ms")


class MarkdownSectionExtractor:
    """Section parser with a bounded per-snapshot cache.

    Results are keyed by ``(document.uri, document.version)``: a new version always
    re-parses, an unchanged version returns the cached list as-is.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or load_settings()
        self.max_document_bytes = self.settings.max_document_bytes
        self._cache: LRUCache[tuple[str, int], list[Section]] = LRUCache(
            max_size=self.settings.section_cache_size
        )

    detect_header_level = staticmethod(detect_header_level)
    find_section_boundary = staticmethod(find_section_boundary)

    def extract_sections(self, document: TextDocument) -> list[Section]:
        """Return every section of ``document`` in document order.

        Raises:
            DocumentTooLargeError: The text exceeds ``max_document_bytes``.
            ParsingError: Building the section list failed.
            CacheError: The cache could not be read or written.
        """

        self.validate_document_size(document)

        key = (document.uri, document.version)
        try:
            cached = self._cache.get(key)
        except Exception as exc:
            raise CacheError(f"Section cache lookup failed: {exc}", uri=document.uri) from exc
        if cached is not None:
            return list(cached)

        try:
            sections = self._build_sections(document_lines(document))
        except MdOutlineError:
            raise
        except Exception as exc:
            raise ParsingError(
                f"Failed to extract sections from document: {exc}", uri=document.uri
            ) from exc

        try:
            self._cache.put(key, list(sections))
        except Exception as exc:
            raise CacheError(f"Section cache update failed: {exc}", uri=document.uri) from exc

        logger.debug("Parsed %d sections (version %s)", len(sections), document.version)
        return sections

    def get_section_content(
        self,
        document: TextDocument,
        header_line: int,
        options: ExtractionOptions | None = None,
    ) -> str:
        """Return the content of the section whose heading sits at ``header_line``.

        Raises:
            InvalidHeaderError: ``header_line`` is out of range or not a heading.
            ExtractionTimeoutError: ``options.timeout_ms`` elapsed between phases.
        """

        opts = options or DEFAULT_EXTRACTION_OPTIONS
        deadline = _Deadline(opts.timeout_ms)
        lines = document_lines(document)

        if header_line < 0 or header_line >= len(lines):
            raise InvalidHeaderError(
                f"Invalid header line number: {header_line} is out of range", uri=document.uri
            )
        header_level = detect_header_level(lines[header_line])
        if header_level == -1:
            raise InvalidHeaderError(f"Line {header_line} is not a valid header", uri=document.uri)

        deadline.check()
        start, end = find_section_boundary(lines, header_line, header_level, opts)
        deadline.check()

        content_lines = lines[start:end]
        if not opts.include_header:
            content_lines = content_lines[1:]
        if opts.trim_empty_lines:
            content_lines = trim_empty_lines(content_lines)
        return "\n".join(content_lines)

    def find_section(self, document: TextDocument, header_line: int) -> Section | None:
        """Return the section whose heading is at ``header_line``, if any."""

        for section in self.extract_sections(document):
            if section.header_line == header_line:
                return section
        return None

    def validate_document_size(self, document: TextDocument) -> None:
        size = document_size(document)
        if size > self.max_document_bytes:
            raise DocumentTooLargeError(size, self.max_document_bytes, uri=document.uri)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def _build_sections(self, lines: list[str]) -> list[Section]:
        headers = find_header_lines(lines)

        # Every heading is closed by the next heading of equal or higher rank; open
        # headings are kept on a stack of strictly increasing levels.
        end_lines = [len(lines)] * len(headers)
        open_headers: list[int] = []
        for position, header in enumerate(headers):
            while open_headers and headers[open_headers[-1]].level >= header.level:
                end_lines[open_headers.pop()] = header.line_number
            open_headers.append(position)

        sections: list[Section] = []
        for header, end_line in zip(headers, end_lines):
            section_lines = lines[header.line_number : end_line]
            last_line = end_line - 1
            sections.append(
                Section(
                    title=lines[header.line_number],
                    clean_title=header.title,
                    level=header.level,
                    header_line=header.line_number,
                    start_line=header.line_number,
                    end_line=end_line,
                    content="\n".join(section_lines),
                    body_content="\n".join(section_lines[1:]),
                    range=LineRange(
                        start_line=header.line_number,
                        start_char=0,
                        end_line=last_line,
                        end_char=len(lines[last_line]),
                    ),
                )
            )
        return sections
