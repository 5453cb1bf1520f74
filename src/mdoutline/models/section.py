"""Section models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LineRange(BaseModel):
    """Zero-based, end-exclusive character span between two positions."""

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0)
    start_char: int = Field(default=0, ge=0)
    end_line: int = Field(ge=0)
    end_char: int = Field(default=0, ge=0)

    @classmethod
    def whole_line(cls, line: int, length: int) -> "LineRange":
        return cls(start_line=line, start_char=0, end_line=line, end_char=max(0, length))


class Section(BaseModel):
    """One heading and everything until the next heading of equal or higher rank.

    ``start_line``/``end_line`` form a half-open line range; ``start_line`` is always the
    heading line itself.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    clean_title: str
    level: int = Field(ge=1, le=6)
    header_line: int = Field(ge=0)
    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    content: str
    body_content: str
    range: LineRange

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line


class ExtractionOptions(BaseModel):
    """Knobs for :meth:`MarkdownSectionExtractor.get_section_content`."""

    model_config = ConfigDict(frozen=True)

    include_header: bool = True
    include_subsections: bool = True
    # Relative to the requested heading's own level.
    max_depth: int = Field(default=3, ge=0, le=6)
    trim_empty_lines: bool = True
    timeout_ms: float = Field(default=5000.0, gt=0.0)
