"""Content extraction request/response models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mdoutline.models.document import DocumentType, TextDocument
from mdoutline.models.section import ExtractionOptions, Section


class ExtractionType(str, Enum):
    """Which policy produced an :class:`ExtractionResult`."""

    SELECTION = "selection"
    SECTION = "section"
    LINE = "line"
    FALLBACK = "fallback"


class FallbackStrategy(str, Enum):
    """Degraded extraction behaviours chosen from a classified error."""

    SELECTION_ONLY = "selection_only"
    LINE_ONLY = "line_only"
    LEGACY_EXTRACTION = "legacy_extraction"


class ExtractionResult(BaseModel):
    """Outcome of one extraction request. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    type: ExtractionType
    success: bool
    error: str | None = None
    section: Section | None = None
    strategy: FallbackStrategy | None = None

    @classmethod
    def failed(cls, type: ExtractionType, error: str, **extra) -> "ExtractionResult":
        return cls(content="", type=type, success=False, error=error, **extra)


@dataclass
class ExtractionContext:
    """Single extraction request coming from the host."""

    document: TextDocument
    document_type: DocumentType
    line_number: int | None = None
    selected_text: str | None = None
    force_section: bool = False

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_text and self.selected_text.strip())


class ExtractionStrategy(BaseModel):
    """Per document type extraction options."""

    model_config = ConfigDict(frozen=True)

    requirements: ExtractionOptions = Field(
        default_factory=lambda: ExtractionOptions(max_depth=2, timeout_ms=3000)
    )
    design: ExtractionOptions = Field(
        default_factory=lambda: ExtractionOptions(max_depth=3, timeout_ms=3000)
    )
    tasks: ExtractionOptions = Field(
        default_factory=lambda: ExtractionOptions(
            include_header=False,
            include_subsections=False,
            max_depth=1,
            timeout_ms=2000,
        )
    )
    generic: ExtractionOptions = Field(
        default_factory=lambda: ExtractionOptions(max_depth=2, timeout_ms=3000)
    )

    def options_for(self, document_type: DocumentType) -> ExtractionOptions:
        return getattr(self, document_type.value)

    def merged(self, **overrides: ExtractionOptions) -> "ExtractionStrategy":
        """Return a copy with the given document types' options replaced."""

        unknown = set(overrides) - {t.value for t in DocumentType}
        if unknown:
            raise ValueError(f"Unknown document types: {sorted(unknown)}")
        return self.model_copy(update=overrides)
