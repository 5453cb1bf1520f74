"""Read-only document abstraction consumed by the engine."""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, Enum):
    """Closed set of document kinds; selects the extraction strategy."""

    REQUIREMENTS = "requirements"
    DESIGN = "design"
    TASKS = "tasks"
    GENERIC = "generic"

    @property
    def is_checklist_document(self) -> bool:
        return self is DocumentType.TASKS

    @property
    def is_heading_document(self) -> bool:
        return self is not DocumentType.TASKS


_WORKFLOW_FILES = {
    "requirements.md": DocumentType.REQUIREMENTS,
    "design.md": DocumentType.DESIGN,
    "tasks.md": DocumentType.TASKS,
}


def detect_document_type(path: str | Path, workflow_dir_name: str = ".cospec") -> DocumentType | None:
    """Return the workflow document type for ``path``, or ``None``.

    Only ``requirements.md``, ``design.md`` and ``tasks.md`` placed somewhere under a
    ``workflow_dir_name`` directory are recognised.
    """

    posix = PurePosixPath(str(path).replace("\\", "/"))
    if workflow_dir_name not in posix.parts[:-1]:
        return None
    return _WORKFLOW_FILES.get(posix.name)


@runtime_checkable
class TextDocument(Protocol):
    """Host document snapshot.

    Any object exposing ``uri``, ``version`` and ``get_text()`` works; the engine never
    mutates it.
    """

    uri: str
    version: int

    def get_text(self) -> str:  # pragma: no cover - protocol
        ...


def document_lines(document: TextDocument) -> list[str]:
    """Split a document into lines the way every component indexes them."""

    return document.get_text().split("\n")


def document_size(document: TextDocument) -> int:
    """UTF-8 size of the document text in bytes."""

    return len(document.get_text().encode("utf-8"))


class MarkdownDocument(BaseModel):
    """In-memory document snapshot."""

    model_config = ConfigDict(frozen=True)

    uri: str
    text: str = ""
    version: int = Field(default=1, ge=0)

    def get_text(self) -> str:
        return self.text

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    def line_at(self, index: int) -> str:
        lines = self.lines
        if index < 0 or index >= len(lines):
            raise IndexError(f"Line number {index} out of range")
        return lines[index]

    def with_text(self, text: str) -> "MarkdownDocument":
        """Return the next snapshot of this document holding ``text``."""

        return MarkdownDocument(uri=self.uri, text=text, version=self.version + 1)

    @classmethod
    def from_path(cls, path: Path, version: int = 1) -> "MarkdownDocument":
        return cls(uri=path.as_posix(), text=path.read_text(encoding="utf-8"), version=version)
