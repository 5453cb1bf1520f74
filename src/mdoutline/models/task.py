"""Checklist task models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from mdoutline.logging import get_logger
from mdoutline.models.section import LineRange

logger = get_logger(__name__)


class TaskStatus(str, Enum):
    """Status encoded by the checkbox marker of a task line."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def from_marker(cls, marker: str) -> "TaskStatus":
        """Map a checkbox character to a status.

        Unknown characters default to ``NOT_STARTED`` with a warning instead of failing.
        """

        status = _MARKERS.get(marker)
        if status is None:
            logger.warning("Unknown task status character %r - defaulting to not_started", marker)
            return cls.NOT_STARTED
        return status


_MARKERS = {
    " ": TaskStatus.NOT_STARTED,
    "-": TaskStatus.IN_PROGRESS,
    "x": TaskStatus.COMPLETED,
}


class HierarchicalTask(BaseModel):
    """One checklist line with its position in the task hierarchy."""

    line: int = Field(ge=0)
    range: LineRange
    status: TaskStatus
    text: str
    task_id: str | None = None
    hierarchy_level: int = Field(ge=0)
    parent_line: int | None = None
    children_lines: list[int] = Field(default_factory=list)
    child_content_lines: list[int] = Field(default_factory=list)
    hierarchy_path: list[int] = Field(default_factory=list)
    hierarchical_id: str = ""


@dataclass(eq=False)
class HierarchyNode:
    """Tree wrapper around a task. ``parent`` is a non-owning back reference."""

    task: HierarchicalTask
    level: int
    children: list["HierarchyNode"] = field(default_factory=list)
    parent: "HierarchyNode | None" = field(default=None, repr=False)

    def walk(self):
        """Yield this node and all descendants depth-first, in document order."""

        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class IndentStyle:
    """Dominant indentation convention of a checklist document."""

    type: Literal["space", "tab"]
    size: int
