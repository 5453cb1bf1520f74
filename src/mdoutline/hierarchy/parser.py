"""Two-pass parser for hierarchical checklist documents.

Pass 1 collects task lines with their status, id, level, path and parent. Pass 2 assigns
indented non-task lines to the task that owns them.
"""

from __future__ import annotations

import re
from typing import Sequence

from mdoutline.hierarchy.detector import detect_hierarchy_level, indent_level
from mdoutline.logging import get_logger
from mdoutline.models.document import TextDocument, document_lines
from mdoutline.models.section import LineRange
from mdoutline.models.task import HierarchicalTask, TaskStatus

logger = get_logger(__name__)

_TASK_PREFIX_RE = re.compile(r"^(\s*)-\s+\[([ x-])\]\s+(.+)")
_TASK_ID_RE = re.compile(r"^(\d+(?:\.\d+)?)\.?\s+")
_CHILD_CONTENT_RE = re.compile(r"^(\s+)(.+)")
_TASK_START_RE = re.compile(r"^(\s*)-\s+\[([ x-])\]\s+")


def extract_task_id(label: str) -> str | None:
    """Return the leading ``N`` or ``N.M`` of a task label."""

    match = _TASK_ID_RE.match(label)
    return match.group(1) if match else None


class _PathCounter:
    """Per-level counters producing paths like ``[2, 1]`` for the first child of task 2."""

    def __init__(self) -> None:
        self._counters: list[int] = []
        self._path: list[int] = []

    def advance(self, level: int) -> list[int]:
        while len(self._counters) <= level:
            self._counters.append(0)
        while len(self._path) <= level:
            self._path.append(0)
        for deeper in range(level + 1, len(self._counters)):
            self._counters[deeper] = 0
        self._counters[level] += 1
        self._path[level] = self._counters[level]
        del self._path[level + 1 :]
        return list(self._path)


def parse_hierarchical_tasks(source: TextDocument | Sequence[str]) -> list[HierarchicalTask]:
    """Parse every checklist task in ``source`` in document order.

    A line that cannot be parsed is logged and skipped; this function does not raise for
    document content.
    """

    lines = document_lines(source) if isinstance(source, TextDocument) else list(source)
    tasks = _collect_tasks(lines)
    _assign_child_content(lines, tasks)
    return tasks


def _collect_tasks(lines: Sequence[str]) -> list[HierarchicalTask]:
    tasks: list[HierarchicalTask] = []
    by_line: dict[int, HierarchicalTask] = {}
    last_line_by_level: dict[int, int] = {}
    paths = _PathCounter()

    for index, line in enumerate(lines):
        match = _TASK_PREFIX_RE.match(line)
        if not match:
            continue
        try:
            label = match.group(3).strip()
            if not label:
                logger.warning("Empty task text at line %d", index + 1)
                continue

            level = detect_hierarchy_level(line)
            if level == -1:
                continue

            path = paths.advance(level)
            parent_line = last_line_by_level.get(level - 1) if level > 0 else None
            task = HierarchicalTask(
                line=index,
                range=LineRange.whole_line(index, len(line)),
                status=TaskStatus.from_marker(match.group(2)),
                text=label,
                task_id=extract_task_id(label),
                hierarchy_level=level,
                parent_line=parent_line,
                hierarchy_path=path,
                hierarchical_id=".".join(str(part) for part in path),
            )
        except Exception as exc:
            logger.warning("Error processing hierarchical task at line %d: %s", index + 1, exc)
            continue

        if parent_line is not None:
            by_line[parent_line].children_lines.append(index)
        tasks.append(task)
        by_line[index] = task
        last_line_by_level[level] = index

    return tasks


def _assign_child_content(lines: Sequence[str], tasks: list[HierarchicalTask]) -> None:
    by_line = {task.line: task for task in tasks}
    # Tasks seen so far, with strictly increasing levels from bottom to top.
    open_tasks: list[HierarchicalTask] = []

    for index, line in enumerate(lines):
        task = by_line.get(index)
        if task is not None:
            while open_tasks and open_tasks[-1].hierarchy_level >= task.hierarchy_level:
                open_tasks.pop()
            open_tasks.append(task)
            continue

        if not line.strip() or _TASK_START_RE.match(line):
            continue
        match = _CHILD_CONTENT_RE.match(line)
        if not match:
            continue

        level = indent_level(match.group(1))
        owner = next((t for t in reversed(open_tasks) if t.hierarchy_level <= level), None)
        if owner is not None and owner.hierarchy_level < level:
            owner.child_content_lines.append(index)

