"""Indentation-derived hierarchy levels and the task forest."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Sequence

from mdoutline.models.document import TextDocument, document_lines
from mdoutline.models.task import HierarchicalTask, HierarchyNode, IndentStyle

TASK_LINE_RE = re.compile(r"^(\s*)-\s+\[([ x-])\]\s+(.+)$")
_INDENTED_TASK_RE = re.compile(r"^(\s+)-\s+\[")

DEFAULT_INDENT_SIZE = 2


def indent_level(indent: str) -> int:
    """Two spaces or one tab make one level."""

    return indent.count(" ") // 2 + indent.count("\t")


def detect_hierarchy_level(line: str) -> int:
    """Return the hierarchy level of a task line, or -1 for anything else."""

    match = TASK_LINE_RE.match(line.rstrip())
    if not match:
        return -1
    return indent_level(match.group(1))


def build_hierarchy_tree(tasks: Iterable[HierarchicalTask]) -> list[HierarchyNode]:
    """Arrange ``tasks`` (in document order) into a forest.

    Each task becomes a child of the nearest preceding task with a smaller level; tasks
    without one are roots.
    """

    roots: list[HierarchyNode] = []
    stack: list[HierarchyNode] = []
    for task in tasks:
        node = HierarchyNode(task=task, level=task.hierarchy_level)
        while stack and stack[-1].level >= node.level:
            stack.pop()
        if stack:
            node.parent = stack[-1]
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)
    return roots


def analyze_indent_style(source: TextDocument | Sequence[str]) -> IndentStyle:
    """Guess whether nested tasks are indented with tabs or spaces, and how wide."""

    lines = document_lines(source) if isinstance(source, TextDocument) else source
    samples = [m.group(1) for m in map(_INDENTED_TASK_RE.match, lines) if m]

    space_samples = [s for s in samples if " " in s]
    tab_samples = [s for s in samples if "\t" in s]
    if len(tab_samples) > len(space_samples):
        return IndentStyle(type="tab", size=1)

    widths = Counter(len(s) for s in space_samples)
    if not widths:
        return IndentStyle(type="space", size=DEFAULT_INDENT_SIZE)
    # Counter preserves insertion order, so ties go to the width seen first.
    size, _ = max(widths.items(), key=lambda item: item[1])
    return IndentStyle(type="space", size=size)

