"""Line-level extraction helpers shared by the content policy and its fallbacks."""

from __future__ import annotations

import re
from typing import Sequence

_TASK_ITEM_RE = re.compile(r"^[-*]\s*\[[ x-]\]")

TAB_WIDTH = 4


def indent_width(line: str) -> int:
    """Leading indentation width: a space counts 1, a tab counts ``TAB_WIDTH``."""

    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += TAB_WIDTH
        else:
            break
    return width


def is_task_item(line: str) -> bool:
    """True for checkbox list items, regardless of indentation."""

    return bool(_TASK_ITEM_RE.match(line.strip()))


def task_with_sub_content(lines: Sequence[str], task_line: int) -> str:
    """Return the task at ``task_line`` followed by the lines it owns.

    Blank lines are skipped. Deeper-indented lines (including nested task items) are kept,
    as are plain ``- `` list items at the task's own indentation. Scanning stops at a task
    item at the same or shallower indentation, at other same-indentation text, or at any
    shallower line.
    """

    task_text = lines[task_line]
    task_indent = indent_width(task_text)
    collected = [task_text]

    for line in lines[task_line + 1 :]:
        stripped = line.strip()
        if not stripped:
            continue

        indent = indent_width(line)
        if indent > task_indent:
            collected.append(line)
        elif indent == task_indent and stripped.startswith("- ") and not is_task_item(line):
            collected.append(line)
        else:
            break

    return "\n".join(collected)
