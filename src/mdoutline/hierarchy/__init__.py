"""Checklist hierarchy detection and parsing."""

from __future__ import annotations

from mdoutline.hierarchy.detector import (
    analyze_indent_style,
    build_hierarchy_tree,
    detect_hierarchy_level,
    indent_level,
)
from mdoutline.hierarchy.parser import extract_task_id, parse_hierarchical_tasks

__all__ = [
    "analyze_indent_style",
    "build_hierarchy_tree",
    "detect_hierarchy_level",
    "extract_task_id",
    "indent_level",
    "parse_hierarchical_tasks",
]
