"""Decoration plans for task documents.

A plan is a pure description: style keys mapped to the line ranges they cover plus the
style for each key. Rendering is left to the host.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Sequence

from mdoutline.config import Settings, load_settings
from mdoutline.decorations.styles import (
    DecorationStyle,
    DecorationTypeManager,
    HierarchyDecorationConfig,
    StyleKey,
)
from mdoutline.hierarchy.detector import build_hierarchy_tree
from mdoutline.hierarchy.parser import parse_hierarchical_tasks
from mdoutline.logging import document_context, get_logger, log_exception
from mdoutline.models.document import (
    DocumentType,
    TextDocument,
    detect_document_type,
    document_lines,
    document_size,
)
from mdoutline.models.section import LineRange
from mdoutline.models.task import HierarchicalTask, HierarchyNode

logger = get_logger(__name__)

# Range end used for child content lines when the line text is unavailable.
WHOLE_LINE_END = 1000


def apply_decorations(
    tree: Sequence[HierarchyNode],
    lines: Sequence[str] | None = None,
    type_manager: DecorationTypeManager | None = None,
) -> dict[StyleKey, list[LineRange]]:
    """Group every task range, and the child content lines it owns, by style key.

    With a ``type_manager`` the keys are clamped to its configured depth.
    """

    groups: dict[StyleKey, list[LineRange]] = {}
    for root in tree:
        for node in root.walk():
            task = node.task
            if type_manager is not None:
                key = type_manager.key_for(task.status, node.level)
            else:
                key = StyleKey(task.status, node.level)
            ranges = groups.setdefault(key, [])
            ranges.append(task.range)
            for line in task.child_content_lines:
                if lines is not None and 0 <= line < len(lines):
                    ranges.append(LineRange.whole_line(line, len(lines[line])))
                else:
                    ranges.append(LineRange.whole_line(line, WHOLE_LINE_END))
    return groups


@dataclass
class DecorationPlan:
    uri: str
    version: int
    tasks: list[HierarchicalTask]
    tree: list[HierarchyNode]
    ranges: dict[StyleKey, list[LineRange]]
    styles: dict[StyleKey, DecorationStyle] = field(default_factory=dict)


class DecorationManager:
    """Keeps the latest decoration plan per task document."""

    def __init__(
        self,
        settings: Settings | None = None,
        config: HierarchyDecorationConfig | None = None,
    ):
        self.settings = settings or load_settings()
        self.type_manager = DecorationTypeManager(
            config or HierarchyDecorationConfig(max_depth=self.settings.hierarchy_max_depth)
        )
        self._plans: dict[str, DecorationPlan] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> HierarchyDecorationConfig:
        return self.type_manager.config

    def is_tasks_document(self, document: TextDocument) -> bool:
        document_type = detect_document_type(document.uri, self.settings.workflow_dir_name)
        return document_type is DocumentType.TASKS

    def update_decorations(self, document: TextDocument) -> DecorationPlan | None:
        """Re-parse ``document`` and store its plan.

        Returns ``None`` for documents that are not task documents, for blank documents and
        when parsing fails (the stored plan is then dropped).
        """

        if not self.is_tasks_document(document):
            return None

        with document_context(uri=document.uri, operation="update_decorations"):
            if not document.get_text().strip():
                logger.warning("Tasks document appears to be invalid - skipping decorations")
                return None
            size = document_size(document)
            if size > self.settings.max_document_bytes:
                logger.warning("Tasks document is very large (%d bytes) - may impact performance", size)

            try:
                plan = self._build_plan(document)
            except Exception:
                log_exception(logger, "Error updating task decorations", version=document.version)
                self.clear_decorations(document.uri)
                return None

            with self._lock:
                self._plans[document.uri] = plan
            logger.debug("Decorated %d tasks in %d style groups", len(plan.tasks), len(plan.ranges))
            return plan

    def plan_for(self, uri: str) -> DecorationPlan | None:
        with self._lock:
            return self._plans.get(uri)

    def tasks_for(self, uri: str) -> list[HierarchicalTask]:
        plan = self.plan_for(uri)
        return list(plan.tasks) if plan else []

    def clear_decorations(self, uri: str) -> None:
        with self._lock:
            self._plans.pop(uri, None)

    def update_config(self, config: HierarchyDecorationConfig) -> None:
        """Swap the visual configuration. Stored plans are dropped and must be rebuilt."""

        self.type_manager.reconfigure(config)
        with self._lock:
            self._plans.clear()

    def _build_plan(self, document: TextDocument) -> DecorationPlan:
        lines = document_lines(document)
        tasks = parse_hierarchical_tasks(lines)
        tree = build_hierarchy_tree(tasks)
        ranges = apply_decorations(tree, lines, self.type_manager)
        styles = {key: self.type_manager.style_for(key.status, key.level) for key in ranges}
        return DecorationPlan(
            uri=document.uri,
            version=document.version,
            tasks=tasks,
            tree=tree,
            ranges=ranges,
            styles=styles,
        )
