"""Tests for decoration styles and plans."""

from __future__ import annotations

import pytest

from mdoutline.config import Settings
from mdoutline.decorations import (
    DecorationManager,
    DecorationTypeManager,
    HierarchyDecorationConfig,
    IndentVisualization,
    StyleKey,
    apply_decorations,
)
from mdoutline.hierarchy import build_hierarchy_tree, parse_hierarchical_tasks
from mdoutline.models import LineRange, MarkdownDocument, TaskStatus


def test_type_manager_builds_a_style_per_status_and_level() -> None:
    """Colours follow the per-status ladder and borders widen with depth."""
    manager = DecorationTypeManager()

    assert len(manager.styles) == 3 * 10
    root = manager.style_for(TaskStatus.COMPLETED, 0)
    assert (root.color, root.border_color, root.border_width) == ("#10B981", "#10B981", 2)
    deep = manager.style_for(TaskStatus.COMPLETED, 5)
    assert (deep.color, deep.border_width) == ("#A7F3D0", 7)
    assert deep.border_style == "line"
    assert deep.is_whole_line


def test_disabled_indent_visualization_drops_borders() -> None:
    """Turning indent visualization off removes the border at every level."""
    config = HierarchyDecorationConfig(indent_visualization=IndentVisualization(enabled=False))
    manager = DecorationTypeManager(config)

    assert {style.border_width for style in manager.styles.values()} == {0}
    assert {style.border_style for style in manager.styles.values()} == {None}
    assert manager.style_for(TaskStatus.COMPLETED, 0).color == "#10B981"


def test_indent_visualization_style_reaches_every_level() -> None:
    """The configured indent style is carried by each generated style."""
    config = HierarchyDecorationConfig(
        max_depth=2, indent_visualization=IndentVisualization(style="background")
    )
    styles = DecorationTypeManager(config).styles

    assert {style.border_style for style in styles.values()} == {"background"}
    assert styles[StyleKey(TaskStatus.NOT_STARTED, 1)].border_width == 3


def test_levels_beyond_max_depth_reuse_deepest_style() -> None:
    """Levels past max_depth clamp to the deepest configured level."""
    manager = DecorationTypeManager(HierarchyDecorationConfig(max_depth=3))

    assert manager.key_for(TaskStatus.IN_PROGRESS, 7) == StyleKey(TaskStatus.IN_PROGRESS, 2)
    assert manager.style_for(TaskStatus.IN_PROGRESS, 7) == manager.style_for(TaskStatus.IN_PROGRESS, 2)
    assert str(manager.key_for(TaskStatus.IN_PROGRESS, 7)) == "in_progress_level_2"


def test_apply_decorations_groups_ranges(tasks_doc: MarkdownDocument) -> None:
    """Each task and its child content share the task's style key."""
    lines = tasks_doc.lines
    tree = build_hierarchy_tree(parse_hierarchical_tasks(lines))
    groups = apply_decorations(tree, lines)

    assert set(groups) == {
        StyleKey(TaskStatus.NOT_STARTED, 0),
        StyleKey(TaskStatus.COMPLETED, 1),
        StyleKey(TaskStatus.IN_PROGRESS, 1),
        StyleKey(TaskStatus.COMPLETED, 0),
        StyleKey(TaskStatus.NOT_STARTED, 1),
    }
    assert groups[StyleKey(TaskStatus.COMPLETED, 1)] == [
        LineRange.whole_line(3, len(lines[3])),
        LineRange.whole_line(4, len(lines[4])),
    ]
    assert [r.start_line for r in groups[StyleKey(TaskStatus.NOT_STARTED, 1)]] == [8]


def test_manager_builds_plans_for_task_documents(settings: Settings, tasks_doc: MarkdownDocument) -> None:
    """Only tasks.md under the workflow directory is decorated."""
    manager = DecorationManager(settings)
    plan = manager.update_decorations(tasks_doc)

    assert plan is not None
    assert plan.version == tasks_doc.version
    assert [t.line for t in manager.tasks_for(tasks_doc.uri)] == [2, 3, 5, 7, 8]
    assert set(plan.styles) == set(plan.ranges)

    other = MarkdownDocument(uri="/project/.cospec/design.md", text="- [ ] not decorated")
    assert not manager.is_tasks_document(other)
    assert manager.update_decorations(other) is None

    blank = MarkdownDocument(uri="/other/.cospec/tasks.md", text="  \n")
    assert manager.update_decorations(blank) is None

    manager.clear_decorations(tasks_doc.uri)
    assert manager.tasks_for(tasks_doc.uri) == []


def test_manager_drops_state_on_failure(
    settings: Settings, tasks_doc: MarkdownDocument, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A parse failure clears the stored plan instead of keeping stale state."""
    manager = DecorationManager(settings)
    assert manager.update_decorations(tasks_doc) is not None

    def boom(lines):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr("mdoutline.decorations.manager.parse_hierarchical_tasks", boom)
    assert manager.update_decorations(tasks_doc.with_text(tasks_doc.text + "\n")) is None
    assert manager.plan_for(tasks_doc.uri) is None


def test_update_config_restyles(settings: Settings, tasks_doc: MarkdownDocument) -> None:
    """A new config drops stored plans; rebuilt plans use the new depth."""
    manager = DecorationManager(settings)
    manager.update_decorations(tasks_doc)

    manager.update_config(HierarchyDecorationConfig(max_depth=1))
    assert manager.plan_for(tasks_doc.uri) is None

    plan = manager.update_decorations(tasks_doc)
    assert plan is not None
    assert {key.level for key in plan.ranges} == {0}
