"""Declarative decoration plans for hierarchical task documents."""

from __future__ import annotations

from mdoutline.decorations.manager import DecorationManager, DecorationPlan, apply_decorations
from mdoutline.decorations.styles import (
    BorderWidth,
    DecorationStyle,
    DecorationTypeManager,
    HierarchyDecorationConfig,
    IndentVisualization,
    StatusColors,
    StyleKey,
)

__all__ = [
    "BorderWidth",
    "DecorationManager",
    "DecorationPlan",
    "DecorationStyle",
    "DecorationTypeManager",
    "HierarchyDecorationConfig",
    "IndentVisualization",
    "StatusColors",
    "StyleKey",
    "apply_decorations",
]
