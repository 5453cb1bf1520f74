"""Per-level decoration styles for checklist tasks."""

from __future__ import annotations

from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from mdoutline.models.task import TaskStatus


class BorderWidth(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: int = Field(default=2, ge=0)
    increment: int = Field(default=1, ge=0)


class StatusColors(BaseModel):
    """Colour ladders, root level first. Levels past the end reuse the last shade."""

    model_config = ConfigDict(frozen=True)

    not_started: list[str] = Field(
        default_factory=lambda: ["#6B7280", "#9CA3AF", "#D1D5DB", "#E5E7EB"], min_length=1
    )
    in_progress: list[str] = Field(
        default_factory=lambda: ["#F59E0B", "#FBBF24", "#FCD34D", "#FDE68A"], min_length=1
    )
    completed: list[str] = Field(
        default_factory=lambda: ["#10B981", "#34D399", "#6EE7B7", "#A7F3D0"], min_length=1
    )

    def ladder(self, status: TaskStatus) -> list[str]:
        return getattr(self, status.value)


class IndentVisualization(BaseModel):
    """How depth is drawn. Disabled means no border at any level."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    style: Literal["line", "background", "border"] = "line"


class HierarchyDecorationConfig(BaseModel):
    """Visual configuration of hierarchical task decorations."""

    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(default=10, ge=1)
    colors: StatusColors = Field(default_factory=StatusColors)
    border_width: BorderWidth = Field(default_factory=BorderWidth)
    indent_visualization: IndentVisualization = Field(default_factory=IndentVisualization)

    def color_for(self, status: TaskStatus, level: int) -> str:
        ladder = self.colors.ladder(status)
        return ladder[min(level, len(ladder) - 1)]

    def border_width_for(self, level: int) -> int:
        return self.border_width.base + self.border_width.increment * level


class StyleKey(NamedTuple):
    status: TaskStatus
    level: int

    def __str__(self) -> str:
        return f"{self.status.value}_level_{self.level}"


class DecorationStyle(BaseModel):
    """Declarative style for one (status, level) pair."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus
    level: int = Field(ge=0)
    color: str
    border_color: str
    border_width: int
    border_style: str | None = None
    is_whole_line: bool = True

    @property
    def key(self) -> StyleKey:
        return StyleKey(self.status, self.level)


class DecorationTypeManager:
    """Builds and serves one :class:`DecorationStyle` per status for every level below ``max_depth``."""

    def __init__(self, config: HierarchyDecorationConfig | None = None):
        self.config = config or HierarchyDecorationConfig()
        self._styles = self._build_styles(self.config)

    @staticmethod
    def _build_styles(config: HierarchyDecorationConfig) -> dict[StyleKey, DecorationStyle]:
        styles: dict[StyleKey, DecorationStyle] = {}
        indent = config.indent_visualization
        for level in range(config.max_depth):
            for status in TaskStatus:
                color = config.color_for(status, level)
                style = DecorationStyle(
                    status=status,
                    level=level,
                    color=color,
                    border_color=color,
                    border_width=config.border_width_for(level) if indent.enabled else 0,
                    border_style=indent.style if indent.enabled else None,
                )
                styles[style.key] = style
        return styles

    @property
    def styles(self) -> dict[StyleKey, DecorationStyle]:
        return dict(self._styles)

    def key_for(self, status: TaskStatus, level: int) -> StyleKey:
        """Style key for ``level``, clamped to the deepest configured level."""

        return StyleKey(status, min(max(level, 0), self.config.max_depth - 1))

    def style_for(self, status: TaskStatus, level: int) -> DecorationStyle:
        return self._styles[self.key_for(status, level)]

    def reconfigure(self, config: HierarchyDecorationConfig) -> None:
        self.config = config
        self._styles = self._build_styles(config)
