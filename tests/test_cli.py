"""Tests for the command line interface."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from mdoutline.cli import app

runner = CliRunner()


def test_sections_command(tmp_path: Path) -> None:
    """sections lists every heading with its line range."""
    path = tmp_path / "notes.md"
    path.write_text("# A\n## A.1\n# B\n", encoding="utf-8")

    result = runner.invoke(app, ["sections", str(path)])
    assert result.exit_code == 0
    assert "A.1" in result.output
    assert "B" in result.output


def test_extract_command(tmp_path: Path) -> None:
    """extract prints the section under a heading."""
    path = tmp_path / "notes.md"
    path.write_text("# A\nbody\n# B\nother", encoding="utf-8")

    result = runner.invoke(app, ["extract", str(path), "--line", "0"])
    assert result.exit_code == 0
    assert "# A\nbody" in result.output
    assert "other" not in result.output


def test_tasks_and_decorations_commands(tmp_path: Path) -> None:
    """tasks and decorations describe the checklist hierarchy."""
    path = tmp_path / "tasks.md"
    path.write_text("- [ ] 1. Root\n  - [x] 1.1 Child\n", encoding="utf-8")

    tasks = runner.invoke(app, ["tasks", str(path)])
    assert tasks.exit_code == 0
    assert "1.1 [completed] 1.1 Child" in tasks.output

    decorations = runner.invoke(app, ["decorations", str(path)])
    assert decorations.exit_code == 0
    assert "completed_level_1" in decorations.output
