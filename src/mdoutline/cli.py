"""CLI entrypoints for mdoutline."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from mdoutline.config import Settings, load_settings
from mdoutline.decorations import DecorationTypeManager, HierarchyDecorationConfig, apply_decorations
from mdoutline.extraction import SectionContentExtractor
from mdoutline.hierarchy import build_hierarchy_tree, parse_hierarchical_tasks
from mdoutline.logging import configure_logging, get_logger
from mdoutline.models import DocumentType, ExtractionContext, MarkdownDocument, detect_document_type
from mdoutline.sections import MarkdownSectionExtractor

app = typer.Typer(add_completion=False, help="Markdown section and task hierarchy inspector")
logger = get_logger(__name__)


def _setup() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level, verbose=settings.verbose_logging)
    return settings


def _read(path: Path) -> MarkdownDocument:
    if not path.is_file():
        raise typer.BadParameter(f"No such file: {path}")
    return MarkdownDocument.from_path(path)


@app.command()
def sections(path: Path = typer.Argument(..., help="Markdown file")) -> None:
    """List every section with its half-open line range."""

    settings = _setup()
    document = _read(path)
    for section in MarkdownSectionExtractor(settings).extract_sections(document):
        indent = "  " * (section.level - 1)
        typer.echo(f"{section.start_line:>5}-{section.end_line:<5} {indent}{section.clean_title}")


@app.command()
def extract(
    path: Path = typer.Argument(..., help="Markdown file"),
    line: int = typer.Option(..., "--line", "-l", help="Zero-based line number"),
    selection: str | None = typer.Option(None, "--selection", help="Selected text, returned verbatim"),
    document_type: DocumentType | None = typer.Option(
        None,
        "--type",
        help="Document type (detected from the path when omitted)",
        case_sensitive=False,
    ),
    force_section: bool = typer.Option(False, "--force-section", help="Always try section extraction"),
) -> None:
    """Print the content a request at LINE resolves to."""

    settings = _setup()
    document = _read(path)
    resolved_type = (
        document_type
        or detect_document_type(path, settings.workflow_dir_name)
        or DocumentType.GENERIC
    )
    context = ExtractionContext(
        document=document,
        document_type=resolved_type,
        line_number=line,
        selected_text=selection,
        force_section=force_section,
    )

    result = asyncio.run(SectionContentExtractor(settings=settings).extract_content(context))
    logger.info("Extraction finished type=%s success=%s", result.type.value, result.success)
    if not result.success:
        typer.echo(result.error or "Extraction failed", err=True)
        raise typer.Exit(code=1)
    typer.echo(result.content)


@app.command()
def tasks(path: Path = typer.Argument(..., help="Checklist markdown file")) -> None:
    """Print the task hierarchy with ids, statuses and owned content lines."""

    _setup()
    document = _read(path)
    for task in parse_hierarchical_tasks(document):
        indent = "  " * task.hierarchy_level
        owned = f" (+{len(task.child_content_lines)} lines)" if task.child_content_lines else ""
        typer.echo(
            f"{task.line:>5} {indent}{task.hierarchical_id} [{task.status.value}] {task.text}{owned}"
        )


@app.command()
def decorations(path: Path = typer.Argument(..., help="Checklist markdown file")) -> None:
    """Print decoration style groups and the lines each one covers."""

    settings = _setup()
    document = _read(path)
    type_manager = DecorationTypeManager(HierarchyDecorationConfig(max_depth=settings.hierarchy_max_depth))
    tree = build_hierarchy_tree(parse_hierarchical_tasks(document))
    for key, ranges in apply_decorations(tree, document.lines, type_manager).items():
        style = type_manager.style_for(key.status, key.level)
        covered = ",".join(str(r.start_line) for r in ranges)
        border = f"{style.border_width}px {style.border_style or 'none'}"
        typer.echo(f"{key} color={style.color} border={border} lines={covered}")


if __name__ == "__main__":
    app()
