"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_document_var: contextvars.ContextVar[str] = contextvars.ContextVar("mdoutline_document", default="-")
_operation_var: contextvars.ContextVar[str] = contextvars.ContextVar("mdoutline_operation", default="-")

_FORMAT = "doc=%(document)s op=%(operation)s %(name)s: %(message)s"


class _ContextFilter(logging.Filter):
    """Inject document context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.document = _document_var.get()  # type: ignore[attr-defined]
        record.operation = _operation_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def document_context(*, uri: str, operation: str | None = None) -> Any:
    """Temporarily bind document context for structured logging.

    Args:
        uri: Identity of the document being processed.
        operation: Optional operation name (e.g. ``extract_content``).
    """

    token_doc = _document_var.set(uri)
    token_op = _operation_var.set(operation or _operation_var.get())
    try:
        yield
    finally:
        _document_var.reset(token_doc)
        _operation_var.reset(token_op)


def configure_logging(level: str = "INFO", *, verbose: bool = False) -> None:
    """Install a rich console handler on the root logger.

    Calling it again reconfigures the installed handler instead of adding a second one.

    Args:
        level: Logging level name.
        verbose: Show local variables in tracebacks.
    """

    root = logging.getLogger()
    root.setLevel(level)

    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        root.addHandler(handler)
    handler.tracebacks_show_locals = verbose
    if not any(isinstance(f, _ContextFilter) for f in handler.filters):
        handler.addFilter(_ContextFilter())
    # RichHandler renders time and level itself.
    handler.setFormatter(logging.Formatter(_FORMAT))


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit a single structured line: ``event | key=value key=value``.

    The same fields are attached as ``record.fields`` so handlers can consume them without
    re-parsing the message.
    """

    logger.log(level, "%s | %s", event, _render(fields), extra={"fields": fields})


def log_exception(logger: logging.Logger, msg: str, **context: Any) -> None:
    """Log the exception being handled, with context rendered like :func:`log_event`."""

    if context:
        logger.exception("%s | %s", msg, _render(context))
    else:
        logger.exception("%s", msg)


def _render(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())
