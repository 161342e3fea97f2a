"""Logging helpers for fluentsql.

Every module obtains its logger through :func:`get_logger`, which keeps all
loggers under the ``fluentsql`` namespace and attaches a
:class:`StatementContextFilter`. While a builder hands a statement to its
connector it opens a :func:`statement_context`, so every record logged in
that window, by the builder or by the connector, carries the operation and
statement details in ``extra_fields``. :class:`StructuredFormatter` renders
those fields as JSON; the library never installs handlers on its own.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from fluentsql._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Generator
    from logging import LogRecord

__all__ = (
    "StatementContextFilter",
    "StructuredFormatter",
    "get_logger",
    "get_statement_context",
    "statement_context",
)

ROOT_LOGGER_NAME = "fluentsql"

_statement_context_var: ContextVar[dict[str, Any] | None] = ContextVar("fluentsql_statement_context", default=None)


def get_statement_context() -> dict[str, Any] | None:
    """Get a copy of the fields of the statement currently being dispatched.

    Returns:
        The active fields, or None outside :func:`statement_context`
    """
    context = _statement_context_var.get()
    return dict(context) if context is not None else None


@contextmanager
def statement_context(**fields: Any) -> Generator[None, None, None]:
    """Stamp ``fields`` onto every fluentsql log record emitted inside the block.

    Nested blocks extend the enclosing fields; the previous context is
    restored on exit, including when the block raises.

    Args:
        **fields: Statement details such as ``operation`` or ``parameter_count``.

    Yields:
        None
    """
    token = _statement_context_var.set({**(_statement_context_var.get() or {}), **fields})
    try:
        yield
    finally:
        _statement_context_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter that inlines ``extra_fields``."""

    def format(self, record: LogRecord) -> str:
        """Format log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON formatted log entry
        """
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)  # pyright: ignore

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return encode_json(log_entry)


class StatementContextFilter(logging.Filter):
    """Filter that merges the active statement context into ``extra_fields``.

    Fields passed explicitly through ``extra`` win over the context.
    """

    def filter(self, record: LogRecord) -> bool:  # noqa: PLR6301
        if context := _statement_context_var.get():
            record.extra_fields = {**context, **getattr(record, "extra_fields", {})}  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance with standardized configuration.

    Args:
        name: Logger name. If not provided, returns the root fluentsql logger.

    Returns:
        Configured logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)

    if not any(isinstance(f, StatementContextFilter) for f in logger.filters):
        logger.addFilter(StatementContextFilter())

    return logger
