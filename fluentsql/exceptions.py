from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "ConnectorError",
    "FluentSQLError",
    "ImproperConfigurationError",
    "InvalidInsertRowsError",
    "InvalidUpdateValueError",
    "MissingConnectorError",
    "SQLBuilderError",
    "SQLParsingError",
    "wrap_exceptions",
)


class FluentSQLError(Exception):
    """Base exception class from which all fluentsql exceptions inherit."""

    detail: str
    context: "dict[str, Any]"

    def __init__(self, *args: Any, detail: str = "", context: "Optional[dict[str, Any]]" = None) -> None:
        """Initialize ``FluentSQLError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
            context: structured payload describing the failing operation and the offending data.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        self.context = dict(context or {})
        super().__init__(*str_args)

    @property
    def operation(self) -> "Optional[str]":
        """Name of the builder operation that failed, if known."""
        return self.context.get("operation")

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(FluentSQLError):
    """Improper Configuration error.

    Raised when the builder is asked to do something its configuration cannot support.
    """


class MissingConnectorError(ImproperConfigurationError):
    """An execute-mode terminal call was made without a bound connector."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Cannot run {operation!r}: no connector is bound. Bind one with set_connector() or switch to compile mode with sql(True)",
            context={"operation": operation},
        )


class SQLBuilderError(FluentSQLError):
    """Issues Building or Generating SQL statements."""

    def __init__(
        self, message: Optional[str] = None, *, operation: Optional[str] = None, **data: Any
    ) -> None:
        if message is None:
            message = "Issues building SQL statement."
        context: dict[str, Any] = {"operation": operation} if operation else {}
        context.update(data)
        super().__init__(message, context=context)


class InvalidInsertRowsError(SQLBuilderError):
    """A batch insert was given rows that cannot share one VALUES list."""

    def __init__(self, message: str, **data: Any) -> None:
        super().__init__(message, operation="insert", **data)

    @property
    def row(self) -> "Optional[int]":
        """Index of the offending row, if the failure is row specific."""
        return self.context.get("row")


class InvalidUpdateValueError(SQLBuilderError):
    """A callable update value did not produce a SQL expression string."""

    def __init__(self, column: str, value: Any) -> None:
        super().__init__(
            f"Update value for column {column!r} must resolve to a SQL expression string, got {type(value).__name__}",
            operation="update",
            column=column,
            value=value,
        )


class SQLParsingError(FluentSQLError):
    """Issues parsing SQL statements."""

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL statement."
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message, context={"operation": "validate", "sql": sql})
        self.sql = sql


class ConnectorError(FluentSQLError):
    """The storage connector failed while running a statement."""


@contextmanager
def wrap_exceptions(operation: str, wrap_exceptions: bool = True) -> Generator[None, None, None]:
    try:
        yield

    except FluentSQLError:
        raise
    except Exception as exc:
        if wrap_exceptions is False:
            raise
        msg = f"An error occurred during the {operation!r} operation."
        raise ConnectorError(detail=msg, context={"operation": operation}) from exc
