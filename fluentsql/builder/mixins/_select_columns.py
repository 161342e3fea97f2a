from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import Self

from fluentsql.builder._binder import render_literal
from fluentsql.builder._expressions import quote_identifier

if TYPE_CHECKING:
    from fluentsql.protocols import ConnectorProtocol

__all__ = ("SelectColumnsMixin",)


class SelectColumnsMixin:
    """Mixin maintaining the projection and alias tables of a SELECT."""

    _select: "list[str]"
    _alias: "dict[str, str]"
    _alias_raw: "dict[str, str]"
    _connector: "Optional[ConnectorProtocol]"

    def select(self, *columns: str) -> Self:
        """Set the output columns, replacing any earlier selection.

        Each name is resolved against the alias table, then the raw-alias
        table, and otherwise selected as a plain column.

        Args:
            *columns: Output column names or aliases.

        Returns:
            The current builder instance for method chaining.
        """
        self._select = list(columns)
        return self

    def alias(self, column: str, alias: str) -> Self:
        """Expose ``column`` under the output name ``alias``."""
        self._alias[alias] = column
        return self

    def alias_raw(self, expression: str, alias: str) -> Self:
        """Expose a raw SQL expression under the output name ``alias``."""
        self._alias_raw[alias] = expression
        return self

    def date(self, column: str, alias: Optional[str] = None, fmt: Optional[str] = None) -> Self:
        """Alias a unix-timestamp column rendered through ``FROM_UNIXTIME``.

        Args:
            column: Timestamp column.
            alias: Output name; defaults to the column name.
            fmt: Optional MySQL date format, quoted as a literal.

        Returns:
            The current builder instance for method chaining.
        """
        fmt_arg = f", {render_literal(fmt, self._connector)}" if fmt else ""
        self._alias_raw[alias or column] = f"FROM_UNIXTIME({quote_identifier(column)}{fmt_arg})"
        return self

    def _projection_snapshot(self) -> "tuple[list[str], dict[str, str], dict[str, str]]":
        return list(self._select), dict(self._alias), dict(self._alias_raw)

    def _restore_projection(self, snapshot: "tuple[list[str], dict[str, str], dict[str, str]]") -> None:
        self._select, self._alias, self._alias_raw = snapshot

    def _resolve_projection(self, default_columns: "list[Any]") -> "list[str]":
        if self._select:
            return [self._project(column) for column in self._select]
        items = [_column_or_star(column) for column in default_columns]
        items.extend(f"{quote_identifier(column)} AS {quote_identifier(alias)}" for alias, column in self._alias.items())
        items.extend(f"{expression} AS {quote_identifier(alias)}" for alias, expression in self._alias_raw.items())
        return items

    def _project(self, column: str) -> str:
        source = self._alias.get(column)
        if source:
            return f"{quote_identifier(source)} AS {quote_identifier(column)}"
        expression = self._alias_raw.get(column)
        if expression:
            return f"{expression} AS {quote_identifier(column)}"
        return _column_or_star(column)


def _column_or_star(column: str) -> str:
    return column if column == "*" else quote_identifier(column)
