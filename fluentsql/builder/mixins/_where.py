# ruff: noqa: SLF001
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from fluentsql.builder._expressions import AND, OR, ColumnRef

if TYPE_CHECKING:
    from fluentsql.builder._base import QueryBuilder
    from fluentsql.builder._predicates import PredicateGroup
    from fluentsql.typing import BuilderCallback

__all__ = ("WhereClauseMixin", "like_pattern")


def like_pattern(value: Any, *, leading: bool, trailing: bool) -> str:
    """Trim a value and wrap it in LIKE wildcards."""
    text = str(value).strip()
    return f"{'%' if leading else ''}{text}{'%' if trailing else ''}"


class WhereClauseMixin:
    """Mixin providing WHERE clause methods.

    Every method appends one entry to the WHERE group and returns the builder.
    Methods prefixed ``or`` join their entry with ``OR``; all others with ``AND``.
    """

    _where: "PredicateGroup"

    if TYPE_CHECKING:

        def _sub_builder(self, callback: "BuilderCallback") -> "QueryBuilder": ...

        def _as_subquery(self, value: Any) -> Any: ...

    def where(self, column: str, value: Any, operator: str = "=") -> Self:
        """Add ``column <operator> ?``.

        Args:
            column: Column name, quoted as an identifier.
            value: Value bound as a parameter.
            operator: Comparison operator.

        Returns:
            The current builder instance for method chaining.
        """
        self._where.add_atom(column, operator, value)
        return self

    def or_(self, column: str, value: Any, operator: str = "=") -> Self:
        """Add ``column <operator> ?`` joined with OR."""
        self._where.add_atom(column, operator, value, combinator=OR)
        return self

    def not_(self, column: str, value: Any) -> Self:
        self._where.add_atom(column, "!=", value)
        return self

    def lt(self, column: str, value: Any, inclusive: bool = True) -> Self:
        """Add ``column <= ?`` (or ``<`` when ``inclusive`` is false)."""
        self._where.add_atom(column, "<=" if inclusive else "<", value)
        return self

    def gt(self, column: str, value: Any, inclusive: bool = True) -> Self:
        """Add ``column >= ?`` (or ``>`` when ``inclusive`` is false)."""
        self._where.add_atom(column, ">=" if inclusive else ">", value)
        return self

    def between(self, column: str, start: Any, end: Any) -> Self:
        """Add ``(column BETWEEN start AND end)``.

        The bounds are written into the SQL text as given and are never bound,
        so they must not come from untrusted input.
        """
        self._where.add_atom(column, "BETWEEN", (start, end))
        return self

    def not_between(self, column: str, start: Any, end: Any) -> Self:
        """Add ``(column NOT BETWEEN start AND end)``, bounds unbound as for :meth:`between`."""
        self._where.add_atom(column, "NOT BETWEEN", (start, end))
        return self

    def in_(self, column: str, value: Any) -> Self:
        """Add ``column IN (...)``.

        Args:
            column: Column name.
            value: A list of values, a comma-delimited string, a callable that
                configures a sub-builder (compiled to a subquery), or a single value.

        Returns:
            The current builder instance for method chaining.
        """
        self._where.add_atom(column, "IN", self._as_subquery(value))
        return self

    def not_in(self, column: str, value: Any) -> Self:
        """Add ``column NOT IN (...)``; accepts the same values as :meth:`in_`."""
        self._where.add_atom(column, "NOT IN", self._as_subquery(value))
        return self

    def in_raw(self, column: str, values_sql: str) -> Self:
        """Add ``column IN (<values_sql>)`` with the list written verbatim."""
        self._where.add_atom(column, "INRAW", values_sql)
        return self

    def null(self, column: str) -> Self:
        self._where.add_atom(column, "IS NULL")
        return self

    def not_null(self, column: str) -> Self:
        self._where.add_atom(column, "IS NOT NULL")
        return self

    def zero(self, column: str) -> Self:
        """Match rows whose column is numerically zero but not the empty string."""
        self._where.add_atom(column, "!=", "")
        self._where.add_atom(column, "=", 0)
        return self

    def empty(self, column: str) -> Self:
        """Match rows whose column is the empty string."""
        self._where.add_atom(column, "=", "")
        return self

    def like(self, column: str, value: Any) -> Self:
        """Add ``column LIKE '%value%'``."""
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=True))
        return self

    def rlike(self, column: str, value: Any) -> Self:
        """Add ``column LIKE 'value%'``."""
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=False, trailing=True))
        return self

    def llike(self, column: str, value: Any) -> Self:
        """Add ``column LIKE '%value'``."""
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=False))
        return self

    def or_like(self, column: str, value: Any) -> Self:
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=True), combinator=OR)
        return self

    def or_rlike(self, column: str, value: Any) -> Self:
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=False, trailing=True), combinator=OR)
        return self

    def or_llike(self, column: str, value: Any) -> Self:
        self._where.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=False), combinator=OR)
        return self

    def where_raw(self, expression: str, value: Any, operator: str = "=") -> Self:
        """Add ``<expression> <operator> ?`` with the left side written verbatim."""
        self._where.add_atom(expression, operator, value, is_raw=True)
        return self

    def or_raw(self, expression: str, value: Any, operator: str = "=") -> Self:
        self._where.add_atom(expression, operator, value, combinator=OR, is_raw=True)
        return self

    def raw_where(self, condition: str) -> Self:
        """Add an opaque, parenthesized condition. Nothing is bound."""
        self._where.add_raw(condition)
        return self

    def raw_or(self, condition: str) -> Self:
        self._where.add_raw(condition, combinator=OR)
        return self

    def compare(self, column: str, other_column: str, operator: str = "=") -> Self:
        """Compare two columns: ``column <operator> other_column``. Nothing is bound."""
        self._where.add_atom(column, operator, ColumnRef(other_column))
        return self

    def wheres(self, callback: "BuilderCallback") -> Self:
        """Add a parenthesized group built by ``callback`` on a fresh builder, joined with AND."""
        self._where.add_group(self._sub_builder(callback)._where, combinator=AND)
        return self

    def ors(self, callback: "BuilderCallback") -> Self:
        """Add a parenthesized group built by ``callback`` on a fresh builder, joined with OR."""
        self._where.add_group(self._sub_builder(callback)._where, combinator=OR)
        return self

    def exists(self, callback: "BuilderCallback") -> Self:
        """Add ``EXISTS (SELECT ...)`` where the SELECT is built by ``callback``."""
        self._where.add_exists(self._sub_builder(callback))
        return self
