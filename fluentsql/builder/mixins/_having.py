# ruff: noqa: SLF001
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from fluentsql.builder._expressions import AND, OR, ColumnRef
from fluentsql.builder.mixins._where import like_pattern

if TYPE_CHECKING:
    from fluentsql.builder._base import QueryBuilder
    from fluentsql.builder._predicates import PredicateGroup
    from fluentsql.typing import BuilderCallback

__all__ = ("HavingClauseMixin",)


class HavingClauseMixin:
    """Mixin providing HAVING clause methods.

    Each method mirrors its WHERE counterpart on :class:`~fluentsql.builder.mixins.WhereClauseMixin`
    but appends to the HAVING group. Nested groups, subqueries and EXISTS
    callbacks receive a fresh builder and their HAVING conditions are used.
    """

    _having: "PredicateGroup"

    if TYPE_CHECKING:

        def _sub_builder(self, callback: "BuilderCallback") -> "QueryBuilder": ...

        def _as_subquery(self, value: Any) -> Any: ...

    def having(self, column: str, value: Any, operator: str = "=") -> Self:
        """Add ``column <operator> ?`` to the HAVING clause.

        Args:
            column: Column or output alias, quoted as an identifier.
            value: Value bound as a parameter.
            operator: Comparison operator.

        Returns:
            The current builder instance for method chaining.
        """
        self._having.add_atom(column, operator, value)
        return self

    def or_having(self, column: str, value: Any, operator: str = "=") -> Self:
        self._having.add_atom(column, operator, value, combinator=OR)
        return self

    def having_not(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "!=", value)
        return self

    def having_lt(self, column: str, value: Any, inclusive: bool = True) -> Self:
        self._having.add_atom(column, "<=" if inclusive else "<", value)
        return self

    def having_gt(self, column: str, value: Any, inclusive: bool = True) -> Self:
        self._having.add_atom(column, ">=" if inclusive else ">", value)
        return self

    def having_between(self, column: str, start: Any, end: Any) -> Self:
        """HAVING twin of ``between``; the bounds are written into the text unbound."""
        self._having.add_atom(column, "BETWEEN", (start, end))
        return self

    def having_not_between(self, column: str, start: Any, end: Any) -> Self:
        self._having.add_atom(column, "NOT BETWEEN", (start, end))
        return self

    def having_in(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "IN", self._as_subquery(value))
        return self

    def having_not_in(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "NOT IN", self._as_subquery(value))
        return self

    def having_null(self, column: str) -> Self:
        self._having.add_atom(column, "IS NULL")
        return self

    def having_not_null(self, column: str) -> Self:
        self._having.add_atom(column, "IS NOT NULL")
        return self

    def having_like(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=True))
        return self

    def having_rlike(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=False, trailing=True))
        return self

    def having_llike(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=False))
        return self

    def or_having_like(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=True), combinator=OR)
        return self

    def or_having_rlike(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=False, trailing=True), combinator=OR)
        return self

    def or_having_llike(self, column: str, value: Any) -> Self:
        self._having.add_atom(column, "LIKE", like_pattern(value, leading=True, trailing=False), combinator=OR)
        return self

    def having_raw(self, expression: str, value: Any, operator: str = "=") -> Self:
        """Add ``<expression> <operator> ?`` to HAVING, e.g. ``having_raw("COUNT(*)", 3, ">")``."""
        self._having.add_atom(expression, operator, value, is_raw=True)
        return self

    def or_raw_having(self, expression: str, value: Any, operator: str = "=") -> Self:
        self._having.add_atom(expression, operator, value, combinator=OR, is_raw=True)
        return self

    def raw_having(self, condition: str) -> Self:
        self._having.add_raw(condition)
        return self

    def raw_or_having(self, condition: str) -> Self:
        self._having.add_raw(condition, combinator=OR)
        return self

    def having_compare(self, column: str, other_column: str, operator: str = "=") -> Self:
        self._having.add_atom(column, operator, ColumnRef(other_column))
        return self

    def havings(self, callback: "BuilderCallback") -> Self:
        """Add a parenthesized HAVING group built by ``callback``, joined with AND."""
        self._having.add_group(self._sub_builder(callback)._having, combinator=AND)
        return self

    def ors_having(self, callback: "BuilderCallback") -> Self:
        """Add a parenthesized HAVING group built by ``callback``, joined with OR."""
        self._having.add_group(self._sub_builder(callback)._having, combinator=OR)
        return self

    def exists_having(self, callback: "BuilderCallback") -> Self:
        self._having.add_exists(self._sub_builder(callback))
        return self
