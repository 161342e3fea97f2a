from typing import Optional

from typing_extensions import Self

from fluentsql.exceptions import SQLBuilderError

__all__ = ("GroupByClauseMixin", "LimitOffsetClauseMixin", "OrderByClauseMixin")

SORT_DIRECTIONS = frozenset({"ASC", "DESC"})


class OrderByClauseMixin:
    """Mixin providing ORDER BY directives."""

    _order: "dict[str, str]"

    def order(self, column: str, sort: str) -> Self:
        """Order by ``column`` in direction ``sort``.

        Ordering the same column again replaces its direction but keeps its position.

        Raises:
            SQLBuilderError: If ``sort`` is not ASC or DESC.

        Returns:
            The current builder instance for method chaining.
        """
        direction = sort.strip().upper()
        if direction not in SORT_DIRECTIONS:
            msg = f"Sort direction must be ASC or DESC, got {sort!r}"
            raise SQLBuilderError(msg, operation="order", column=column, sort=sort)
        self._order[column] = direction
        return self

    def asc(self, column: str) -> Self:
        return self.order(column, "ASC")

    def desc(self, column: str) -> Self:
        return self.order(column, "DESC")


class GroupByClauseMixin:
    """Mixin providing GROUP BY directives."""

    _group: "list[str]"

    def group(self, *columns: str) -> Self:
        """Add GROUP BY columns, ignoring ones already present."""
        self._group = list(dict.fromkeys([*self._group, *columns]))
        return self


class LimitOffsetClauseMixin:
    """Mixin providing LIMIT and OFFSET."""

    _limit: Optional[int]
    _offset: Optional[int]

    def limit(self, limit: int, offset: Optional[int] = None) -> Self:
        """Set LIMIT, reading two arguments in MySQL ``LIMIT offset, count`` order.

        ``limit(10)`` limits to ten rows. ``limit(20, 10)`` skips twenty rows and
        returns ten: when a positive second argument is given, the first becomes
        the offset and the second the row count.

        Raises:
            SQLBuilderError: If an argument is not an integer.

        Returns:
            The current builder instance for method chaining.
        """
        for value in (limit, offset):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                msg = f"LIMIT arguments must be integers, got {value!r}"
                raise SQLBuilderError(msg, operation="limit", limit=limit, offset=offset)
        if offset is not None and offset > 0:
            self._offset = limit
            self._limit = offset
        else:
            self._limit = limit
        return self
