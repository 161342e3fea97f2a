from collections.abc import Iterator, Sequence
from math import ceil
from typing import Any, Generic, TypeVar

__all__ = ("PaginatedResult",)

T = TypeVar("T")


class PaginatedResult(Generic[T]):
    """Container for one page of rows returned by ``paginate()``."""

    __slots__ = ("data", "page", "size", "total")

    data: Sequence[T]
    page: int
    size: int
    total: int

    def __init__(self, data: Sequence[T], page: int, size: int, total: int) -> None:
        """Initialize PaginatedResult.

        Args:
            data: Rows on this page.
            page: One-based page number.
            size: Maximal number of rows per page.
            total: Number of rows matching the query across all pages.
        """
        self.data = data
        self.page = page
        self.size = size
        self.total = total

    @property
    def offset(self) -> int:
        return max(self.page - 1, 0) * self.size

    @property
    def pages(self) -> int:
        """Number of pages needed for ``total`` rows."""
        return ceil(self.total / self.size) if self.size > 0 else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def meta(self) -> "dict[str, int]":
        """Paging metadata without the rows."""
        return {"page": self.page, "size": self.size, "total": self.total}

    def to_dict(self) -> "dict[str, Any]":
        return {"data": list(self.data), **self.meta()}

    def __iter__(self) -> "Iterator[T]":
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PaginatedResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(page={self.page}, size={self.size}, total={self.total}, rows={len(self.data)})"
