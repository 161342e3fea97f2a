"""General text helpers used while assembling SQL."""

from typing import Optional

__all__ = (
    "ci_equal",
    "split_trimmed",
)


def split_trimmed(value: str, separator: str = ",") -> "list[str]":
    """Split a delimited string and trim every item.

    Empty items are dropped, so ``"a, ,b,"`` gives ``["a", "b"]``.

    Args:
        value: The delimited string.
        separator: Item separator. Defaults to a comma.

    Returns:
        The trimmed, non-empty items in their original order.
    """
    return [item for item in (part.strip() for part in value.split(separator)) if item]


def ci_equal(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive string equality that tolerates ``None``."""
    if left is None or right is None:
        return left is right
    return left.casefold() == right.casefold()
