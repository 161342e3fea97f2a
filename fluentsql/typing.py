from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Union

from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from fluentsql.builder import QueryBuilder

__all__ = (
    "BuilderCallback",
    "DictRow",
    "RowData",
    "StatementParameters",
    "UpdateValue",
)

DictRow: TypeAlias = dict[str, Any]
"""A fetched row keyed by column name."""

RowData: TypeAlias = Mapping[str, Any]
"""A row to be written, keyed by column name."""

StatementParameters: TypeAlias = list[Any]
"""Positional parameters in placeholder order."""

BuilderCallback: TypeAlias = Callable[["QueryBuilder"], Any]
"""A callable that configures a fresh sub-builder (nested groups, subqueries, EXISTS)."""

UpdateValue: TypeAlias = Union[Any, Callable[[], str]]
"""An update value: bound as a parameter, or a callable producing a raw SQL expression."""
