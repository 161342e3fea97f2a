"""Statement text assembly.

Functions here turn already-compiled clause fragments into complete
SELECT / INSERT / UPDATE / DELETE text. Empty clauses are omitted and the
rest are joined with single spaces.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional

from fluentsql.builder._expressions import quote_identifier
from fluentsql.exceptions import InvalidInsertRowsError
from fluentsql.utils.logging import get_logger

if TYPE_CHECKING:
    from fluentsql.builder._binder import ParameterBinder
    from fluentsql.config import BuilderConfig

__all__ = (
    "assemble_delete",
    "assemble_insert",
    "assemble_select",
    "assemble_update",
    "prepare_batch_rows",
    "render_limit",
    "render_table",
)

logger = get_logger("fluentsql.builder.assembler")


def _join_clauses(*clauses: str) -> str:
    return " ".join(clause for clause in clauses if clause)


def render_table(table: Optional[str], db: Optional[str], config: "BuilderConfig") -> str:
    """Render the statement target, falling back to the template token when no table is bound."""
    target = quote_identifier(table) if table else config.table_token
    return f"{quote_identifier(db)}.{target}" if db else target


def render_limit(limit: Optional[int], offset: Optional[int]) -> str:
    if limit is None:
        return ""
    if offset is not None:
        return f"LIMIT {offset}, {limit}"
    return f"LIMIT {limit}"


def assemble_select(
    *,
    projection: "Sequence[str]",
    table: str,
    where: str = "",
    group: "Sequence[str]" = (),
    having: str = "",
    order: "Optional[Mapping[str, str]]" = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> str:
    """Assemble a SELECT statement.

    Args:
        projection: Rendered select-list items.
        table: Rendered table reference.
        where: Compiled WHERE clause, keyword included.
        group: GROUP BY column names.
        having: Compiled HAVING clause, keyword included.
        order: Column to direction mapping, in ORDER BY order.
        limit: Row count.
        offset: Rows to skip; only rendered together with ``limit``.

    Returns:
        The statement text.
    """
    group_by = f"GROUP BY {', '.join(quote_identifier(column) for column in group)}" if group else ""
    order_by = (
        f"ORDER BY {', '.join(f'{quote_identifier(column)} {direction}' for column, direction in order.items())}"
        if order
        else ""
    )
    return _join_clauses(
        f"SELECT {', '.join(projection)} FROM {table}",
        where,
        group_by,
        having,
        order_by,
        render_limit(limit, offset),
    )


def assemble_insert(table: str, columns: "Sequence[str]", binder: "ParameterBinder", rows: "Sequence[Sequence[Any]]") -> str:
    """Assemble ``INSERT INTO table (cols) VALUES (...), (...)``, binding every row in order."""
    column_list = ",".join(quote_identifier(column) for column in columns)
    values = ",".join(f"({binder.bind_many(row)})" for row in rows)
    return f"INSERT INTO {table} ({column_list}) VALUES {values}"


def assemble_update(table: str, assignments: "Sequence[str]", where: str) -> str:
    return _join_clauses(f"UPDATE {table} SET {', '.join(assignments)}", where)


def assemble_delete(table: str, where: str) -> str:
    return _join_clauses(f"DELETE FROM {table}", where)


def prepare_batch_rows(rows: Any) -> "tuple[list[str], list[list[Any]]]":
    """Validate batch insert rows and order their values by sorted column name.

    The first row's sorted key set is canonical; every other row must have
    exactly the same keys, in any order.

    Args:
        rows: A sequence of mappings.

    Raises:
        InvalidInsertRowsError: If ``rows`` is not a sequence of mappings or a
            row's key set differs from the first row's.

    Returns:
        The sorted column names and each row's values in that column order.
    """
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Sequence):
        msg = "Batch insert expects a list of row mappings"
        raise InvalidInsertRowsError(msg, reason="non-sequential", rows_type=type(rows).__name__)

    columns: list[str] = []
    values: list[list[Any]] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            msg = f"Batch insert row {index} is not a mapping"
            raise InvalidInsertRowsError(msg, reason="non-mapping-row", row=index, rows_type=type(row).__name__)
        keys = sorted(row)
        if index == 0:
            columns = keys
        elif keys != columns:
            logger.debug("Batch insert row %d does not match the first row's columns", index)
            msg = f"Insert columns of row {index} do not match the first row"
            raise InvalidInsertRowsError(msg, reason="column-mismatch", row=index, first=columns, invalid=keys)
        values.append([row[key] for key in keys])
    return columns, values
