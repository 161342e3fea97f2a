"""Fluent MySQL query builder with positional parameter binding.

A :class:`QueryBuilder` accumulates projections, WHERE/HAVING predicates,
grouping, ordering and pagination, then a terminal call (``get``, ``update``,
``insert``, ...) assembles the statement. In execute mode the SQL skeleton
and its parameters are handed to the bound connector; in compile mode the
parameters are inlined and the literal SQL text is returned instead.
"""

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

import sqlglot
from sqlglot.errors import ParseError as SQLGlotParseError
from typing_extensions import Self

from fluentsql.builder._assembler import (
    assemble_delete,
    assemble_insert,
    assemble_select,
    assemble_update,
    prepare_batch_rows,
    render_table,
)
from fluentsql.builder._binder import CompiledQuery, ParameterBinder, substitute_parameters
from fluentsql.builder._expressions import quote_identifier
from fluentsql.builder._pagination import PaginatedResult
from fluentsql.builder._predicates import PredicateGroup
from fluentsql.builder.mixins import (
    GroupByClauseMixin,
    HavingClauseMixin,
    LimitOffsetClauseMixin,
    OrderByClauseMixin,
    SelectColumnsMixin,
    WhereClauseMixin,
)
from fluentsql.config import DIALECT, BuilderConfig, get_global_config
from fluentsql.exceptions import InvalidUpdateValueError, MissingConnectorError, SQLBuilderError, SQLParsingError, wrap_exceptions
from fluentsql.protocols import IntrospectsSchema, SubqueryProtocol
from fluentsql.utils.logging import get_logger, statement_context
from fluentsql.utils.text import ci_equal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fluentsql.protocols import ConnectorProtocol
    from fluentsql.typing import BuilderCallback, DictRow, RowData, UpdateValue

__all__ = ("BuilderMode", "QueryBuilder")

logger = get_logger("fluentsql.builder")

_VALIDATION_TABLE = "__fluentsql_table__"


class BuilderMode(str, Enum):
    """What terminal calls produce."""

    COMPILE = "compile"
    """Return literal SQL text with parameters inlined. No side effects."""
    EXECUTE = "execute"
    """Delegate parameterized SQL to the connector."""


class QueryBuilder(
    WhereClauseMixin,
    HavingClauseMixin,
    SelectColumnsMixin,
    GroupByClauseMixin,
    OrderByClauseMixin,
    LimitOffsetClauseMixin,
):
    """Stateful builder for one SQL statement.

    Not safe for concurrent use: give each logical statement its own builder,
    or call :meth:`reset` before reusing one.

    Example:
        >>> QueryBuilder().table("users").where("age", 18, ">=").sql(True).get()
        "SELECT * FROM `users` WHERE `age` >= 18"
    """

    def __init__(
        self,
        connector: "Optional[ConnectorProtocol]" = None,
        config: Optional[BuilderConfig] = None,
        *,
        table: Optional[str] = None,
        db: Optional[str] = None,
    ) -> None:
        """Initialize the builder.

        Args:
            connector: Storage connector used in execute mode and for quoting in compile mode.
            config: Builder settings; defaults to the process-wide configuration.
            table: Table to bind. Unbound builders emit the configured table token.
            db: Database (schema) qualifying the table.
        """
        self._connector = connector
        self._config = config or get_global_config()
        self._init_state()
        self._table = table
        self._db = db

    def _init_state(self) -> None:
        self._mode = BuilderMode.EXECUTE
        self._db: Optional[str] = None
        self._table: Optional[str] = None
        self._select: list[str] = []
        self._alias: dict[str, str] = {}
        self._alias_raw: dict[str, str] = {}
        self._where = PredicateGroup("WHERE")
        self._having = PredicateGroup("HAVING")
        self._group: list[str] = []
        self._order: dict[str, str] = {}
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def reset(self) -> Self:
        """Clear all accumulated query state and return to execute mode.

        The connector and configuration stay bound.
        """
        self._init_state()
        return self

    @property
    def config(self) -> BuilderConfig:
        return self._config

    @property
    def connector(self) -> "Optional[ConnectorProtocol]":
        return self._connector

    def set_connector(self, connector: "Optional[ConnectorProtocol]") -> Self:
        self._connector = connector
        return self

    def db(self, name: str) -> Self:
        self._db = name
        return self

    def table(self, name: str) -> Self:
        self._table = name
        return self

    @property
    def mode(self) -> BuilderMode:
        return self._mode

    def sql(self, enabled: bool = True) -> Self:
        """Switch terminal calls to compile mode (literal SQL) or back to execute mode."""
        self._mode = BuilderMode.COMPILE if enabled else BuilderMode.EXECUTE
        return self

    # -- sub-builders ---------------------------------------------------------

    def _spawn(self) -> "QueryBuilder":
        return type(self)(config=self._config)

    def _sub_builder(self, callback: "BuilderCallback") -> "QueryBuilder":
        """Hand a fresh builder to ``callback`` and return it configured."""
        child = self._spawn()
        callback(child)
        return child

    def _as_subquery(self, value: Any) -> Any:
        if isinstance(value, SubqueryProtocol):
            return value
        if callable(value):
            return self._sub_builder(value)
        return value

    # -- compilation ----------------------------------------------------------

    def _render_table(self) -> str:
        return render_table(self._table, self._db, self._config)

    def _default_columns(self) -> "list[str]":
        if isinstance(self._connector, IntrospectsSchema):
            return list(self._connector.get_select_columns(False)) or ["*"]
        return ["*"]

    def build_where(self) -> CompiledQuery:
        """Compile only the WHERE clause."""
        binder = ParameterBinder()
        return binder.compiled(self._where.compile(binder))

    def build_having(self) -> CompiledQuery:
        """Compile only the HAVING clause."""
        binder = ParameterBinder()
        return binder.compiled(self._having.compile(binder))

    def build_select(self) -> CompiledQuery:
        """Compile the SELECT statement and its parameters without running it.

        Returns:
            CompiledQuery: SQL with ``?`` markers; WHERE parameters precede HAVING parameters.
        """
        binder = ParameterBinder()
        projection = self._resolve_projection(self._default_columns())
        where = self._where.compile(binder)
        having = self._having.compile(binder)
        sql = assemble_select(
            projection=projection,
            table=self._render_table(),
            where=where,
            group=self._group,
            having=having,
            order=self._order,
            limit=self._limit,
            offset=self._offset,
        )
        return binder.compiled(sql)

    build = build_select

    def to_sql(self) -> str:
        """Literal SELECT text with parameters inlined, regardless of mode."""
        return substitute_parameters(self.build_select(), self._connector)

    def __str__(self) -> str:
        return self.to_sql()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(table={self._table!r}, db={self._db!r}, mode={self._mode.value!r}, "
            f"where={len(self._where)}, having={len(self._having)})"
        )

    # -- execution ------------------------------------------------------------

    def _validate(self, operation: str, compiled: CompiledQuery) -> None:
        sql = compiled.sql.replace(self._config.table_token, quote_identifier(_VALIDATION_TABLE))
        try:
            sqlglot.parse_one(sql, read=DIALECT)
        except SQLGlotParseError as e:
            logger.debug("Compiled %s statement failed validation", operation, exc_info=True)
            msg = f"Compiled {operation} statement is not valid SQL: {e!s}"
            raise SQLParsingError(msg, compiled.sql) from e

    def _dispatch(self, operation: str, primitive: str, compiled: CompiledQuery) -> Any:
        """Return literal SQL in compile mode, otherwise run ``primitive`` on the connector."""
        with statement_context(operation=operation, sql=compiled.sql, parameter_count=len(compiled.parameters)):
            if self._config.validate_sql:
                self._validate(operation, compiled)

            if self._mode is BuilderMode.COMPILE:
                return substitute_parameters(compiled, self._connector)

            if self._connector is None:
                raise MissingConnectorError(operation)

            if self._config.log_statements:
                logger.debug("Delegating %s to connector", operation)
            with wrap_exceptions(operation):
                return getattr(self._connector, primitive)(compiled.sql, compiled.parameter_list)

    def get(self) -> "Union[list[DictRow], str]":
        """Run the SELECT and return its rows (or the literal SQL in compile mode)."""
        return self._dispatch("get", "get", self.build_select())

    def first(self) -> "Union[Optional[DictRow], str]":
        """Return the first matching row, or ``None``."""
        self._offset = 0
        self._limit = 1
        rows = self.get()
        if isinstance(rows, str):
            return rows
        return rows[0] if rows else None

    def ids(self) -> "Union[list[Any], str]":
        """Return the primary-key values of every matching row."""
        primary_key = self._config.primary_key
        self._select = [primary_key]
        rows = self.get()
        if isinstance(rows, str):
            return rows
        return [row[primary_key] for row in rows]

    def count(self) -> "Union[int, str]":
        """Count matching rows.

        The projection is replaced by ``COUNT(*)`` and LIMIT/OFFSET are dropped
        for the remainder of this builder's life.
        """
        self._alias = {}
        self._alias_raw = {"total": "COUNT(*)"}
        self._select = ["total"]
        self._limit = self._offset = None
        rows = self.get()
        if isinstance(rows, str):
            return rows
        return int(rows[0]["total"]) if rows else 0

    def paginate(self, page: int, size: int) -> "Union[PaginatedResult[DictRow], str]":
        """Fetch one page of rows together with the total row count.

        Args:
            page: One-based page number.
            size: Rows per page.

        Returns:
            A :class:`PaginatedResult`, or the data query's literal SQL in compile mode.
        """
        snapshot = self._projection_snapshot()
        try:
            total = self.count()
        finally:
            self._restore_projection(snapshot)

        self._offset = (page - 1) * size
        self._limit = size
        data = self.get()
        if isinstance(data, str):
            return data
        return PaginatedResult(data, page=page, size=size, total=int(total))

    def add(self, data: "RowData") -> Any:
        """Insert one row; column order follows the mapping. Returns the connector's inserted id."""
        binder = ParameterBinder()
        sql = assemble_insert(self._render_table(), list(data), binder, [list(data.values())])
        return self._dispatch("add", "insert", binder.compiled(sql))

    def insert(self, rows: "Sequence[RowData]") -> Any:
        """Insert several rows with one statement.

        Every row must have the same keys as the first one; values are written
        in sorted column order.

        Raises:
            InvalidInsertRowsError: If the rows are not a list of mappings or their keys differ.

        Returns:
            The connector's affected row count, ``0`` for no rows, or literal SQL in compile mode.
        """
        if not isinstance(rows, Mapping) and not rows:
            return 0
        columns, values = prepare_batch_rows(rows)
        binder = ParameterBinder()
        sql = assemble_insert(self._render_table(), columns, binder, values)
        return self._dispatch("insert", "exec", binder.compiled(sql))

    def update(self, data: "Mapping[str, UpdateValue]") -> Any:
        """Update several columns of every matching row.

        Plain values are bound as parameters. A callable value is invoked and
        must return a SQL expression string, which is written unescaped. The
        primary-key column is skipped.

        Raises:
            InvalidUpdateValueError: If a callable value does not return a string.

        Returns:
            The affected row count, ``0`` when nothing is left to update, or literal SQL in compile mode.
        """
        if not data:
            return 0

        binder = ParameterBinder()
        assignments: list[str] = []
        for column, value in data.items():
            if ci_equal(column, self._config.primary_key):
                continue
            if callable(value):
                expression = value()
                if not isinstance(expression, str):
                    raise InvalidUpdateValueError(column, expression)
                assignments.append(f"{quote_identifier(column)} = {expression}")
            else:
                assignments.append(f"{quote_identifier(column)} = {binder.bind(value)}")

        if not assignments:
            return 0

        sql = assemble_update(self._render_table(), assignments, self._where.compile(binder))
        return self._dispatch("update", "exec", binder.compiled(sql))

    def set(self, column: str, value: Any) -> Any:
        """Update a single column of every matching row."""
        binder = ParameterBinder()
        assignment = f"{quote_identifier(column)} = {binder.bind(value)}"
        sql = assemble_update(self._render_table(), [assignment], self._where.compile(binder))
        return self._dispatch("set", "exec", binder.compiled(sql))

    def increment(self, column: str, step: int = 1) -> Any:
        """Atomically add ``step`` to ``column``."""
        return self._arithmetic("increment", column, "+", step)

    def decrement(self, column: str, step: int = 1) -> Any:
        """Atomically subtract ``step`` from ``column``."""
        return self._arithmetic("decrement", column, "-", step)

    def _arithmetic(self, operation: str, column: str, operator: str, step: int) -> Any:
        if isinstance(step, bool) or not isinstance(step, int):
            msg = f"{operation} step must be an integer, got {step!r}"
            raise SQLBuilderError(msg, operation=operation, column=column, step=step)
        quoted = quote_identifier(column)
        binder = ParameterBinder()
        sql = assemble_update(self._render_table(), [f"{quoted} = ({quoted} {operator} {step})"], self._where.compile(binder))
        return self._dispatch(operation, "exec", binder.compiled(sql))

    def delete(self) -> Any:
        """Delete every matching row."""
        binder = ParameterBinder()
        sql = assemble_delete(self._render_table(), self._where.compile(binder))
        return self._dispatch("delete", "exec", binder.compiled(sql))
