"""Reference connector over the standard library ``sqlite3`` driver.

SQLite accepts backtick-quoted identifiers, ``?`` markers and MySQL's
``LIMIT offset, count`` form, so statements compiled by the builder run
unchanged against it.
"""

import contextlib
import datetime
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Optional

from fluentsql._serialization import encode_json
from fluentsql.builder import QueryBuilder
from fluentsql.builder._expressions import quote_identifier
from fluentsql.config import BuilderConfig, get_global_config
from fluentsql.exceptions import ConnectorError
from fluentsql.utils.logging import get_logger

if TYPE_CHECKING:
    from fluentsql.typing import DictRow, StatementParameters

__all__ = ("SqliteConnector", "sqlite_type_coercion_map")

logger = get_logger("fluentsql.adapters.sqlite")

sqlite_type_coercion_map: "dict[type, Callable[[Any], Any]]" = {
    bool: int,
    datetime.datetime: lambda v: v.isoformat(),
    datetime.date: lambda v: v.isoformat(),
    Decimal: str,
    dict: encode_json,
    list: encode_json,
    tuple: lambda v: encode_json(list(v)),
}


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    def __init__(self, connection: "sqlite3.Connection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(sqlite3.Error):
                self.cursor.close()


class SqliteConnector:
    """Connector bound to one table of an open SQLite connection.

    The connection is owned by the caller; the connector never opens or
    closes it. Write statements are committed unless ``autocommit`` is off.

    Example:
        >>> connection = sqlite3.connect(":memory:")
        >>> connector = SqliteConnector(connection, "users")
        >>> connector.builder().where("active", 1).count()
    """

    def __init__(
        self,
        connection: "sqlite3.Connection",
        table: str,
        *,
        autocommit: bool = True,
        config: Optional[BuilderConfig] = None,
    ) -> None:
        self.connection = connection
        self.table = table
        self.autocommit = autocommit
        self.config = config or get_global_config()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={self.table!r})"

    def builder(self, config: Optional[BuilderConfig] = None) -> "QueryBuilder":
        """Create a query builder bound to this connector and its table."""
        return QueryBuilder(self, config or self.config, table=self.table)

    def quote(self, value: str) -> str:
        return "'" + str(value).replace("'", "''") + "'"

    def generate(self, sql: str) -> str:
        """Substitute the table token with this connector's quoted table name."""
        return sql.replace(self.config.table_token, quote_identifier(self.table))

    @staticmethod
    def _coerce(params: "StatementParameters") -> "list[Any]":
        coerced: list[Any] = []
        for value in params:
            coercer = sqlite_type_coercion_map.get(type(value))
            coerced.append(coercer(value) if coercer is not None else value)
        return coerced

    @contextmanager
    def _handle_database_exceptions(self, operation: str, sql: str) -> "Generator[None, None, None]":
        try:
            yield
        except sqlite3.Error as e:
            logger.debug("SQLite %s failed", operation, extra={"extra_fields": {"operation": operation, "sql": sql}})
            msg = f"SQLite database error: {e}"
            raise ConnectorError(msg, context={"operation": operation, "sql": sql}) from e

    def _commit(self) -> None:
        if self.autocommit:
            self.connection.commit()

    def get(self, sql: str, params: "StatementParameters") -> "list[DictRow]":
        """Run a query and return its rows as dictionaries."""
        sql = self.generate(sql)
        with self._handle_database_exceptions("get", sql), SqliteCursor(self.connection) as cursor:
            cursor.execute(sql, self._coerce(params))
            column_names = [col[0] for col in cursor.description or []]
            return [dict(zip(column_names, row)) for row in cursor.fetchall()]

    def exec(self, sql: str, params: "StatementParameters") -> int:
        """Run a write statement and return the affected row count."""
        sql = self.generate(sql)
        with self._handle_database_exceptions("exec", sql), SqliteCursor(self.connection) as cursor:
            cursor.execute(sql, self._coerce(params))
            self._commit()
            return cursor.rowcount or 0

    def insert(self, sql: str, params: "StatementParameters") -> "Optional[int]":
        """Run an INSERT and return the id of the inserted row."""
        sql = self.generate(sql)
        with self._handle_database_exceptions("insert", sql), SqliteCursor(self.connection) as cursor:
            cursor.execute(sql, self._coerce(params))
            self._commit()
            return cursor.lastrowid

    def annotations(self) -> "dict[str, dict[str, Any]]":
        """Describe every column of the bound table, generated and hidden columns included.

        Returns:
            Mapping of column name to its declared type, nullability, default,
            primary-key flag and hidden flag, in table order.
        """
        sql = f"PRAGMA table_xinfo({quote_identifier(self.table)})"
        with self._handle_database_exceptions("annotations", sql), SqliteCursor(self.connection) as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()
        return {
            name: {
                "type": declared_type,
                "nullable": not notnull,
                "default": default,
                "primary_key": bool(pk),
                "hidden": bool(hidden),
            }
            for _, name, declared_type, notnull, default, pk, hidden in rows
        }

    def get_select_columns(self, include_hidden: bool = False) -> "list[str]":
        """Columns selected by default, skipping hidden and generated ones unless requested."""
        return [
            name for name, column in self.annotations().items() if include_hidden or not column["hidden"]
        ]
