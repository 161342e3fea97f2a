from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from fluentsql.config import reset_global_config

here = Path(__file__).parent
root_path = here.parent


class RecordingConnector:
    """In-memory connector that records every delegated statement."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, columns: list[str] | None = None) -> None:
        self.rows = rows if rows is not None else []
        self.columns = columns
        self.responses: list[list[dict[str, Any]]] = []
        self.calls: list[tuple[str, str, list[Any]]] = []
        self.rowcount = 1
        self.last_id = 42

    def quote(self, value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def generate(self, sql: str) -> str:
        return sql.replace("#{TABLE}", "`generated`")

    def get(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        self.calls.append(("get", sql, params))
        if self.responses:
            return self.responses.pop(0)
        return list(self.rows)

    def exec(self, sql: str, params: list[Any]) -> int:
        self.calls.append(("exec", sql, params))
        return self.rowcount

    def insert(self, sql: str, params: list[Any]) -> int:
        self.calls.append(("insert", sql, params))
        return self.last_id

    def annotations(self) -> dict[str, Any]:
        return {column: {} for column in self.columns or []}

    def get_select_columns(self, include_hidden: bool = False) -> list[str]:
        return list(self.columns or [])


@pytest.fixture(autouse=True)
def _reset_config() -> Generator[None, None, None]:
    reset_global_config()
    yield
    reset_global_config()


@pytest.fixture
def connector() -> RecordingConnector:
    return RecordingConnector()


@pytest.fixture
def sqlite_connection() -> Generator[sqlite3.Connection, None, None]:
    connection = sqlite3.connect(":memory:")
    connection.execute(
        "CREATE TABLE users ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "name TEXT NOT NULL, "
        "age INTEGER, "
        "team TEXT, "
        "meta TEXT, "
        "score INTEGER NOT NULL DEFAULT 0)"
    )
    connection.executemany(
        "INSERT INTO users (name, age, team, score) VALUES (?, ?, ?, ?)",
        [
            ("alice", 31, "red", 10),
            ("bob", 25, "blue", 5),
            ("carol", 42, "red", 7),
            ("dave", 19, "green", 0),
            ("erin", 25, "blue", 3),
        ],
    )
    connection.commit()
    yield connection
    connection.close()
