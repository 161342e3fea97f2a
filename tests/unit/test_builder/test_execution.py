"""Unit tests for compile/execute dispatch and the read terminals."""

import logging
from typing import Any
from unittest.mock import Mock

import pytest

from fluentsql.builder import BuilderMode, PaginatedResult, QueryBuilder
from fluentsql.config import BuilderConfig
from fluentsql.exceptions import ConnectorError, MissingConnectorError, SQLBuilderError, SQLParsingError
from tests.conftest import RecordingConnector


class FailingConnector(RecordingConnector):
    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def get(self, sql: str, params: "list[Any]") -> "list[dict[str, Any]]":
        raise self.error


@pytest.fixture
def query(connector: RecordingConnector) -> QueryBuilder:
    return QueryBuilder(connector, table="users")


def test_builder_starts_in_execute_mode() -> None:
    assert QueryBuilder().mode is BuilderMode.EXECUTE


def test_sql_toggles_compile_mode(query: QueryBuilder) -> None:
    assert query.sql().mode is BuilderMode.COMPILE
    assert query.sql(False).mode is BuilderMode.EXECUTE


def test_execute_mode_passes_skeleton_and_parameters(query: QueryBuilder, connector: RecordingConnector) -> None:
    connector.rows = [{"id": 1}]

    rows = query.where("age", 18, ">=").get()

    assert rows == [{"id": 1}]
    assert connector.calls == [("get", "SELECT * FROM `users` WHERE `age` >= ?", [18])]


def test_execute_mode_without_connector_raises() -> None:
    with pytest.raises(MissingConnectorError) as exc_info:
        QueryBuilder(table="users").get()

    assert exc_info.value.operation == "get"


def test_compile_mode_needs_no_connector() -> None:
    sql = QueryBuilder(table="users").where("name", "bob").null("deleted_at").sql(True).get()

    assert sql == "SELECT * FROM `users` WHERE `name` = 'bob' AND `deleted_at` IS NULL"


def test_compile_mode_keeps_question_marks_in_raw_text() -> None:
    sql = QueryBuilder(table="t").raw_where("note <> 'why?'").where("id", 5).sql(True).get()

    assert sql == "SELECT * FROM `t` WHERE (note <> 'why?') AND `id` = 5"


def test_compile_mode_inlines_subquery_parameters_in_order() -> None:
    inner = QueryBuilder(table="orders").select("user_id").raw_where("memo LIKE '%?'").where("paid", 1)

    sql = QueryBuilder(table="users").where("team", "red").in_("id", inner).where("age", 30).sql(True).get()

    assert sql == (
        "SELECT * FROM `users` WHERE `team` = 'red' AND `id` IN "
        "(SELECT `user_id` FROM `orders` WHERE (memo LIKE '%?') AND `paid` = 1) AND `age` = 30"
    )


def test_compile_mode_inlines_none_as_null() -> None:
    assert QueryBuilder(table="t").where("x", None).sql(True).get() == "SELECT * FROM `t` WHERE `x` = NULL"


def test_compile_mode_uses_connector_quoting_and_generation(connector: RecordingConnector) -> None:
    sql = QueryBuilder(connector).where("age", 18).where("name", "o'neil").sql(True).get()

    assert sql == "SELECT * FROM `generated` WHERE `age` = '18' AND `name` = 'o''neil'"
    assert connector.calls == []


def test_compile_mode_has_no_side_effects(query: QueryBuilder, connector: RecordingConnector) -> None:
    query.sql(True)

    query.where("id", 1).update({"name": "x"})
    query.delete()
    query.add({"name": "y"})

    assert connector.calls == []


def test_first_limits_to_one_row(query: QueryBuilder, connector: RecordingConnector) -> None:
    connector.rows = [{"id": 1}, {"id": 2}]

    assert query.first() == {"id": 1}
    assert connector.calls[0][1] == "SELECT * FROM `users` LIMIT 0, 1"


def test_first_without_rows_returns_none(query: QueryBuilder) -> None:
    assert query.first() is None


def test_first_compile_mode() -> None:
    assert QueryBuilder(table="users").sql(True).first() == "SELECT * FROM `users` LIMIT 0, 1"


def test_ids_projects_primary_key(query: QueryBuilder, connector: RecordingConnector) -> None:
    connector.rows = [{"id": 1}, {"id": 3}]

    assert query.where("team", "red").ids() == [1, 3]
    assert connector.calls[0] == ("get", "SELECT `id` FROM `users` WHERE `team` = ?", ["red"])


def test_ids_with_custom_primary_key() -> None:
    query = QueryBuilder(config=BuilderConfig(primary_key="uid"), table="users").sql(True)

    assert query.ids() == "SELECT `uid` FROM `users`"


def test_count_drops_limit_and_projection(query: QueryBuilder, connector: RecordingConnector) -> None:
    connector.rows = [{"total": 7}]

    total = query.select("name").limit(5).where("a", 1).count()

    assert total == 7
    assert connector.calls[0] == ("get", "SELECT COUNT(*) AS `total` FROM `users` WHERE `a` = ?", [1])


def test_count_without_rows_is_zero(query: QueryBuilder) -> None:
    assert query.count() == 0


def test_count_compile_mode() -> None:
    assert QueryBuilder(table="users").sql(True).count() == "SELECT COUNT(*) AS `total` FROM `users`"


def test_paginate_runs_count_then_page(query: QueryBuilder, connector: RecordingConnector) -> None:
    connector.responses = [[{"total": 25}], [{"name": "k"}]]

    result = query.select("name").where("team", "red").paginate(2, 10)

    assert isinstance(result, PaginatedResult)
    assert result.data == [{"name": "k"}]
    assert (result.page, result.size, result.total) == (2, 10, 25)
    assert connector.calls == [
        ("get", "SELECT COUNT(*) AS `total` FROM `users` WHERE `team` = ?", ["red"]),
        ("get", "SELECT `name` FROM `users` WHERE `team` = ? LIMIT 10, 10", ["red"]),
    ]


def test_paginate_compile_mode_returns_page_query() -> None:
    sql = QueryBuilder(table="users").sql(True).paginate(3, 20)

    assert sql == "SELECT * FROM `users` LIMIT 40, 20"


def test_paginate_restores_projection_when_count_fails() -> None:
    query = QueryBuilder(FailingConnector(RuntimeError("boom")), table="users").alias("nick", "n").select("name", "n")

    with pytest.raises(ConnectorError):
        query.paginate(1, 10)

    assert query.build_select().sql == "SELECT `name`, `nick` AS `n` FROM `users`"


def test_connector_errors_are_wrapped() -> None:
    query = QueryBuilder(FailingConnector(RuntimeError("boom")), table="users")

    with pytest.raises(ConnectorError) as exc_info:
        query.get()

    assert exc_info.value.operation == "get"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_library_errors_raised_by_connector_pass_through() -> None:
    error = SQLBuilderError("bad", operation="custom")
    query = QueryBuilder(FailingConnector(error), table="users")

    with pytest.raises(SQLBuilderError) as exc_info:
        query.get()

    assert exc_info.value is error


def test_validation_rejects_malformed_sql() -> None:
    query = QueryBuilder(config=BuilderConfig(validate_sql=True), table="users").raw_where("((").sql(True)

    with pytest.raises(SQLParsingError) as exc_info:
        query.get()

    assert exc_info.value.sql == "SELECT * FROM `users` WHERE ((()"


def test_validation_accepts_table_token() -> None:
    query = QueryBuilder(config=BuilderConfig(validate_sql=True)).where("a", 1).sql(True)

    assert query.get() == "SELECT * FROM #{TABLE} WHERE `a` = 1"


def test_delegated_statements_are_logged(
    query: QueryBuilder, connector: RecordingConnector, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="fluentsql")

    query.where("a", 1).get()

    records = [record for record in caplog.records if record.name == "fluentsql.builder"]
    assert len(records) == 1
    assert records[0].getMessage() == "Delegating get to connector"
    assert records[0].extra_fields == {  # type: ignore[attr-defined]
        "operation": "get",
        "sql": "SELECT * FROM `users` WHERE `a` = ?",
        "parameter_count": 1,
    }


def test_statement_logging_can_be_disabled(connector: RecordingConnector, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="fluentsql")
    query = QueryBuilder(connector, BuilderConfig(log_statements=False), table="users")

    query.get()

    assert not [record for record in caplog.records if record.name == "fluentsql.builder"]


def test_reset_clears_state_but_keeps_connector(query: QueryBuilder, connector: RecordingConnector) -> None:
    query.select("a").where("b", 1).having("c", 2).group("d").desc("e").limit(5).db("x").sql(True)

    query.reset()

    assert query.mode is BuilderMode.EXECUTE
    assert query.connector is connector
    assert query.build_select() == QueryBuilder().build_select()


def test_repr_mentions_table_and_mode(query: QueryBuilder) -> None:
    assert repr(query.where("a", 1)) == "QueryBuilder(table='users', db=None, mode='execute', where=1, having=0)"


def test_minimal_connector_only_needs_execution_methods() -> None:
    """Test a connector without quoting or schema capabilities still works."""
    connector = Mock(spec=["get", "exec", "insert"])
    connector.exec.return_value = 3

    assert QueryBuilder(connector, table="users").where("id", 1).delete() == 3
    connector.exec.assert_called_once_with("DELETE FROM `users` WHERE `id` = ?", [1])
    assert QueryBuilder(connector, table="users").where("a", "b").sql(True).get() == "SELECT * FROM `users` WHERE `a` = 'b'"
