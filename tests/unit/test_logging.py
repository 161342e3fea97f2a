"""Tests for the fluentsql logging helpers."""

import logging
import sys

import pytest

from fluentsql._serialization import decode_json
from fluentsql.utils.logging import (
    StatementContextFilter,
    StructuredFormatter,
    get_logger,
    get_statement_context,
    statement_context,
)


def _record(message: str = "hello %s", args: tuple = ("world",)) -> logging.LogRecord:
    return logging.LogRecord("fluentsql.test", logging.INFO, __file__, 10, message, args, None)


def test_get_logger_namespaces_names() -> None:
    assert get_logger().name == "fluentsql"
    assert get_logger("adapters").name == "fluentsql.adapters"
    assert get_logger("fluentsql.builder").name == "fluentsql.builder"


def test_get_logger_adds_statement_filter_once() -> None:
    logger = get_logger("filters")
    get_logger("filters")

    assert sum(isinstance(f, StatementContextFilter) for f in logger.filters) == 1


def test_statement_context_nests_and_restores() -> None:
    assert get_statement_context() is None

    with statement_context(operation="get", parameter_count=2):
        with statement_context(sql="SELECT 1"):
            assert get_statement_context() == {"operation": "get", "parameter_count": 2, "sql": "SELECT 1"}
        assert get_statement_context() == {"operation": "get", "parameter_count": 2}

    assert get_statement_context() is None


def test_statement_context_is_cleared_when_block_raises() -> None:
    with pytest.raises(RuntimeError), statement_context(operation="delete"):
        raise RuntimeError("boom")

    assert get_statement_context() is None


def test_filter_merges_context_under_explicit_fields() -> None:
    record = _record()
    record.extra_fields = {"operation": "insert"}

    with statement_context(operation="add", parameter_count=3):
        assert StatementContextFilter().filter(record) is True

    assert record.extra_fields == {"operation": "insert", "parameter_count": 3}  # type: ignore[attr-defined]


def test_filter_leaves_record_alone_outside_context() -> None:
    record = _record()

    assert StatementContextFilter().filter(record) is True
    assert not hasattr(record, "extra_fields")


def test_logger_stamps_records_inside_context(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="fluentsql")
    logger = get_logger("context")

    with statement_context(operation="update", parameter_count=1):
        logger.debug("inside")
    logger.debug("outside")

    inside, outside = (record for record in caplog.records if record.name == "fluentsql.context")
    assert inside.extra_fields == {"operation": "update", "parameter_count": 1}  # type: ignore[attr-defined]
    assert not hasattr(outside, "extra_fields")


def test_structured_formatter_emits_json() -> None:
    record = _record()
    record.extra_fields = {"operation": "get", "sql": "SELECT 1"}

    payload = decode_json(StructuredFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "fluentsql.test"
    assert payload["operation"] == "get"
    assert payload["sql"] == "SELECT 1"


def test_structured_formatter_includes_exception() -> None:
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("fluentsql.test", logging.ERROR, __file__, 10, "failed", (), sys.exc_info())

    payload = decode_json(StructuredFormatter().format(record))

    assert payload["message"] == "failed"
    assert "ValueError: bad" in payload["exception"]
    assert "operation" not in payload
