"""Runtime-checkable protocols describing what a builder needs from a connector.

A connector is the external component that owns database I/O. The builder
only ever calls the small capability set below, and it detects optional
capabilities with ``isinstance`` checks against the narrow protocols rather
than ``hasattr`` guesses.
"""

from typing import Any, Protocol, runtime_checkable

__all__ = (
    "ConnectorProtocol",
    "ExecutesSQL",
    "GeneratesSQL",
    "IntrospectsSchema",
    "QuotesValues",
    "SubqueryProtocol",
)


@runtime_checkable
class QuotesValues(Protocol):
    """Connectors able to render a value as a dialect-correct SQL literal."""

    def quote(self, value: str) -> str:
        """Quote a value for literal inclusion in SQL text."""
        ...


@runtime_checkable
class GeneratesSQL(Protocol):
    """Connectors that rewrite template tokens such as ``#{TABLE}``."""

    def generate(self, sql: str) -> str:
        """Substitute connector-owned tokens in SQL text."""
        ...


@runtime_checkable
class ExecutesSQL(Protocol):
    """Connectors able to run parameterized statements."""

    def get(self, sql: str, params: "list[Any]") -> "list[dict[str, Any]]":
        """Run a query and return its rows."""
        ...

    def exec(self, sql: str, params: "list[Any]") -> int:
        """Run a write statement and return the affected row count."""
        ...

    def insert(self, sql: str, params: "list[Any]") -> Any:
        """Run an INSERT and return the generated identifier."""
        ...


@runtime_checkable
class IntrospectsSchema(Protocol):
    """Connectors that know the schema of the table they are bound to."""

    def annotations(self) -> "dict[str, Any]":
        """Return schema metadata for the bound table."""
        ...

    def get_select_columns(self, include_hidden: bool = False) -> "list[str]":
        """Return the columns a default projection should select."""
        ...


@runtime_checkable
class ConnectorProtocol(QuotesValues, GeneratesSQL, ExecutesSQL, IntrospectsSchema, Protocol):
    """The full connector capability set."""


@runtime_checkable
class SubqueryProtocol(Protocol):
    """Anything that can compile itself into a standalone SELECT."""

    def build_select(self) -> Any:
        """Compile to a :class:`~fluentsql.builder.CompiledQuery`."""
        ...
