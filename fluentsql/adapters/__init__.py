"""Reference connectors."""

from fluentsql.adapters.sqlite import SqliteConnector

__all__ = ("SqliteConnector",)
