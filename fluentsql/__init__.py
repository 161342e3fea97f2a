"""fluentsql: a fluent, parameter-binding MySQL query builder."""

from fluentsql import adapters, builder, config, exceptions, protocols, typing, utils
from fluentsql.__metadata__ import __version__
from fluentsql.builder import BuilderMode, CompiledQuery, PaginatedResult, QueryBuilder
from fluentsql.config import BuilderConfig, get_global_config, load_config_from_env, set_global_config
from fluentsql.exceptions import (
    ConnectorError,
    FluentSQLError,
    ImproperConfigurationError,
    InvalidInsertRowsError,
    InvalidUpdateValueError,
    MissingConnectorError,
    SQLBuilderError,
    SQLParsingError,
)
from fluentsql.protocols import ConnectorProtocol
from fluentsql.typing import DictRow, RowData

__all__ = (
    "BuilderConfig",
    "BuilderMode",
    "CompiledQuery",
    "ConnectorError",
    "ConnectorProtocol",
    "DictRow",
    "FluentSQLError",
    "ImproperConfigurationError",
    "InvalidInsertRowsError",
    "InvalidUpdateValueError",
    "MissingConnectorError",
    "PaginatedResult",
    "QueryBuilder",
    "RowData",
    "SQLBuilderError",
    "SQLParsingError",
    "__version__",
    "adapters",
    "builder",
    "config",
    "exceptions",
    "get_global_config",
    "load_config_from_env",
    "protocols",
    "set_global_config",
    "typing",
    "utils",
)
