"""Builder configuration.

A :class:`BuilderConfig` is an immutable bundle of settings shared by every
builder created from it. Builders constructed without an explicit config use
the process-wide default held by :func:`get_global_config`, which starts out
as :func:`load_config_from_env`.

Environment Variables Supported:
- FLUENTSQL_TABLE_TOKEN: Placeholder emitted when no table is bound (string)
- FLUENTSQL_PRIMARY_KEY: Column that ``update()`` never writes (string)
- FLUENTSQL_VALIDATE_SQL: Parse every compiled statement with sqlglot (true/false)
- FLUENTSQL_LOG_STATEMENTS: Log delegated statements at DEBUG level (true/false)
"""

import os
import threading
from dataclasses import dataclass, replace
from typing import Any, Optional

from fluentsql.exceptions import ImproperConfigurationError
from fluentsql.utils.logging import get_logger

__all__ = (
    "DIALECT",
    "PLACEHOLDER",
    "TABLE_TOKEN",
    "BuilderConfig",
    "get_global_config",
    "load_config_from_env",
    "reset_global_config",
    "set_global_config",
)

logger = get_logger("fluentsql.config")

DIALECT = "mysql"
PLACEHOLDER = "?"
TABLE_TOKEN = "#{TABLE}"


@dataclass(frozen=True)
class BuilderConfig:
    """Settings shared by query builders.

    Attributes:
        table_token: Text emitted in place of the table identifier when no table is bound.
            Connectors substitute it through their ``generate`` hook.
        primary_key: Column name silently skipped by ``update()``. Compared case-insensitively.
        validate_sql: Parse each compiled statement with sqlglot before it leaves the builder.
        log_statements: Log every statement handed to the connector.
    """

    table_token: str = TABLE_TOKEN
    primary_key: str = "id"
    validate_sql: bool = False
    log_statements: bool = True

    def __post_init__(self) -> None:
        if not self.table_token:
            msg = "table_token must be a non-empty string"
            raise ImproperConfigurationError(msg, context={"operation": "configure", "table_token": self.table_token})
        if not self.primary_key:
            msg = "primary_key must be a non-empty string"
            raise ImproperConfigurationError(msg, context={"operation": "configure", "primary_key": self.primary_key})

    @property
    def dialect(self) -> str:
        """The single SQL dialect builders target."""
        return DIALECT

    @property
    def placeholder(self) -> str:
        """Positional parameter marker."""
        return PLACEHOLDER

    def replace(self, **changes: Any) -> "BuilderConfig":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"true", "1", "yes", "on", "enabled"}:
        return True
    if normalized in {"false", "0", "no", "off", "disabled"}:
        return False
    logger.warning("Invalid boolean value for %s: %s, using default %s", key, value, default)
    return default


def _env_str(key: str, default: str) -> str:
    """Get a non-empty string value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    if not value.strip():
        logger.warning("Empty value for %s, using default %s", key, default)
        return default
    return value.strip()


def load_config_from_env() -> BuilderConfig:
    """Load configuration from ``FLUENTSQL_*`` environment variables.

    Returns:
        BuilderConfig loaded from environment variables
    """
    return BuilderConfig(
        table_token=_env_str("FLUENTSQL_TABLE_TOKEN", TABLE_TOKEN),
        primary_key=_env_str("FLUENTSQL_PRIMARY_KEY", "id"),
        validate_sql=_env_bool("FLUENTSQL_VALIDATE_SQL", False),
        log_statements=_env_bool("FLUENTSQL_LOG_STATEMENTS", True),
    )


_global_config: Optional[BuilderConfig] = None
_config_lock = threading.Lock()


def get_global_config() -> BuilderConfig:
    """Return the process-wide default configuration, loading it from the environment on first use."""
    global _global_config  # noqa: PLW0603
    if _global_config is None:
        with _config_lock:
            if _global_config is None:
                _global_config = load_config_from_env()
                logger.debug("Loaded default builder configuration", extra={"extra_fields": {"config": repr(_global_config)}})
    return _global_config


def set_global_config(config: BuilderConfig) -> None:
    """Replace the process-wide default configuration."""
    global _global_config  # noqa: PLW0603
    with _config_lock:
        _global_config = config


def reset_global_config() -> None:
    """Forget the process-wide default so the next lookup reloads it from the environment."""
    global _global_config  # noqa: PLW0603
    with _config_lock:
        _global_config = None
