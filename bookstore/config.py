"""Dataclass-based bookstore configuration.

Thresholds, limits and server settings live in frozen dataclasses:
defaults work out of the box, and from_env() applies overrides from
BOOKSTORE_* environment variables.

Database settings are read separately by core.database.
"""

import os
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Nested config sections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CatalogConfig:
    """Catalog display settings."""

    currency: str = "$"


@dataclass(frozen=True)
class ServerConfig:
    """Web server settings."""

    secret_key: str = "change-me"  # signs the session cookie used for flash messages
    log_level: str = "INFO"
    json_logs: bool = False
    create_schema: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class BookstoreConfig:
    """Complete configuration for the bookstore application.

    Usage::

        config = BookstoreConfig.from_env()
        configure_logging(config.server.log_level)
    """

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def default(cls) -> "BookstoreConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "BOOKSTORE_") -> "BookstoreConfig":
        """Create config from environment variables.

        Example: BOOKSTORE_SECRET_KEY=... BOOKSTORE_LOG_LEVEL=DEBUG
        """
        server = {}
        secret_key = os.getenv(f"{prefix}SECRET_KEY")
        if secret_key:
            server["secret_key"] = secret_key
        log_level = os.getenv(f"{prefix}LOG_LEVEL")
        if log_level:
            server["log_level"] = log_level.upper()
        json_logs = os.getenv(f"{prefix}JSON_LOGS")
        if json_logs:
            server["json_logs"] = _env_bool(json_logs)
        create_schema = os.getenv(f"{prefix}CREATE_SCHEMA")
        if create_schema:
            server["create_schema"] = _env_bool(create_schema)

        catalog = {}
        currency = os.getenv(f"{prefix}CURRENCY")
        if currency:
            catalog["currency"] = currency

        return cls(
            catalog=CatalogConfig(**catalog),
            server=ServerConfig(**server),
        )


# Process-wide configuration instance
config = BookstoreConfig.from_env()
