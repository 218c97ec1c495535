"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_SNAPSHOT_KEY,
    CatalogConfig,
    DatabaseConfig,
    StorageConfig,
    get_catalog_config,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "DEFAULT_EXPORT_FILENAME",
    "DEFAULT_SNAPSHOT_KEY",
    "CatalogConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "get_catalog_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
]
