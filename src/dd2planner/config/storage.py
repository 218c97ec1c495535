"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "dd2planner"
DEFAULT_DB_FILENAME: Final[str] = "dd2planner.db"
DEFAULT_SNAPSHOT_KEY: Final[str] = "dd2_planner_data"
DEFAULT_EXPORT_FILENAME: Final[str] = "dd2_planner_backup.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    snapshot_key: str = DEFAULT_SNAPSHOT_KEY

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Where the canonical catalog documents are read from.

    ``directory`` is ``None`` when the documents bundled with the package are used.
    """

    directory: Path | None = None


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("DD2PLANNER_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    snapshot_key = optional_env_var("DD2PLANNER_SNAPSHOT_KEY") or DEFAULT_SNAPSHOT_KEY
    return StorageConfig(data_dir=data_dir, snapshot_key=snapshot_key)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())


def get_catalog_config() -> CatalogConfig:
    env_dir = optional_env_var("DD2PLANNER_CATALOG_DIR")
    if env_dir is None:
        return CatalogConfig()
    directory = Path(env_dir).expanduser().resolve()
    if not directory.is_dir():
        raise ConfigurationError(f"Catalog directory does not exist: {directory}")
    return CatalogConfig(directory=directory)
