"""Where shipments and cached Drive listings are kept on disk.

``TRADELANE_DATA_DIR`` moves the whole data directory; ``DATABASE_URI`` points the
shipment store at any SQLAlchemy database instead of the local SQLite file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import InvalidSettingError

APP_DIR_NAME: Final[str] = "tradelane"
SHIPMENTS_DB_FILENAME: Final[str] = "tradelane.db"
DRIVE_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    shipments_db_filename: str = SHIPMENTS_DB_FILENAME
    drive_cache_filename: str = DRIVE_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        if data_dir.exists() and not data_dir.is_dir():
            raise InvalidSettingError("TRADELANE_DATA_DIR", str(data_dir), "not a directory")
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self) -> Path:
        return self.ensure_data_dir() / self.shipments_db_filename

    def http_cache_path(self) -> Path:
        return self.ensure_data_dir() / self.drive_cache_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return base_path / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("TRADELANE_DATA_DIR")
    data_dir = Path(env_dir.strip()) if env_dir and env_dir.strip() else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = os.getenv("DATABASE_URI")
    if env_uri and env_uri.strip():
        return DatabaseConfig(uri=env_uri.strip())
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{storage_config.database_path()}")
