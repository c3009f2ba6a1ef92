"""Application configuration helpers."""

from __future__ import annotations

from .drive import DriveConfig, get_drive_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, InvalidSettingError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .importer import ImportConfig, get_import_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "NO_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DriveConfig",
    "ImportConfig",
    "InvalidSettingError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_drive_config",
    "get_import_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
