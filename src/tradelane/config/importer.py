"""CSV import and continuous-sync settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from tradelane.domain.model import NameField

from .env import optional_env_var
from .errors import InvalidSettingError

DEFAULT_FUZZY_THRESHOLD = 3
DEFAULT_SYNC_INTERVAL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class ImportConfig:
    fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD
    name_fields: tuple[NameField, ...] = field(default_factory=lambda: tuple(NameField))
    sync_interval_seconds: float = DEFAULT_SYNC_INTERVAL_SECONDS


def get_import_config() -> ImportConfig:
    threshold = optional_env_var(
        "TRADELANE_FUZZY_THRESHOLD", DEFAULT_FUZZY_THRESHOLD, parse=int
    )
    if threshold < 0:
        raise InvalidSettingError("TRADELANE_FUZZY_THRESHOLD", threshold, "must be non-negative")
    interval = optional_env_var(
        "TRADELANE_SYNC_INTERVAL_SECONDS", DEFAULT_SYNC_INTERVAL_SECONDS, parse=float
    )
    if interval <= 0:
        raise InvalidSettingError("TRADELANE_SYNC_INTERVAL_SECONDS", interval, "must be positive")
    return ImportConfig(fuzzy_threshold=threshold, sync_interval_seconds=interval)
