"""Remote file-store (Drive API) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from .env import require_env_vars
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig
from .storage import get_storage_config

DEFAULT_DRIVE_BASE_URL = "https://www.googleapis.com/drive/v3/"
DRIVE_TIMEOUT_SECONDS = 20.0
CSV_MIME_TYPE = "text/csv"


@dataclass(frozen=True, slots=True)
class DriveConfig:
    """Holds remote file-store access values."""

    access_token: str = field(repr=False)
    resilience: ResilienceConfig
    page_size: int = 10

    @property
    def download_resilience(self) -> ResilienceConfig:
        """File content is always fetched fresh; only listings go through the cache."""

        return replace(self.resilience, name=f"{self.resilience.name}-download", cache=None)


def get_drive_config(*, resilience: ResilienceConfig | None = None) -> DriveConfig:
    values = require_env_vars(("DRIVE_ACCESS_TOKEN",))
    base_url = os.getenv("DRIVE_BASE_URL") or DEFAULT_DRIVE_BASE_URL
    return DriveConfig(
        access_token=values["DRIVE_ACCESS_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="drive",
            base_url=base_url,
            timeout_seconds=DRIVE_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite",
                sqlite_path=str(get_storage_config().http_cache_path()),
            ),
        ),
    )
