"""HTTP client for listing and downloading CSV files from a Drive-style file store."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from tradelane.adapters.http_resilience import ResilientClient
from tradelane.config import get_drive_config
from tradelane.config.drive import CSV_MIME_TYPE, DEFAULT_DRIVE_BASE_URL
from tradelane.domain.importing.errors import TransportError
from tradelane.domain.ports.fetching import CsvDocument, CsvSource

from .schema import DriveErrorResponse, DriveFile, DriveFileList

if TYPE_CHECKING:
    from collections.abc import Callable

    from tradelane.config import DriveConfig, ResilienceConfig

log = getLogger(__name__)

_LIST_FIELDS = "files(id, name, mimeType, modifiedTime)"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class DriveRequestError(TransportError):
    """Raised when the file store cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class DriveClient:
    config: DriveConfig = field(default_factory=get_drive_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def list_csv_files(self) -> list[DriveFile]:
        """Return the most recent CSV files that are not in the trash."""

        return asyncio.run(self._list_csv_files_async())

    def download(self, file_id: str) -> str:
        """Return the raw text content of ``file_id``."""

        return asyncio.run(self._download_async(file_id))

    async def _list_csv_files_async(self) -> list[DriveFile]:
        params = httpx.QueryParams(
            {
                "pageSize": self.config.page_size,
                "fields": _LIST_FIELDS,
                "q": f"mimeType = '{CSV_MIME_TYPE}' and trashed = false",
            }
        )
        async with self.client_factory(self.config.resilience) as client:
            response = await self._perform_request(client, "files", params=params)
        try:
            listing = DriveFileList.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DriveRequestError("Unexpected file listing payload") from exc
        log.info("Listed %s CSV files", len(listing.files))
        return listing.files

    async def _download_async(self, file_id: str) -> str:
        params = httpx.QueryParams({"alt": "media"})
        async with self.client_factory(self.config.download_resilience) as client:
            response = await self._perform_request(client, f"files/{file_id}", params=params)
        log.info("Downloaded file %s (%s bytes)", file_id, len(response.content))
        return response.text

    async def _perform_request(
        self,
        client: ResilientClient,
        path: str,
        *,
        params: httpx.QueryParams,
    ) -> httpx.Response:
        base_url = self.config.resilience.base_url or DEFAULT_DRIVE_BASE_URL
        headers = {"Authorization": f"Bearer {self.config.access_token}"}
        try:
            response = await client.get(f"{base_url}{path}", params=params, headers=headers)
        except httpx.HTTPError as exc:
            log.error(f"Drive request for {path} failed: {exc}")
            raise DriveRequestError(f"Drive request failed: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            log.error(f"Drive API error {response.status_code}: {message}")
            raise DriveRequestError(message, status_code=response.status_code)
        return response


def _error_message(response: httpx.Response) -> str:
    try:
        return DriveErrorResponse.model_validate(response.json()).error.message
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}"


@dataclass(slots=True)
class DriveCsvSource:
    """CSV source reading one remote file by id."""

    file_id: str
    client: DriveClient = field(default_factory=DriveClient, repr=False)

    def read(self) -> CsvDocument:
        return CsvDocument(name=self.file_id, text=self.client.download(self.file_id))


if TYPE_CHECKING:
    _source_check: CsvSource = DriveCsvSource("file-id")
