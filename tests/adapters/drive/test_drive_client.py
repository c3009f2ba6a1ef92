from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import httpx
import pytest

from tradelane.adapters.drive import DriveClient, DriveCsvSource, DriveRequestError
from tradelane.app import stage_csv_import
from tradelane.config import CacheConfig, DriveConfig, ResilienceConfig
from tradelane.domain.importing import CanonicalRegistry, ImportSession, TransportError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from tradelane.adapters.http_resilience import ResilientClient

BASE_URL = "https://drive.test/v3/"


class FakeClient:
    def __init__(self, responder: Callable[[str, dict[str, Any]], httpx.Response]) -> None:
        self.responder = responder
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __aenter__(self) -> FakeClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        self.calls.append((url, kwargs))
        return self.responder(url, kwargs)


def _client(fake: FakeClient) -> DriveClient:
    config = DriveConfig(
        access_token="secret-token",
        resilience=ResilienceConfig(name="drive-test", base_url=BASE_URL, cache=None),
    )
    return DriveClient(
        config=config,
        client_factory=lambda _config: cast("ResilientClient", fake),
    )


def _json_response(url: str, payload: object, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))


def test_list_csv_files_parses_listing() -> None:
    payload = {
        "files": [
            {
                "id": "file-1",
                "name": "june.csv",
                "mimeType": "text/csv",
                "modifiedTime": "2024-06-30T12:00:00.000Z",
                "size": "100",
            },
            {"id": "file-2", "name": "july.csv"},
        ]
    }
    fake = FakeClient(lambda url, _kwargs: _json_response(url, payload))

    files = _client(fake).list_csv_files()

    assert [drive_file.id for drive_file in files] == ["file-1", "file-2"]
    assert files[0].mime_type == "text/csv"
    assert files[0].modified_time is not None
    assert files[1].modified_time is None
    url, kwargs = fake.calls[0]
    assert url == f"{BASE_URL}files"
    params = kwargs["params"]
    assert params["q"] == "mimeType = 'text/csv' and trashed = false"
    assert params["pageSize"] == "10"
    assert kwargs["headers"]["Authorization"] == "Bearer secret-token"


def test_download_returns_text() -> None:
    body = "House BOL Number,Shipper Name,TEU\nHBL-1,Acme,1\n"

    def respond(url: str, _kwargs: dict[str, Any]) -> httpx.Response:
        return httpx.Response(200, text=body, request=httpx.Request("GET", url))

    fake = FakeClient(respond)

    document = DriveCsvSource("file-1", client=_client(fake)).read()

    assert document.text == body
    assert document.name == "file-1"
    url, kwargs = fake.calls[0]
    assert url == f"{BASE_URL}files/file-1"
    assert kwargs["params"]["alt"] == "media"


def test_error_status_raises_transport_error() -> None:
    payload = {"error": {"code": 404, "message": "File not found: file-9"}}
    fake = FakeClient(lambda url, _kwargs: _json_response(url, payload, status_code=404))

    with pytest.raises(DriveRequestError) as excinfo:
        _client(fake).download("file-9")

    assert isinstance(excinfo.value, TransportError)
    assert excinfo.value.status_code == 404
    assert "File not found" in str(excinfo.value)


def test_network_failure_raises_transport_error() -> None:
    def respond(url: str, _kwargs: dict[str, Any]) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=httpx.Request("GET", url))

    with pytest.raises(DriveRequestError) as excinfo:
        _client(FakeClient(respond)).list_csv_files()

    assert excinfo.value.status_code is None


def test_malformed_listing_raises_transport_error() -> None:
    fake = FakeClient(lambda url, _kwargs: _json_response(url, {"files": [{"name": "x"}]}))

    with pytest.raises(DriveRequestError):
        _client(fake).list_csv_files()


def test_staging_drive_source_keeps_token_out_of_logs(caplog: pytest.LogCaptureFixture) -> None:
    body = "House BOL Number,Shipper Name,Consignee Name,Arrival Date,TEU\nHBL-1,Acme,Target,,1\n"

    def respond(url: str, _kwargs: dict[str, Any]) -> httpx.Response:
        return httpx.Response(200, text=body, request=httpx.Request("GET", url))

    source = DriveCsvSource("file-1", client=_client(FakeClient(respond)))
    session = ImportSession(load_registry=CanonicalRegistry, commit=lambda _shipments: None)

    with caplog.at_level(logging.DEBUG):
        outcome = stage_csv_import(source, session=session)

    assert outcome.added == 1
    assert "secret-token" not in repr(source)
    assert "file-1" in caplog.text
    assert "secret-token" not in caplog.text


def test_downloads_bypass_http_cache() -> None:
    def respond(url: str, _kwargs: dict[str, Any]) -> httpx.Response:
        if url.endswith("/files"):
            return _json_response(url, {"files": []})
        return httpx.Response(200, text="a,b\n", request=httpx.Request("GET", url))

    fake = FakeClient(respond)
    configs: list[ResilienceConfig] = []

    def factory(config: ResilienceConfig) -> ResilientClient:
        configs.append(config)
        return cast("ResilientClient", fake)

    cached = ResilienceConfig(name="drive-test", base_url=BASE_URL, cache=CacheConfig())
    client = DriveClient(
        config=DriveConfig(access_token="secret-token", resilience=cached),
        client_factory=factory,
    )

    client.list_csv_files()
    client.download("file-1")

    assert configs[0].cache == CacheConfig()
    assert configs[1].cache is None
    assert configs[1].base_url == BASE_URL
