"""Shared fixtures for pocketsync tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from pocketsync import config as config_module
from pocketsync.config import Credentials, Settings
from pocketsync.core.api import PocketClient
from pocketsync.index.db import Database

API_ENDPOINT = "https://api.provider/v3"
AUTHORIZE_BASE = "https://provider/auth/authorize"
REDIRECT_URL = "https://example.com/callback"
CONSUMER_KEY = "1234-abcdef"


class FakePocket:
    """In-memory stand-in for the Pocket API, served through httpx.MockTransport.

    Every request is recorded in ``events`` (as its URL path) so tests can
    assert on call order. Responses for a path can be overridden via
    ``responses``.
    """

    def __init__(self) -> None:
        self.code = "abc123"
        self.token = "tok-xyz"
        self.username = "reader@example.com"
        self.authorize_status = 200
        self.links: dict[str, dict[str, Any]] = {}
        self.responses: dict[str, httpx.Response] = {}
        self.requests: list[httpx.Request] = []
        self.events: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        self.events.append(path)

        if path in self.responses:
            return self.responses[path]
        if request.url.host == "provider" and path == "/auth/authorize":
            return httpx.Response(self.authorize_status, text="<html>authorize</html>")
        if path == "/v3/oauth/request":
            return httpx.Response(200, json={"code": self.code})
        if path == "/v3/oauth/authorize":
            return httpx.Response(
                200, json={"access_token": self.token, "username": self.username}
            )
        if path == "/v3/get":
            return httpx.Response(200, json={"status": 1, "list": self.links or []})
        return httpx.Response(404, text="not found")

    def json_body(self, index: int) -> dict[str, Any]:
        """Decoded JSON body of the index-th recorded request."""
        return json.loads(self.requests[index].content)

    def add_link(self, item_id: str, **fields: Any) -> dict[str, Any]:
        entry = make_link_entry(item_id, **fields)
        self.links[item_id] = entry
        return entry


def make_link_entry(item_id: str, **fields: Any) -> dict[str, Any]:
    """Build a link entry shaped like the Pocket API returns it."""
    entry: dict[str, Any] = {
        "item_id": item_id,
        "resolved_id": item_id,
        "given_url": f"https://example.com/{item_id}",
        "given_title": "",
        "favorite": "0",
        "status": "0",
        "time_added": "1700000000",
        "time_updated": "1700000100",
        "time_read": "0",
        "time_favorited": "0",
        "sort_id": int(item_id) if item_id.isdigit() else 0,
        "resolved_title": f"Article {item_id}",
        "resolved_url": f"https://example.com/{item_id}",
        "excerpt": "An excerpt.",
        "is_article": "1",
        "is_index": "0",
        "has_video": "0",
        "has_image": "0",
        "word_count": "1200",
        "lang": "en",
        "listen_duration_estimate": 465,
    }
    entry.update(fields)
    return entry


@pytest.fixture
def fake_pocket() -> FakePocket:
    return FakePocket()


@pytest.fixture
def http_client(fake_pocket: FakePocket) -> Generator[httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(fake_pocket.handler))
    yield client
    client.close()


@pytest.fixture
def pocket_client(http_client: httpx.Client) -> PocketClient:
    return PocketClient(API_ENDPOINT, http_client=http_client)


@pytest.fixture
def credentials() -> Credentials:
    """A fresh credential document with nothing obtained yet."""
    return Credentials(
        consumer_key=CONSUMER_KEY,
        redirect_url=REDIRECT_URL,
        api_endpoint=API_ENDPOINT,
    )


@pytest.fixture
def authorized_credentials() -> Credentials:
    """A credential document after a completed handshake."""
    return Credentials(
        consumer_key=CONSUMER_KEY,
        redirect_url=REDIRECT_URL,
        api_endpoint=API_ENDPOINT,
        code="abc123",
        token="tok-xyz",
        auth_url=f"{AUTHORIZE_BASE}?request_token=abc123&redirect_uri={REDIRECT_URL}",
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        config_path=tmp_path / "config.json",
        db_path=tmp_path / "links.db",
        authorize_base=AUTHORIZE_BASE,
    )


@pytest.fixture
def write_config(settings: Settings) -> Callable[..., Path]:
    """Factory fixture to write the credential document."""

    def _write_config(**fields: Any) -> Path:
        data: dict[str, Any] = {
            "consumer_key": CONSUMER_KEY,
            "redirect_url": REDIRECT_URL,
            "api_endpoint": API_ENDPOINT,
            "code": None,
            "token": None,
            "auth_url": None,
            "code_valid": None,
        }
        data.update(fields)
        settings.config_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return settings.config_path

    return _write_config


@pytest.fixture
def db(tmp_path: Path) -> Generator[Database]:
    database = Database(tmp_path / "links.db")
    yield database
    database.close()


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def cli_env(
    settings: Settings,
    tmp_path: Path,
    http_client: httpx.Client,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Settings]:
    """Point the CLI at temp files and the fake Pocket API.

    The environment is read through get_settings(), so the cached settings
    are reset before and after the test.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("POCKETSYNC_CONFIG", str(settings.config_path))
    monkeypatch.setenv("POCKETSYNC_DB", str(settings.db_path))
    monkeypatch.setenv("POCKETSYNC_AUTHORIZE_URL", AUTHORIZE_BASE)
    monkeypatch.delenv("POCKETSYNC_TIMEOUT", raising=False)
    monkeypatch.delenv("POCKETSYNC_LOG_LEVEL", raising=False)
    monkeypatch.delenv("POCKETSYNC_LOG_FILE", raising=False)

    from pocketsync.core import driver as driver_module

    monkeypatch.setattr(
        driver_module,
        "PocketClient",
        lambda api_endpoint, timeout=None: PocketClient(
            api_endpoint, timeout=timeout, http_client=http_client
        ),
    )

    config_module.reset_settings()
    yield settings
    config_module.reset_settings()
