from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from gamedev_hub.core.config import Settings
from gamedev_hub.database import Store
from gamedev_hub.main import create_app
from gamedev_hub.services.repository import Repository

GUILD_ID = "489531295848726528"
API_BASE = "https://discord.com/api"


class FakeDiscord:
    """Stand-in for the Discord API, served through httpx.MockTransport."""

    def __init__(self):
        self.profile: dict[str, Any] = {
            "id": "42",
            "username": "ada",
            "avatar": None,
            "discriminator": "1337",
            "verified": True,
            "email": "ada@example.com",
        }
        self.guilds: list[dict[str, Any]] = [
            {"id": "1", "name": "Elsewhere"},
            {"id": GUILD_ID, "name": "Game Dev"},
        ]
        self.token_status = 200
        self.token_body: Any = {
            "access_token": "access-abc",
            "refresh_token": "refresh-xyz",
            "token_type": "Bearer",
            "expires_in": 604800,
        }
        self.profile_status = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/oauth2/token"):
            return httpx.Response(self.token_status, json=self.token_body)
        if path.endswith("/users/@me/guilds"):
            return httpx.Response(200, json=self.guilds)
        if path.endswith("/users/@me"):
            return httpx.Response(self.profile_status, json=self.profile)
        return httpx.Response(404, json={"message": "404: Not Found"})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        CLIENT_ID="test-client",
        CLIENT_SECRET="test-secret",
        SESSION_SECRET="session-secret",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        DISCORD_API_BASE=API_BASE,
        GUILD_ID=GUILD_ID,
    )


@pytest.fixture
def store(settings):
    store = Store(settings.DATABASE_URL, settings.SCHEMA_PATH).open()
    yield store
    store.close()


@pytest.fixture
def repository(store) -> Repository:
    return Repository(store)


@pytest.fixture
def discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def http_client(discord) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(discord.handler))


@pytest.fixture
def client(settings, http_client):
    app = create_app(settings, http_client=http_client)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Run the binder flow as if Discord had just redirected back to us."""

    def _login() -> httpx.Response:
        return client.get("/", params={"token": "access-abc", "refresh": "refresh-xyz"}, follow_redirects=False)

    return _login
