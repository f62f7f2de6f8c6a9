"""Pytest configuration and shared fixtures for API tests."""

import json
import os

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set env before app imports so module-level settings and the limiter use it
os.environ.setdefault("FIRESTORE_PROJECT_ID", "env-project")
os.environ.setdefault("FIRESTORE_API_KEY", "env-key")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")

from aurasense_relay.api.deps import get_settings
from aurasense_relay.config import Settings
from aurasense_relay.main import app
from aurasense_relay.services.http_client import close_http_client, init_http_client

PREDICTION_HOST = "prediction.test"
FIRESTORE_HOST = "firestore.test"


class FakeUpstream:
    """Serves the prediction API and Firestore from an httpx.MockTransport and records every request.

    A reply is either (status, body) or an exception instance to raise.
    """

    def __init__(self):
        self.prediction_reply = (200, {"stress_level": "calm", "probabilities": {"calm": 0.9, "stressed": 0.1}})
        self.firestore_reply = (200, {"name": "doc"})
        self.prediction_requests: list[httpx.Request] = []
        self.firestore_requests: list[httpx.Request] = []

    @property
    def requests(self) -> list[httpx.Request]:
        return self.prediction_requests + self.firestore_requests

    def prediction_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.prediction_requests]

    def firestore_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.firestore_requests]

    def _reply(self, reply, request: httpx.Request) -> httpx.Response:
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body, request=request)
        return httpx.Response(status, text=body or "", request=request)

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == PREDICTION_HOST:
            self.prediction_requests.append(request)
            return self._reply(self.prediction_reply, request)
        if request.url.host == FIRESTORE_HOST:
            self.firestore_requests.append(request)
            return self._reply(self.firestore_reply, request)
        raise AssertionError(f"unexpected outbound request to {request.url}")


def make_settings(**overrides) -> Settings:
    values = {
        "prediction_api_url": f"https://{PREDICTION_HOST}/predict",
        "firestore_project_id": "proj-1",
        "firestore_api_key": "key-1",
        "firestore_base_url": f"https://{FIRESTORE_HOST}/v1",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings():
    return make_settings()


@pytest_asyncio.fixture
async def upstream():
    """Install a fresh shared HTTP client backed by FakeUpstream."""
    fake = FakeUpstream()
    await close_http_client()
    init_http_client(timeout=5.0, transport=httpx.MockTransport(fake.handle))
    yield fake
    await close_http_client()


@pytest_asyncio.fixture
async def client(upstream, test_settings):
    """Yield AsyncClient against the app with settings overridden."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def override_settings(client):
    """Swap the settings the app sees for the rest of the test, e.g. override_settings(default_user_id="x")."""

    def _override(**overrides) -> Settings:
        s = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: s
        return s

    return _override
