from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from hookgate.config import Settings
from hookgate.main import create_app
from hookgate.models import Endpoint
from hookgate.registry import fingerprint

FIXTURES = Path(__file__).parent / "fixtures"


class Downstream:
    """Stands in for the notification API and records what it was sent."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.error is not None:
            raise self.error
        self.requests.append(request)
        if self.status_code in (204, 304):
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json={"status": "OK"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    @property
    def body(self) -> str:
        return self.requests[-1].content.decode("utf-8")


def load_fixture(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


def hook_path(endpoint: Endpoint) -> str:
    return "/hook/" + fingerprint(endpoint.source, load_fixture(endpoint.key_id))


@pytest.fixture
def fixture_bytes():
    return load_fixture


@pytest.fixture
def downstream() -> Downstream:
    return Downstream()


@pytest.fixture
def gateway(downstream):
    """Build a client for a gateway serving the given endpoints.

    Extra keyword arguments override Settings fields.
    Returns (client, path) where path is the hook route of the first endpoint.
    """

    def _make(*endpoints: Endpoint, **overrides):
        settings = Settings(
            downstream_url="http://flux.test",
            keys_dir=str(FIXTURES),
            endpoints=list(endpoints),
            **overrides,
        )
        app = create_app(settings, transport=downstream.transport)
        return TestClient(app), hook_path(endpoints[0]) if endpoints else None

    return _make

