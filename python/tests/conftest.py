from collections.abc import Callable

import httpx
import pytest
from davops.client import DavClient
from davops.config import DavClientConfig
from dotenv import load_dotenv

BASE_URL = "https://cloud.example.com"
WEBDAV_URL = f"{BASE_URL}/remote.php/webdav"


def pytest_configure(config):
    """Configure pytest with global settings."""
    # Load environment variables
    load_dotenv()


# ==============================================================================
# Fake WebDAV Server
# ==============================================================================

Reply = int | tuple[int, bytes] | Callable[[httpx.Request], httpx.Response]


class FakeServer:
    """Answers requests with canned replies per HTTP method and records every request.

    A reply is a status code, a (status code, body) pair, or a callable taking the
    request. Callables may raise to simulate transport failures.
    """

    def __init__(self, replies: dict[str, Reply] | None = None):
        self.replies = replies or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.get(request.method, 500)
        if callable(reply):
            return reply(request)
        if isinstance(reply, tuple):
            status_code, body = reply
            return httpx.Response(status_code, content=body)
        return httpx.Response(reply)

    @property
    def methods(self) -> list[str]:
        return [request.method for request in self.requests]

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == method]


class RecordingClient(DavClient):
    """DavClient that remembers which responses were drained."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.drained: list[httpx.Response] = []

    def exhaust_response(self, response: httpx.Response) -> bytes:
        self.drained.append(response)
        return super().exhaust_response(response)

    def drained_for(self, method: str) -> list[httpx.Response]:
        return [response for response in self.drained if response.request.method == method]


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def server():
    """A fake server with no replies configured. Tests fill in `server.replies`."""
    return FakeServer()


@pytest.fixture
def make_client(server):
    """Build a client talking to the fake server, reporting the given server version."""
    clients = []

    def _make_client(server_version: str | None = "10.13.0") -> RecordingClient:
        config = DavClientConfig(base_url=BASE_URL, server_version=server_version)
        client = RecordingClient(config, transport=httpx.MockTransport(server))
        clients.append(client)
        return client

    yield _make_client

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    """Client for a recent server, which only enforces the baseline character set."""
    return make_client()


@pytest.fixture
def legacy_client(make_client):
    """Client for a server that enforces the extended forbidden-character set."""
    return make_client("8.0.16")
