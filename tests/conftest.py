"""
Shared fixtures: offline HTTP through `httpx.MockTransport` and an in-memory
stream connector.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from adapters.http_client import build_async_client
from core.config import AppSettings

BASE_URL = "https://api.test/api/"
SOCKET_URL = "wss://api.test/ws"


class Recorder:
    """MockTransport handler that records requests and replays one canned reply."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._reply: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json=[])

    def reply(self, status_code: int = 200, **kwargs: Any) -> None:
        self._reply = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, message: str = "connection refused") -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self._reply = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._reply(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class FakeConnection:
    def __init__(self, frames: list[str | bytes]) -> None:
        self.frames = frames
        self.sent: list[str | bytes] = []
        self.closed = False

    async def send(self, message: str | bytes) -> None:
        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame


class FakeConnector:
    def __init__(self, frames: list[str | bytes] | None = None) -> None:
        self.frames = frames or []
        self.urls: list[str] = []
        self.connections: list[FakeConnection] = []

    async def connect(self, url: str) -> FakeConnection:
        self.urls.append(url)
        connection = FakeConnection(list(self.frames))
        self.connections.append(connection)
        return connection


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, base_url=BASE_URL, socket_url=SOCKET_URL)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector(frames=['{"event": "created", "id": 1}', '{"event": "deleted", "id": 1}'])


@pytest_asyncio.fixture
async def http(settings, recorder):
    async with build_async_client(settings, transport=httpx.MockTransport(recorder)) as client:
        yield client
