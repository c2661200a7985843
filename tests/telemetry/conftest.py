"""Shared fakes for stats session tests."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from edgemax.models.session import HeartbeatStatus

_CLOSED = object()


class FakeWebSocket:
    """In-memory stand-in for a websockets client connection.

    Messages queued with :meth:`feed` are returned by :meth:`recv`; an
    exception instance is raised instead.  Once closed, every ``recv``
    fails immediately, as a real closed connection does.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.events: list[str] = []
        self.closed = False
        self.send_error: Exception | None = None
        self._incoming: asyncio.Queue[Any] = asyncio.Queue()

    def feed(self, message: str | Exception) -> None:
        self._incoming.put_nowait(message)

    async def send(self, message: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)
        self.events.append("send")

    async def recv(self) -> str:
        if self.closed:
            raise ConnectionError("connection closed")
        item = await self._incoming.get()
        if item is _CLOSED:
            self._incoming.put_nowait(_CLOSED)
            raise ConnectionError("connection closed")
        if isinstance(item, Exception):
            raise item
        return str(item)

    async def close(self) -> None:
        self.closed = True
        self.events.append("close")
        self._incoming.put_nowait(_CLOSED)


class FakeClient:
    """Authenticated-client collaborator with a scripted heartbeat."""

    def __init__(
        self,
        *,
        base_url: str = "https://router.local",
        verify: bool = True,
        session_id: str = "sess-123",
    ) -> None:
        self.base_url = base_url
        self.verify = verify
        self._session_id = session_id
        self.heartbeat = AsyncMock(
            return_value=HeartbeatStatus(success=True, PING=True, SESSION=True)
        )

    def session_id(self) -> str:
        return self._session_id


@pytest.fixture()
def ws() -> FakeWebSocket:
    return FakeWebSocket()


@pytest.fixture()
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture()
def connect(ws: FakeWebSocket) -> AsyncMock:
    return AsyncMock(return_value=ws)


@pytest.fixture()
def make_client() -> type[FakeClient]:
    return FakeClient
