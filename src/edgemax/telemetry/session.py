"""Stats session lifecycle over the EdgeMAX stats websocket.

A session is single-shot::

    idle → connecting → streaming → draining → closed

Usage::

    async with StatsSession(client) as session:
        async for stat in session:
            ...
    # unsubscribed, socket closed, stream closed

While streaming, two tasks run next to the caller:

* the keepalive loop calls the device heartbeat every few seconds so the
  HTTP session behind the websocket does not expire.  Its first failure
  ends the loop and is raised from :meth:`StatsSession.close`.
* the collector loop receives frames, decodes each known category and
  hands the result to the :class:`StatStream`.  Receive and decode
  failures are logged and skipped.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from edgemax.api.errors import StreamConnectionError, StreamError
from edgemax.models.stats import StatType
from edgemax.telemetry.codec import decode_frame
from edgemax.telemetry.decoder import StatDecodeError, decode_stat
from edgemax.telemetry.stream import StatStream
from edgemax.telemetry.subscription import (
    SubscriptionRequest,
    build_subscribe_request,
    send_request,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
    from types import TracebackType

    from edgemax.models.session import HeartbeatStatus
    from edgemax.models.stats import Stat

logger = logging.getLogger(__name__)

KEEPALIVE_INTERVAL = 5.0
STATS_PATH = "/ws/stats"

_MAX_MESSAGE_SIZE = 16 * 2**20


class SessionState(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    DRAINING = "draining"
    CLOSED = "closed"


class StatsClient(Protocol):
    """What a session needs from the authenticated HTTP client."""

    @property
    def base_url(self) -> str: ...

    @property
    def verify(self) -> bool | str | ssl.SSLContext: ...

    def session_id(self) -> str: ...

    async def heartbeat(self) -> HeartbeatStatus: ...


def websocket_url(base_url: str) -> str:
    """Return the stats websocket endpoint for a device *base_url*."""
    return str(httpx.URL(base_url).copy_with(scheme="wss", path=STATS_PATH))


def ssl_context_for(verify: bool | str | ssl.SSLContext) -> ssl.SSLContext | None:
    """Translate an httpx-style *verify* setting into a websocket TLS context.

    ``None`` means the websocket library's default verification.
    """
    if isinstance(verify, ssl.SSLContext):
        return verify
    if isinstance(verify, str):
        return ssl.create_default_context(cafile=verify)
    if not verify:
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx
    return None


async def _ws_connect(url: str, **kwargs: Any) -> Any:
    import websockets.asyncio.client as ws_client

    return await ws_client.connect(url, max_size=_MAX_MESSAGE_SIZE, **kwargs)


class StatsSession:
    """Subscribes to device stats and streams them as typed records."""

    def __init__(
        self,
        client: StatsClient,
        stat_types: Sequence[StatType | str] | None = None,
        *,
        keepalive_interval: float = KEEPALIVE_INTERVAL,
        connect: Callable[..., Awaitable[Any]] | None = None,
    ) -> None:
        self._client = client
        self._stat_types = [StatType(t) for t in stat_types or ()]
        self._keepalive_interval = keepalive_interval
        self._connect = connect or _ws_connect
        self._state = SessionState.IDLE
        self._ws: Any = None
        self._request: SubscriptionRequest | None = None
        self._stream = StatStream()
        self._keepalive_stop = asyncio.Event()
        self._collector_stop = asyncio.Event()
        self._keepalive_task: asyncio.Task[None] | None = None
        self._collector_task: asyncio.Task[None] | None = None
        self._heartbeat_count = 0
        self._frame_count = 0

    # -- properties -------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stats(self) -> StatStream:
        """The stream decoded stats are published on."""
        return self._stream

    @property
    def request(self) -> SubscriptionRequest | None:
        """The SUBSCRIBE request sent when the session started."""
        return self._request

    @property
    def heartbeat_count(self) -> int:
        """Number of successful heartbeats since start."""
        return self._heartbeat_count

    @property
    def frame_count(self) -> int:
        """Number of frames received and decoded since start."""
        return self._frame_count

    # -- lifecycle --------------------------------------------------------

    async def start(self) -> None:
        """Dial the stats websocket, subscribe, and start both loops.

        Raises :class:`StreamConnectionError` if dialing or subscribing
        fails; no loop is left running in that case.
        """
        if self._state is not SessionState.IDLE:
            raise StreamError(f"Cannot start a stats session in state {self._state}")
        self._state = SessionState.CONNECTING

        url = websocket_url(self._client.base_url)
        dial_kwargs: dict[str, Any] = {"origin": self._client.base_url}
        ssl_context = ssl_context_for(self._client.verify)
        if ssl_context is not None:
            dial_kwargs["ssl"] = ssl_context

        try:
            self._ws = await self._connect(url, **dial_kwargs)
        except Exception as exc:
            self._state = SessionState.CLOSED
            raise StreamConnectionError(f"Failed to connect to {url}: {exc}") from exc

        try:
            self._request = build_subscribe_request(self._client.session_id(), self._stat_types)
            await send_request(self._ws, self._request)
        except Exception as exc:
            self._state = SessionState.CLOSED
            with contextlib.suppress(Exception):
                await self._ws.close()
            raise StreamConnectionError(f"Failed to subscribe to stats at {url}: {exc}") from exc

        self._keepalive_task = asyncio.create_task(self._keepalive())
        self._collector_task = asyncio.create_task(self._collect())
        self._state = SessionState.STREAMING
        logger.info(
            "Streaming stats from %s (%s)",
            url,
            ", ".join(s.name for s in self._request.subscribe or []),
        )

    async def close(self) -> None:
        """Unsubscribe, close the socket, and close the stat stream.

        Raises the keepalive loop's failure if it had one, otherwise the
        first error hit while unsubscribing or closing.  Teardown always
        completes.  May only be called once, on a streaming session.
        """
        if self._state is not SessionState.STREAMING:
            raise StreamError(f"Cannot close a stats session in state {self._state}")
        self._state = SessionState.DRAINING
        assert self._keepalive_task is not None
        assert self._collector_task is not None
        assert self._request is not None

        error: BaseException | None = None

        self._keepalive_stop.set()
        try:
            await self._keepalive_task
        except Exception as exc:
            error = exc

        try:
            await send_request(self._ws, self._request.as_unsubscribe())
        except Exception as exc:
            logger.warning("Failed to unsubscribe from stats", exc_info=True)
            error = error or exc

        try:
            await self._ws.close()
        except Exception as exc:
            logger.warning("Failed to close stats websocket", exc_info=True)
            error = error or exc

        self._collector_stop.set()
        try:
            await self._collector_task
        except Exception as exc:
            logger.warning("Stats collector failed", exc_info=True)
            error = error or exc
        finally:
            self._stream.close()
            self._state = SessionState.CLOSED

        logger.info(
            "Stats session closed (%d frames, %d heartbeats)",
            self._frame_count,
            self._heartbeat_count,
        )

        if error is not None:
            raise error

    # -- loops ------------------------------------------------------------

    async def _keepalive(self) -> None:
        """Call the heartbeat endpoint until told to stop."""
        while True:
            try:
                status = await self._client.heartbeat()
            except Exception:
                logger.warning("Heartbeat failed; keepalive stopped", exc_info=True)
                raise
            self._heartbeat_count += 1
            logger.debug(
                "Heartbeat: success=%s ping=%s session=%s",
                status.success,
                status.ping,
                status.session,
            )

            try:
                await asyncio.wait_for(
                    self._keepalive_stop.wait(), timeout=self._keepalive_interval
                )
                return
            except TimeoutError:
                continue

    async def _collect(self) -> None:
        """Receive frames, decode them, and publish the resulting stats."""
        while not self._collector_stop.is_set():
            try:
                frame = decode_frame(await self._ws.recv())
            except Exception:
                # No backoff: a dead socket is retried until close() sets the stop event.
                logger.debug("Stats receive failed", exc_info=True)
                await asyncio.sleep(0)
                continue

            if not isinstance(frame, dict):
                continue
            self._frame_count += 1

            for key, payload in frame.items():
                try:
                    stat_type = StatType(key)
                except ValueError:
                    logger.debug("Ignoring unknown stats category %r", key)
                    continue

                try:
                    stat = decode_stat(stat_type, payload)
                except StatDecodeError:
                    logger.warning("Failed to decode %s stats", stat_type, exc_info=True)
                    continue

                if not await self._stream.publish(stat, self._collector_stop):
                    return

    # -- iteration / context manager -------------------------------------

    def __aiter__(self) -> AsyncIterator[Stat]:
        return aiter(self._stream)

    async def __aenter__(self) -> StatsSession:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._state is SessionState.STREAMING:
            await self.close()
