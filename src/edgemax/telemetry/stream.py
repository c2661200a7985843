"""Unbuffered hand-off of decoded stats from the collector to the consumer."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from edgemax.models.stats import Stat

_CLOSED = object()


class StatStream:
    """Rendezvous channel of :data:`~edgemax.models.stats.Stat` values.

    :meth:`publish` does not return until the consumer has taken the stat,
    so a slow consumer holds back the producer.  Iterate with ``async for``;
    iteration ends once :meth:`close` has been called and every published
    stat has been taken.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def publish(self, stat: Stat, stop: asyncio.Event) -> bool:
        """Hand *stat* to the consumer.

        Returns ``True`` once the consumer has taken it, or ``False`` if
        *stop* was set first.
        """
        if self._closed:
            raise RuntimeError("publish on a closed StatStream")

        self._queue.put_nowait(stat)
        taken = asyncio.ensure_future(self._queue.join())
        stopped = asyncio.ensure_future(stop.wait())
        try:
            done, _ = await asyncio.wait({taken, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for fut in (taken, stopped):
                if not fut.done():
                    fut.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await fut
        return taken in done

    def close(self) -> None:
        """Mark the end of the stream.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def get(self) -> Stat | None:
        """Take the next stat, or ``None`` once the stream is closed and drained."""
        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            # Leave the marker for any other waiting consumer.
            self._queue.put_nowait(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def __aiter__(self) -> AsyncIterator[Stat]:
        return self._iter()

    async def _iter(self) -> AsyncIterator[Stat]:
        while True:
            stat = await self.get()
            if stat is None:
                return
            yield stat
