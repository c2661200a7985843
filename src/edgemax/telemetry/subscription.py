"""SUBSCRIBE / UNSUBSCRIBE requests for the stats websocket.

Wire format::

    {"SUBSCRIBE": [{"name": "system-stats"}, ...] | null,
     "UNSUBSCRIBE": [{"name": ...}, ...] | null,
     "SESSION_ID": "<PHPSESSID cookie value>"}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from edgemax.models.stats import StatType
from edgemax.telemetry.codec import encode_frame

logger = logging.getLogger(__name__)

DEFAULT_STAT_TYPES: tuple[StatType, ...] = (
    StatType.DPI_STATS,
    StatType.INTERFACES,
    StatType.SYSTEM_STATS,
)


class Sender(Protocol):
    async def send(self, message: str) -> Any: ...


class Subscription(BaseModel):
    """A single named stats subscription."""

    name: str


class SubscriptionRequest(BaseModel):
    """Request envelope sent to subscribe to, or unsubscribe from, stats."""

    model_config = ConfigDict(populate_by_name=True)

    subscribe: list[Subscription] | None = Field(default=None, alias="SUBSCRIBE")
    unsubscribe: list[Subscription] | None = Field(default=None, alias="UNSUBSCRIBE")
    session_id: str = Field(default="", alias="SESSION_ID")

    def as_unsubscribe(self) -> SubscriptionRequest:
        """Return the request that undoes this subscription."""
        names = [s.model_copy() for s in self.subscribe or []]
        return SubscriptionRequest(subscribe=None, unsubscribe=names, session_id=self.session_id)


def build_subscribe_request(
    session_id: str,
    stat_types: Iterable[StatType | str] | None = None,
) -> SubscriptionRequest:
    """Build a SUBSCRIBE request for *stat_types* (all categories when empty)."""
    names = [StatType(t).value for t in stat_types or ()] or [t.value for t in DEFAULT_STAT_TYPES]
    return SubscriptionRequest(
        subscribe=[Subscription(name=name) for name in names],
        session_id=session_id,
    )


async def send_request(connection: Sender, request: SubscriptionRequest) -> None:
    """Encode *request* as a frame and write it to *connection*."""
    frame, _ = encode_frame(request)
    logger.debug(
        "Sending stats request: subscribe=%s unsubscribe=%s",
        [s.name for s in request.subscribe or []],
        [s.name for s in request.unsubscribe or []],
    )
    await connection.send(frame)
