"""Stats streaming: frame codec, subscriptions, decoders, and session lifecycle."""

from __future__ import annotations

from edgemax.telemetry.codec import PayloadType, decode_frame, decode_frame_into, encode_frame
from edgemax.telemetry.decoder import (
    AddressParseError,
    NumericParseError,
    StatDecodeError,
    decode_dpi_stats,
    decode_interfaces,
    decode_stat,
    decode_system_stats,
)
from edgemax.telemetry.session import (
    KEEPALIVE_INTERVAL,
    SessionState,
    StatsClient,
    StatsSession,
    ssl_context_for,
    websocket_url,
)
from edgemax.telemetry.stream import StatStream
from edgemax.telemetry.subscription import (
    DEFAULT_STAT_TYPES,
    Subscription,
    SubscriptionRequest,
    build_subscribe_request,
    send_request,
)

__all__ = [
    "DEFAULT_STAT_TYPES",
    "KEEPALIVE_INTERVAL",
    "AddressParseError",
    "NumericParseError",
    "PayloadType",
    "SessionState",
    "StatDecodeError",
    "StatStream",
    "StatsClient",
    "StatsSession",
    "Subscription",
    "SubscriptionRequest",
    "build_subscribe_request",
    "decode_dpi_stats",
    "decode_frame",
    "decode_frame_into",
    "decode_interfaces",
    "decode_stat",
    "decode_system_stats",
    "encode_frame",
    "send_request",
    "ssl_context_for",
    "websocket_url",
]
