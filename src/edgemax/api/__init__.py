"""HTTP client and error types for EdgeMAX devices."""

from edgemax.api.client import (
    HEARTBEAT_PATH,
    SESSION_COOKIE,
    USER_AGENT,
    EdgeMaxClient,
    insecure_client,
)
from edgemax.api.errors import (
    ApiError,
    AuthError,
    ConfigError,
    EdgeMaxError,
    FrameError,
    StreamConnectionError,
    StreamError,
)

__all__ = [
    "HEARTBEAT_PATH",
    "SESSION_COOKIE",
    "USER_AGENT",
    "ApiError",
    "AuthError",
    "ConfigError",
    "EdgeMaxClient",
    "EdgeMaxError",
    "FrameError",
    "StreamConnectionError",
    "StreamError",
    "insecure_client",
]
