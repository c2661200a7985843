"""Exception hierarchy for the EdgeMAX client and stats stream."""

from __future__ import annotations


class EdgeMaxError(Exception):
    """Base class for all errors raised by edgemax."""


class ConfigError(EdgeMaxError):
    """Missing or invalid configuration (address, credentials, ...)."""


class ApiError(EdgeMaxError):
    """The device answered an HTTP request with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ApiError):
    """Login was rejected or the session is no longer authenticated."""


class FrameError(EdgeMaxError, ValueError):
    """A websocket message could not be decoded as a stats frame."""


class StreamError(EdgeMaxError):
    """A stats session was driven through an unsupported transition."""


class StreamConnectionError(StreamError):
    """Dialing the stats websocket or subscribing to it failed."""
