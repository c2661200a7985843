"""Stream live telemetry from Ubiquiti EdgeMAX devices."""

from __future__ import annotations

__version__ = "0.1.0"

from edgemax.api.client import EdgeMaxClient, insecure_client
from edgemax.api.errors import (
    ApiError,
    AuthError,
    EdgeMaxError,
    FrameError,
    StreamConnectionError,
    StreamError,
)
from edgemax.models.stats import (
    DPIStat,
    DPIStats,
    Interface,
    Interfaces,
    InterfaceStats,
    Stat,
    StatType,
    SystemStats,
)
from edgemax.telemetry.session import StatsSession

__all__ = [
    "ApiError",
    "AuthError",
    "DPIStat",
    "DPIStats",
    "EdgeMaxClient",
    "EdgeMaxError",
    "FrameError",
    "Interface",
    "InterfaceStats",
    "Interfaces",
    "Stat",
    "StatType",
    "StatsSession",
    "StreamConnectionError",
    "StreamError",
    "SystemStats",
    "__version__",
    "insecure_client",
]
