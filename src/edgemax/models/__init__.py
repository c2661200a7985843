from __future__ import annotations

from edgemax.models.config import AppSettings
from edgemax.models.session import HeartbeatStatus
from edgemax.models.stats import (
    DPIStat,
    DPIStats,
    Interface,
    Interfaces,
    InterfaceStats,
    IPAddress,
    Stat,
    StatType,
    SystemStats,
    ip_less,
)

__all__ = [
    # config
    "AppSettings",
    # session
    "HeartbeatStatus",
    # stats
    "DPIStat",
    "DPIStats",
    "IPAddress",
    "Interface",
    "InterfaceStats",
    "Interfaces",
    "Stat",
    "StatType",
    "SystemStats",
    "ip_less",
]
