"""Typed statistics published by an EdgeMAX stats stream.

Each record is a plain dataclass carrying a pure ``stat_type`` accessor,
so a consumer can branch on the category without inspecting types::

    async for stat in session:
        if stat.stat_type is StatType.INTERFACES:
            ...
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from ipaddress import IPv4Address, IPv6Address
from typing import TypeAlias

IPAddress: TypeAlias = IPv4Address | IPv6Address


class StatType(StrEnum):
    """Category discriminator used on the wire and on every decoded stat."""

    DPI_STATS = "export"
    SYSTEM_STATS = "system-stats"
    INTERFACES = "interfaces"


# ---------------------------------------------------------------------------
# System stats
# ---------------------------------------------------------------------------


@dataclass
class SystemStats:
    """Uptime, CPU utilisation and memory utilisation of the device."""

    cpu: int
    uptime: timedelta
    memory: int

    @property
    def stat_type(self) -> StatType:
        return StatType.SYSTEM_STATS


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


@dataclass
class InterfaceStats:
    """Data transmission counters for one network interface."""

    receive_packets: int = 0
    transmit_packets: int = 0
    receive_bytes: int = 0
    transmit_bytes: int = 0
    receive_errors: int = 0
    transmit_errors: int = 0
    receive_dropped: int = 0
    transmit_dropped: int = 0
    multicast: int = 0
    receive_bps: int = 0
    transmit_bps: int = 0


@dataclass
class Interface:
    """A network interface on an EdgeMAX device."""

    name: str
    up: bool = False
    autonegotiation: bool = False
    duplex: str = ""
    speed: int = 0
    mac: str | None = None
    mtu: int = 0
    addresses: list[IPAddress] = field(default_factory=list)
    stats: InterfaceStats = field(default_factory=InterfaceStats)


@dataclass
class Interfaces:
    """All interfaces of a device, sorted ascending by name."""

    interfaces: list[Interface] = field(default_factory=list)

    @property
    def stat_type(self) -> StatType:
        return StatType.INTERFACES

    def __iter__(self) -> Iterator[Interface]:
        return iter(self.interfaces)

    def __len__(self) -> int:
        return len(self.interfaces)

    def __getitem__(self, index: int) -> Interface:
        return self.interfaces[index]


# ---------------------------------------------------------------------------
# Deep packet inspection
# ---------------------------------------------------------------------------


@dataclass
class DPIStat:
    """Deep packet inspection counters for one client and traffic type."""

    ip: IPAddress
    type: str  # noqa: A003
    category: str
    receive_bytes: int = 0
    receive_rate: int = 0
    transmit_bytes: int = 0
    transmit_rate: int = 0


@dataclass
class DPIStats:
    """DPI counters for every client, sorted by address then traffic type."""

    stats: list[DPIStat] = field(default_factory=list)

    @property
    def stat_type(self) -> StatType:
        return StatType.DPI_STATS

    def __iter__(self) -> Iterator[DPIStat]:
        return iter(self.stats)

    def __len__(self) -> int:
        return len(self.stats)

    def __getitem__(self, index: int) -> DPIStat:
        return self.stats[index]


Stat: TypeAlias = SystemStats | Interfaces | DPIStats


# ---------------------------------------------------------------------------
# Address ordering
# ---------------------------------------------------------------------------


def _packed(ip: IPAddress | None) -> bytes:
    """Return the address bytes, using the 4-byte form for IPv4-mapped IPv6."""
    if ip is None:
        return b""
    if isinstance(ip, IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped.packed
    return ip.packed


def ip_less(a: IPAddress | None, b: IPAddress | None) -> bool:
    """Report whether *a* sorts before *b*.

    IPv4 addresses sort before IPv6 addresses.  Otherwise the first
    differing byte decides; equal addresses (or two ``None``) are not less.
    This is a sort comparator, not an equality test.
    """
    pa = _packed(a)
    pb = _packed(b)

    if len(pa) == 4 and len(pb) == 16:
        return True
    if len(pa) == 16 and len(pb) == 4:
        return False

    for x, y in zip(pa, pb, strict=False):
        if x != y:
            return x < y
    return False
