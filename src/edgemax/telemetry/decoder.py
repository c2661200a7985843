"""Decode raw stats payloads into typed, ordered records.

EdgeMAX devices encode every number as a JSON string and are loose about
the shape of some fields.  Payloads are first validated into string-typed
wire models (JSON ``null`` reads as ``""``), then each field is converted
explicitly.  Any bad field fails the whole payload; nothing partial is
returned.

Payload shapes::

    system-stats: {"cpu": "10", "uptime": "20", "mem": "30"}

    interfaces:   {"eth0": {"up": "true", "autoneg": "true", "duplex": "full",
                            "speed": "1000", "mac": "de:ad:be:ef:de:ad",
                            "mtu": "1500", "addresses": ["192.168.1.1/24"],
                            "stats": {"rx_packets": "1", ...}}}

    export (DPI): {"192.168.1.10": {"Web|Web - Other": {"rx_bytes": "1",
                                    "rx_rate": "2", "tx_bytes": "3",
                                    "tx_rate": "4"}}}
"""

from __future__ import annotations

import ipaddress
import json
import logging
import re
import string
from collections.abc import Callable
from datetime import timedelta
from functools import cmp_to_key
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    StrictStr,
    TypeAdapter,
    ValidationError,
)

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

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_HEX_DIGITS = frozenset(string.hexdigits)
_MAC_OCTET_COUNTS = (6, 8, 20)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class StatDecodeError(ValueError):
    """A stats payload could not be decoded."""


class NumericParseError(StatDecodeError):
    """A numeric field did not hold a base-10 integer string."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"{field}: invalid integer {value!r}")
        self.field = field
        self.value = value


class AddressParseError(StatDecodeError):
    """A hardware address or CIDR address could not be parsed."""


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


def _null_as_empty(value: Any) -> Any:
    return "" if value is None else value


WireStr = Annotated[StrictStr, BeforeValidator(_null_as_empty)]


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _RawSystemStats(_WireModel):
    cpu: WireStr = ""
    uptime: WireStr = ""
    mem: WireStr = ""


class _RawInterfaceStats(_WireModel):
    rx_packets: WireStr = ""
    tx_packets: WireStr = ""
    rx_bytes: WireStr = ""
    tx_bytes: WireStr = ""
    rx_errors: WireStr = ""
    tx_errors: WireStr = ""
    rx_dropped: WireStr = ""
    tx_dropped: WireStr = ""
    multicast: WireStr = ""
    rx_bps: WireStr = ""
    tx_bps: WireStr = ""


class _RawInterface(_WireModel):
    up: WireStr = ""
    autoneg: WireStr = ""
    duplex: WireStr = ""
    speed: WireStr = ""
    mac: WireStr = ""
    mtu: WireStr = ""
    # Either a single CIDR string or a list of them, depending on firmware.
    addresses: Any = None
    stats: _RawInterfaceStats | None = None


class _RawDPIEntry(_WireModel):
    rx_bytes: WireStr = ""
    rx_rate: WireStr = ""
    tx_bytes: WireStr = ""
    tx_rate: WireStr = ""


_SYSTEM_STATS = TypeAdapter(_RawSystemStats)
_INTERFACES = TypeAdapter(dict[str, _RawInterface | None])
_DPI_STATS = TypeAdapter(dict[str, dict[str, _RawDPIEntry | None] | None])


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _load(raw: Any) -> Any:
    """Parse *raw* as JSON when it is still a document."""
    if isinstance(raw, str | bytes | bytearray):
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise StatDecodeError(f"invalid JSON: {exc}") from exc
    return raw


def _validate(adapter: TypeAdapter[Any], value: Any, what: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as exc:
        raise StatDecodeError(f"invalid {what} payload: {exc}") from exc


def _atoi(value: str, field: str) -> int:
    if not _INT_RE.fullmatch(value):
        raise NumericParseError(field, value)
    try:
        return int(value)
    except ValueError as exc:
        # Digit strings past the interpreter's int conversion limit.
        raise NumericParseError(field, value) from exc


def _atoi_or_zero(value: str, field: str) -> int:
    if value == "":
        return 0
    return _atoi(value, field)


def _parse_mac(value: str) -> str:
    """Parse a MAC address and return it as lowercase colon hex.

    Accepts colon or hyphen separated octets and the dotted
    ``xxxx.xxxx.xxxx`` form.
    """
    if "." in value:
        groups = value.split(".")
        if any(len(group) != 4 for group in groups):
            raise AddressParseError(f"invalid MAC address {value!r}")
        octets = [group[i : i + 2] for group in groups for i in (0, 2)]
    else:
        sep = "-" if "-" in value and ":" not in value else ":"
        octets = value.split(sep)
    if len(octets) not in _MAC_OCTET_COUNTS or any(
        len(octet) != 2 or not _HEX_DIGITS.issuperset(octet) for octet in octets
    ):
        raise AddressParseError(f"invalid MAC address {value!r}")
    return ":".join(octet.lower() for octet in octets)


def _parse_cidr(value: Any) -> IPAddress:
    """Parse ``address/prefix`` and keep only the address."""
    if not isinstance(value, str) or "/" not in value:
        raise AddressParseError(f"invalid CIDR address {value!r}")
    try:
        return ipaddress.ip_interface(value).ip
    except ValueError as exc:
        raise AddressParseError(f"invalid CIDR address {value!r}") from exc


def _parse_addresses(raw: Any) -> list[IPAddress]:
    if isinstance(raw, list):
        return [_parse_cidr(item) for item in raw]
    if isinstance(raw, str):
        return [_parse_cidr(raw)] if raw else []
    return []


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def decode_system_stats(raw: Any) -> SystemStats:
    """Decode a ``system-stats`` payload.

    Raises:
        NumericParseError: If cpu, uptime or mem is not an integer string.
        StatDecodeError: If the payload is not a JSON object of strings.
    """
    v: _RawSystemStats = _validate(_SYSTEM_STATS, _load(raw), "system-stats")

    cpu = _atoi(v.cpu, "cpu")
    uptime = _atoi(v.uptime, "uptime")
    memory = _atoi(v.mem, "mem")

    return SystemStats(cpu=cpu, uptime=timedelta(seconds=uptime), memory=memory)


def _decode_interface(name: str, v: _RawInterface) -> Interface:
    s = v.stats or _RawInterfaceStats()

    mac: str | None = None
    if v.mac:
        mac = _parse_mac(v.mac)

    return Interface(
        name=name,
        up=v.up == "true",
        autonegotiation=v.autoneg == "true",
        duplex=v.duplex,
        speed=_atoi_or_zero(v.speed, "speed"),
        mac=mac,
        mtu=_atoi_or_zero(v.mtu, "mtu"),
        addresses=_parse_addresses(v.addresses),
        stats=InterfaceStats(
            receive_packets=_atoi_or_zero(s.rx_packets, "rx_packets"),
            transmit_packets=_atoi_or_zero(s.tx_packets, "tx_packets"),
            receive_bytes=_atoi_or_zero(s.rx_bytes, "rx_bytes"),
            transmit_bytes=_atoi_or_zero(s.tx_bytes, "tx_bytes"),
            receive_errors=_atoi_or_zero(s.rx_errors, "rx_errors"),
            transmit_errors=_atoi_or_zero(s.tx_errors, "tx_errors"),
            receive_dropped=_atoi_or_zero(s.rx_dropped, "rx_dropped"),
            transmit_dropped=_atoi_or_zero(s.tx_dropped, "tx_dropped"),
            multicast=_atoi_or_zero(s.multicast, "multicast"),
            receive_bps=_atoi_or_zero(s.rx_bps, "rx_bps"),
            transmit_bps=_atoi_or_zero(s.tx_bps, "tx_bps"),
        ),
    )


def decode_interfaces(raw: Any) -> Interfaces:
    """Decode an ``interfaces`` payload, sorted by interface name.

    Empty numeric strings read as ``0``; ``up`` and ``autoneg`` are true only
    for the exact string ``"true"``.

    Raises:
        NumericParseError: If a numeric field is not an integer string.
        AddressParseError: If a MAC or CIDR address is malformed.
        StatDecodeError: If the payload has the wrong shape.
    """
    value = _load(raw)
    if value is None:
        return Interfaces()

    v: dict[str, _RawInterface | None] = _validate(_INTERFACES, value, "interfaces")
    interfaces = [
        _decode_interface(name, raw_ifi or _RawInterface()) for name, raw_ifi in v.items()
    ]
    interfaces.sort(key=lambda ifi: ifi.name)
    return Interfaces(interfaces)


def _compare_dpi(a: DPIStat, b: DPIStat) -> int:
    if ip_less(a.ip, b.ip):
        return -1
    if ip_less(b.ip, a.ip):
        return 1
    return (a.type > b.type) - (a.type < b.type)


def decode_dpi_stats(raw: Any) -> DPIStats:
    """Decode an ``export`` (deep packet inspection) payload.

    Client keys that are not IP addresses are dropped.  Traffic keys must be
    ``"Type|Category"`` with exactly one ``|``.  The result is sorted by
    client address, then type.

    Raises:
        NumericParseError: If a counter is not an integer string.
        StatDecodeError: If a traffic key is malformed or the payload has
            the wrong shape.
    """
    value = _load(raw)
    if value is None:
        return DPIStats()

    v: dict[str, dict[str, _RawDPIEntry | None] | None] = _validate(_DPI_STATS, value, "export")

    out: list[DPIStat] = []
    for client, entries in v.items():
        try:
            ip = ipaddress.ip_address(client)
        except ValueError:
            logger.debug("Skipping DPI stats for non-IP client key %r", client)
            continue

        for stat_type, entry in (entries or {}).items():
            name_cat = stat_type.split("|")
            if len(name_cat) != 2:
                raise StatDecodeError(f"invalid stat type: {json.dumps(stat_type)}")

            e = entry or _RawDPIEntry()
            out.append(
                DPIStat(
                    ip=ip,
                    type=name_cat[0],
                    category=name_cat[1],
                    receive_bytes=_atoi(e.rx_bytes, "rx_bytes"),
                    receive_rate=_atoi(e.rx_rate, "rx_rate"),
                    transmit_bytes=_atoi(e.tx_bytes, "tx_bytes"),
                    transmit_rate=_atoi(e.tx_rate, "tx_rate"),
                )
            )

    out.sort(key=cmp_to_key(_compare_dpi))
    return DPIStats(out)


_DECODERS: dict[StatType, Callable[[Any], Stat]] = {
    StatType.SYSTEM_STATS: decode_system_stats,
    StatType.INTERFACES: decode_interfaces,
    StatType.DPI_STATS: decode_dpi_stats,
}


def decode_stat(stat_type: StatType | str, raw: Any) -> Stat:
    """Decode *raw* with the decoder registered for *stat_type*.

    Raises:
        ValueError: If *stat_type* is not a known category.
        StatDecodeError: If the payload cannot be decoded.
    """
    return _DECODERS[StatType(stat_type)](raw)
