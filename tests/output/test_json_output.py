from __future__ import annotations

import json
from datetime import timedelta
from ipaddress import IPv4Address, IPv6Address

from edgemax.models.session import HeartbeatStatus
from edgemax.models.stats import (
    DPIStat,
    DPIStats,
    Interface,
    Interfaces,
    InterfaceStats,
    SystemStats,
)
from edgemax.output.json_output import format_json_error, format_json_response


class TestFormatJsonResponse:
    """Tests for :func:`format_json_response`."""

    def test_with_model(self) -> None:
        raw = format_json_response(data=HeartbeatStatus(success=True), command="heartbeat")
        parsed = json.loads(raw)

        assert parsed["ok"] is True
        assert parsed["command"] == "heartbeat"
        assert parsed["data"] == {"success": True, "ping": False, "session": False}
        assert "timestamp" in parsed

    def test_system_stats(self) -> None:
        stats = SystemStats(cpu=10, uptime=timedelta(hours=1), memory=30)
        parsed = json.loads(format_json_response(data=stats, command="stream"))

        assert parsed["data"] == {"cpu": 10, "uptime": 3600, "memory": 30}

    def test_interfaces(self) -> None:
        ifis = Interfaces(
            [
                Interface(
                    name="eth0",
                    up=True,
                    mac="de:ad:be:ef:de:ad",
                    addresses=[IPv4Address("192.168.1.1"), IPv6Address("2001:db8::1")],
                    stats=InterfaceStats(receive_bytes=3),
                )
            ]
        )
        parsed = json.loads(format_json_response(data=ifis, command="stream"))

        eth0 = parsed["data"]["interfaces"][0]
        assert eth0["name"] == "eth0"
        assert eth0["up"] is True
        assert eth0["addresses"] == ["192.168.1.1", "2001:db8::1"]
        assert eth0["stats"]["receive_bytes"] == 3

    def test_dpi_stats(self) -> None:
        d = DPIStats([DPIStat(ip=IPv4Address("10.0.0.1"), type="Web", category="Other")])
        parsed = json.loads(format_json_response(data=d, command="stream"))

        assert parsed["data"]["stats"][0]["ip"] == "10.0.0.1"
        assert parsed["data"]["stats"][0]["type"] == "Web"

    def test_with_dict(self) -> None:
        raw = format_json_response(data={"key": "value", "count": 42}, command="raw")
        assert json.loads(raw)["data"] == {"key": "value", "count": 42}

    def test_compact_is_one_line(self) -> None:
        stats = SystemStats(cpu=1, uptime=timedelta(seconds=2), memory=3)
        raw = format_json_response(data=stats, command="stream", compact=True)

        assert "\n" not in raw
        assert json.loads(raw)["data"]["cpu"] == 1

    def test_timestamp_is_iso_utc(self) -> None:
        parsed = json.loads(format_json_response(data={"x": 1}, command="test"))
        assert parsed["timestamp"].endswith("+00:00")


class TestFormatJsonError:
    """Tests for :func:`format_json_error`."""

    def test_basic_error(self) -> None:
        raw = format_json_error(code="auth_failed", message="Login failed", command="stream")
        parsed = json.loads(raw)

        assert parsed["ok"] is False
        assert parsed["command"] == "stream"
        assert parsed["error"] == {"code": "auth_failed", "message": "Login failed"}

    def test_extra_fields(self) -> None:
        raw = format_json_error(code="x", message="y", command="z", status_code=500)
        assert json.loads(raw)["error"]["status_code"] == 500
