from __future__ import annotations

import json
from datetime import timedelta
from io import StringIO
from ipaddress import IPv4Address

from rich.console import Console

from edgemax.models.session import HeartbeatStatus
from edgemax.models.stats import (
    DPIStat,
    DPIStats,
    Interface,
    Interfaces,
    InterfaceStats,
    SystemStats,
)
from edgemax.output.formatter import OutputFormatter
from edgemax.output.rich_output import RichOutput


def _make_console() -> tuple[Console, StringIO]:
    """Return a ``(Console, buffer)`` pair for capturing Rich output."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=160)
    return console, buf


class TestSystemStats:
    def test_renders_fields(self) -> None:
        console, buf = _make_console()
        RichOutput(console).system_stats(
            SystemStats(cpu=12, uptime=timedelta(seconds=90), memory=34)
        )
        output = buf.getvalue()

        assert "12%" in output
        assert "34%" in output
        assert "0:01:30" in output


class TestInterfaces:
    def test_renders_one_row_per_interface(self) -> None:
        console, buf = _make_console()
        ifis = Interfaces(
            [
                Interface(
                    name="eth0",
                    up=True,
                    mac="de:ad:be:ef:de:ad",
                    mtu=1500,
                    addresses=[IPv4Address("192.168.1.1")],
                    stats=InterfaceStats(receive_bytes=2048),
                ),
                Interface(name="eth1"),
            ]
        )
        RichOutput(console).interfaces(ifis)
        output = buf.getvalue()

        assert "eth0" in output
        assert "eth1" in output
        assert "de:ad:be:ef:de:ad" in output
        assert "192.168.1.1" in output
        assert "2.0 KiB" in output


class TestDPIStats:
    def test_renders_clients(self) -> None:
        console, buf = _make_console()
        d = DPIStats(
            [
                DPIStat(
                    ip=IPv4Address("10.0.0.5"),
                    type="Web",
                    category="Web - Other",
                    receive_bytes=100,
                )
            ]
        )
        RichOutput(console).stat(d)
        output = buf.getvalue()

        assert "10.0.0.5" in output
        assert "Web - Other" in output
        assert "100 B" in output


class TestMessages:
    def test_heartbeat(self) -> None:
        console, buf = _make_console()
        RichOutput(console).heartbeat(HeartbeatStatus(success=True))
        assert "Heartbeat" in buf.getvalue()

    def test_error(self) -> None:
        console, buf = _make_console()
        RichOutput(console).error("boom")
        assert "Error:" in buf.getvalue()
        assert "boom" in buf.getvalue()


class TestOutputFormatter:
    def test_non_tty_defaults_to_json(self) -> None:
        assert OutputFormatter(stream=StringIO()).format == "json"

    def test_forced_format(self) -> None:
        assert OutputFormatter(stream=StringIO(), force_format="rich").format == "rich"

    def test_json_stat_is_one_line(self) -> None:
        buf = StringIO()
        formatter = OutputFormatter(stream=buf, force_format="json")
        formatter.output_stat(
            SystemStats(cpu=1, uptime=timedelta(seconds=1), memory=1), command="stream"
        )
        formatter.output_stat(Interfaces(), command="stream")

        lines = buf.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["data"]["cpu"] == 1
        assert json.loads(lines[1])["data"] == {"interfaces": []}

    def test_json_error(self) -> None:
        buf = StringIO()
        OutputFormatter(stream=buf, force_format="json").output_error(
            code="config_error", message="no address", command="stream"
        )
        assert json.loads(buf.getvalue())["error"]["code"] == "config_error"
