from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from edgemax.models.stats import DPIStats, Interfaces, SystemStats

if TYPE_CHECKING:
    from rich.console import Console

    from edgemax.models.session import HeartbeatStatus
    from edgemax.models.stats import Stat


def _bytes(n: int) -> str:
    if abs(n) < 1024:
        return f"{n} B"
    value = n / 1024
    for unit in ("KiB", "MiB", "GiB"):
        if abs(value) < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


def _yes_no(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[red]no[/red]"


class RichOutput:
    """Rich-based terminal output helpers for *edgemax*."""

    def __init__(self, console: Console) -> None:
        self._con = console

    # ------------------------------------------------------------------
    # Stats dispatch
    # ------------------------------------------------------------------

    def stat(self, stat: Stat) -> None:
        """Print *stat* with the table matching its category."""
        if isinstance(stat, SystemStats):
            self.system_stats(stat)
        elif isinstance(stat, Interfaces):
            self.interfaces(stat)
        elif isinstance(stat, DPIStats):
            self.dpi_stats(stat)
        else:
            self.info(str(stat))

    # ------------------------------------------------------------------
    # System stats
    # ------------------------------------------------------------------

    def system_stats(self, stats: SystemStats) -> None:
        """Print CPU, memory and uptime."""
        table = Table(title="System")
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("CPU", f"{stats.cpu}%")
        table.add_row("Memory", f"{stats.memory}%")
        table.add_row("Uptime", str(stats.uptime))

        self._con.print(table)

    # ------------------------------------------------------------------
    # Interfaces
    # ------------------------------------------------------------------

    def interfaces(self, interfaces: Interfaces) -> None:
        """Print one row per interface."""
        table = Table(title="Interfaces")
        table.add_column("Name", style="cyan")
        table.add_column("Up")
        table.add_column("MAC")
        table.add_column("Addresses")
        table.add_column("MTU", justify="right")
        table.add_column("RX", justify="right")
        table.add_column("TX", justify="right")
        table.add_column("RX bps", justify="right")
        table.add_column("TX bps", justify="right")

        for ifi in interfaces:
            table.add_row(
                ifi.name,
                _yes_no(ifi.up),
                ifi.mac or "",
                ", ".join(str(a) for a in ifi.addresses),
                str(ifi.mtu),
                _bytes(ifi.stats.receive_bytes),
                _bytes(ifi.stats.transmit_bytes),
                str(ifi.stats.receive_bps),
                str(ifi.stats.transmit_bps),
            )

        self._con.print(table)

    # ------------------------------------------------------------------
    # Deep packet inspection
    # ------------------------------------------------------------------

    def dpi_stats(self, stats: DPIStats) -> None:
        """Print per-client traffic by type and category."""
        table = Table(title="Traffic (DPI)")
        table.add_column("Client", style="cyan")
        table.add_column("Type")
        table.add_column("Category")
        table.add_column("RX", justify="right")
        table.add_column("RX rate", justify="right")
        table.add_column("TX", justify="right")
        table.add_column("TX rate", justify="right")

        for s in stats:
            table.add_row(
                str(s.ip),
                s.type,
                s.category,
                _bytes(s.receive_bytes),
                str(s.receive_rate),
                _bytes(s.transmit_bytes),
                str(s.transmit_rate),
            )

        self._con.print(table)

    # ------------------------------------------------------------------
    # Heartbeat
    # ------------------------------------------------------------------

    def heartbeat(self, status: HeartbeatStatus) -> None:
        table = Table(title="Heartbeat")
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Success", _yes_no(status.success))
        table.add_row("Ping", _yes_no(status.ping))
        table.add_row("Session", _yes_no(status.session))

        self._con.print(table)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def error(self, message: str) -> None:
        """Print a bold red error line."""
        self._con.print(f"[bold red]Error:[/bold red] {message}")

    def info(self, message: str) -> None:
        """Print an informational message (plain)."""
        self._con.print(message)
