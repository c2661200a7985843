"""CLI entry-point: Click command group and dispatch."""

from __future__ import annotations

import dataclasses
import sys
from typing import TYPE_CHECKING

import click

from edgemax._internal.logs import enable_debug_logging
from edgemax.api.errors import AuthError, ConfigError, StreamConnectionError
from edgemax.models.config import AppSettings
from edgemax.output.formatter import OutputFormatter

if TYPE_CHECKING:
    from collections.abc import Sequence

# ---------------------------------------------------------------------------
# Application context (stored in ctx.obj)
# ---------------------------------------------------------------------------


@dataclasses.dataclass
class AppContext:
    """Shared state passed to every Click command via ``@click.pass_obj``."""

    address: str | None
    output_format: str | None
    quiet: bool
    insecure: bool
    verbose: bool
    _formatter: OutputFormatter | None = dataclasses.field(default=None, repr=False)

    @property
    def formatter(self) -> OutputFormatter:
        if self._formatter is None:
            force = "quiet" if self.quiet else self.output_format
            if force is None:
                force = AppSettings().output_format
            self._formatter = OutputFormatter(force_format=force)
        return self._formatter


# ---------------------------------------------------------------------------
# Root Click group
# ---------------------------------------------------------------------------


@click.group()
@click.option("--address", default=None, help="Device URL, e.g. https://192.168.1.1")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["rich", "json", "quiet"]),
    default=None,
    help="Output format (default: auto-detect)",
)
@click.option("--quiet", is_flag=True, default=False, help="Suppress normal output")
@click.option(
    "--insecure", is_flag=True, default=False, help="Skip TLS certificate verification"
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    address: str | None,
    output_format: str | None,
    quiet: bool,
    insecure: bool,
    verbose: bool,
) -> None:
    """Stream live telemetry from a Ubiquiti EdgeMAX device."""
    if verbose:
        enable_debug_logging()
    ctx.obj = AppContext(
        address=address,
        output_format=output_format,
        quiet=quiet,
        insecure=insecure,
        verbose=verbose,
    )


# ---------------------------------------------------------------------------
# Register subcommands (lazy imports keep startup fast)
# ---------------------------------------------------------------------------


def _register_commands() -> None:
    """Import and attach all subcommands to the root CLI."""
    from edgemax.cli.heartbeat import heartbeat_cmd
    from edgemax.cli.stream import stream_cmd

    cli.add_command(heartbeat_cmd)
    cli.add_command(stream_cmd)


_register_commands()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate command handler."""
    args = list(argv) if argv is not None else sys.argv[1:]
    ctx: click.Context | None = None
    try:
        ctx = cli.make_context("edgemax", args)
        with ctx:
            cli.invoke(ctx)
    except click.exceptions.Exit as exc:
        raise SystemExit(exc.exit_code) from None
    except click.exceptions.Abort:
        raise SystemExit(1) from None
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(exc.exit_code) from None
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except SystemExit:
        raise
    except Exception as exc:
        app_ctx = ctx.obj if ctx is not None and isinstance(ctx.obj, AppContext) else None
        formatter = app_ctx.formatter if app_ctx else OutputFormatter()
        cmd_name = (ctx.invoked_subcommand if ctx is not None else None) or "unknown"

        if not _handle_known_error(exc, formatter, cmd_name):
            formatter.output_error(
                code=type(exc).__name__,
                message=str(exc),
                command=cmd_name,
            )
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# Helpers for error handling
# ---------------------------------------------------------------------------


def _handle_known_error(
    exc: Exception,
    formatter: OutputFormatter,
    cmd_name: str,
) -> bool:
    """Handle well-known errors with friendly output.

    Returns ``True`` if the error was handled and the caller should exit.
    """
    if isinstance(exc, ConfigError):
        _report(
            formatter,
            cmd_name,
            "config_error",
            str(exc),
            "Check --address and the EDGEMAX_* settings.",
        )
        return True
    if isinstance(exc, AuthError):
        _report(
            formatter,
            cmd_name,
            "auth_failed",
            str(exc) or "Authentication failed.",
            "Check EDGEMAX_USERNAME and EDGEMAX_PASSWORD.",
        )
        return True
    if isinstance(exc, StreamConnectionError):
        _report(
            formatter,
            cmd_name,
            "stream_unavailable",
            str(exc),
            "Use --insecure if the device has a self-signed certificate.",
        )
        return True
    return False


def _report(
    formatter: OutputFormatter,
    cmd_name: str,
    code: str,
    message: str,
    hint: str,
) -> None:
    """Print *message* and a next-step *hint* in the active format."""
    if formatter.format == "json":
        formatter.output_error(code=code, message=f"{message} {hint}", command=cmd_name)
        return

    formatter.rich.error(message)
    formatter.rich.info(f"[dim]{hint}[/dim]")
