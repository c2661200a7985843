"""Shared CLI decorator that propagates global options to leaf commands."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any

import click

from edgemax._internal.logs import enable_debug_logging

if TYPE_CHECKING:
    from edgemax.cli.main import AppContext


def global_options(f: Any) -> Any:
    """Add global CLI options to a leaf command.

    Allows ``--address``, ``--format``, ``--quiet``, ``--insecure`` and
    ``--verbose`` to be given **after** the subcommand name (e.g.
    ``edgemax stream --address https://192.168.1.1``).  Command-level
    values override the root-group values stored in :class:`AppContext`.
    """

    @click.option(
        "--verbose",
        "local_verbose",
        is_flag=True,
        default=False,
        help="Enable verbose logging",
    )
    @click.option(
        "--insecure",
        "local_insecure",
        is_flag=True,
        default=False,
        help="Skip TLS certificate verification",
    )
    @click.option(
        "--quiet",
        "local_quiet",
        is_flag=True,
        default=False,
        help="Suppress normal output",
    )
    @click.option(
        "--format",
        "local_output_format",
        type=click.Choice(["rich", "json", "quiet"]),
        default=None,
        help="Output format (default: auto-detect)",
    )
    @click.option("--address", "local_address", default=None, help="Device URL")
    @click.pass_obj
    def wrapper(app_ctx: AppContext, /, **kwargs: Any) -> Any:
        local_address: str | None = kwargs.pop("local_address", None)
        local_output_format: str | None = kwargs.pop("local_output_format", None)
        local_quiet: bool = kwargs.pop("local_quiet", False)
        local_insecure: bool = kwargs.pop("local_insecure", False)
        local_verbose: bool = kwargs.pop("local_verbose", False)

        # Command-level wins
        if local_address is not None:
            app_ctx.address = local_address
        if local_output_format is not None:
            app_ctx.output_format = local_output_format
            app_ctx._formatter = None  # reset cached formatter
        if local_quiet:
            app_ctx.quiet = True
            app_ctx._formatter = None
        if local_insecure:
            app_ctx.insecure = True
        if local_verbose and not app_ctx.verbose:
            app_ctx.verbose = True
            enable_debug_logging()

        return f(app_ctx, **kwargs)

    functools.update_wrapper(wrapper, f)
    return wrapper
