"""``edgemax heartbeat``: check the device session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edgemax._internal.async_utils import run_async
from edgemax.cli._client import get_client, login
from edgemax.cli._options import global_options
from edgemax.models.config import AppSettings

if TYPE_CHECKING:
    from edgemax.cli.main import AppContext


@click.command("heartbeat")
@global_options
def heartbeat_cmd(app_ctx: AppContext) -> None:
    """Log in and send one heartbeat."""
    run_async(cmd_heartbeat(app_ctx))


async def cmd_heartbeat(app_ctx: AppContext) -> None:
    formatter = app_ctx.formatter
    settings = AppSettings()

    async with get_client(app_ctx, settings) as client:
        await login(client, settings)
        status = await client.heartbeat()

    if formatter.format == "json":
        formatter.output(status, command="heartbeat")
    else:
        formatter.rich.heartbeat(status)
