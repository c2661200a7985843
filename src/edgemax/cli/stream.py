"""``edgemax stream``: print live stats until interrupted."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from edgemax._internal.async_utils import run_async
from edgemax.cli._client import get_client, login
from edgemax.cli._options import global_options
from edgemax.models.config import AppSettings
from edgemax.models.stats import StatType

if TYPE_CHECKING:
    from edgemax.cli.main import AppContext

logger = logging.getLogger(__name__)


@click.command("stream")
@click.option(
    "--type",
    "stat_types",
    multiple=True,
    type=click.Choice([t.value for t in StatType]),
    help="Stats category to stream (repeatable, default: all)",
)
@click.option(
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many stats",
)
@global_options
def stream_cmd(app_ctx: AppContext, stat_types: tuple[str, ...], count: int | None) -> None:
    """Stream live stats from the device."""
    run_async(cmd_stream(app_ctx, stat_types, count))


async def cmd_stream(
    app_ctx: AppContext,
    stat_types: tuple[str, ...],
    count: int | None,
) -> None:
    formatter = app_ctx.formatter
    settings = AppSettings()

    async with get_client(app_ctx, settings) as client:
        await login(client, settings)
        session = await client.stats(
            *stat_types, keepalive_interval=settings.keepalive_interval
        )
        if formatter.format == "rich":
            formatter.rich.info(f"Streaming stats from {client.base_url}. Press Ctrl+C to stop.")

        received = 0
        try:
            async for stat in session:
                formatter.output_stat(stat, command="stream")
                received += 1
                if count is not None and received >= count:
                    break
        finally:
            await session.close()
        logger.debug("Printed %d stats", received)
