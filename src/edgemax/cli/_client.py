"""Shared helpers for building and authenticating the device client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from edgemax.api.client import EdgeMaxClient
from edgemax.api.errors import ConfigError
from edgemax.models.config import AppSettings

if TYPE_CHECKING:
    from edgemax.cli.main import AppContext

logger = logging.getLogger(__name__)


def get_client(app_ctx: AppContext, settings: AppSettings | None = None) -> EdgeMaxClient:
    """Build an :class:`EdgeMaxClient` from CLI options and settings.

    Raises :class:`ConfigError` if no device address is configured.
    """
    settings = settings or AppSettings()
    address = app_ctx.address or settings.address
    if not address:
        raise ConfigError("No device address configured. Pass --address or set EDGEMAX_ADDRESS.")

    insecure = app_ctx.insecure or settings.insecure
    if insecure:
        logger.debug("TLS verification disabled for %s", address)
    return EdgeMaxClient(address, timeout=settings.timeout, verify=not insecure)


async def login(client: EdgeMaxClient, settings: AppSettings | None = None) -> None:
    """Log *client* in with the configured credentials."""
    settings = settings or AppSettings()
    if not settings.username or not settings.password:
        raise ConfigError("No credentials configured. Set EDGEMAX_USERNAME and EDGEMAX_PASSWORD.")
    await client.login(settings.username, settings.password)
