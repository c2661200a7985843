"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Third-party loggers that drown out ours at DEBUG.
_NOISY_LOGGERS = ("httpcore", "websockets.client")


def enable_debug_logging() -> None:
    """Send DEBUG records to stderr.

    Without this, only warnings and errors reach stderr through the
    logging module's last-resort handler.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_FORMAT)
    root.setLevel(logging.DEBUG)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)
