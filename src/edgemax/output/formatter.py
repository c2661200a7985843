from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from rich.console import Console

from edgemax.output.json_output import format_json_error, format_json_response
from edgemax.output.rich_output import RichOutput

if TYPE_CHECKING:
    from io import TextIOBase

    from edgemax.models.stats import Stat


class OutputFormatter:
    """Unified output formatter that auto-detects JSON vs Rich output.

    Selection logic:

    * If *force_format* is provided, use it unconditionally.
    * Otherwise, if *stream* (default ``sys.stdout``) is a TTY, use ``"rich"``.
    * If the stream is **not** a TTY (piped / redirected), use ``"json"``.

    When the format is ``"quiet"``, a :class:`rich.console.Console` writing to
    *stderr* is used so that normal stdout stays empty.
    """

    def __init__(
        self,
        *,
        stream: TextIOBase | Any | None = None,
        force_format: str | None = None,
    ) -> None:
        self._stream = stream or sys.stdout
        if force_format is not None:
            self._format = force_format
        elif hasattr(self._stream, "isatty") and self._stream.isatty():
            self._format = "rich"
        else:
            self._format = "json"

        if self._format == "quiet":
            self._console = Console(stderr=True)
        else:
            self._console = Console(file=stream) if stream is not None else Console()

        self._rich = RichOutput(self._console)

    @property
    def format(self) -> str:  # noqa: A003
        """Return the active output format (``"rich"``, ``"json"``, or ``"quiet"``)."""
        return self._format

    @property
    def console(self) -> Console:
        return self._console

    @property
    def rich(self) -> RichOutput:
        """Return the underlying :class:`RichOutput` instance."""
        return self._rich

    def _print(self, text: str) -> None:
        print(text, file=self._stream, flush=True)  # noqa: T201

    def output(self, data: Any, *, command: str) -> None:
        """Emit *data* using the current format.

        * **json**: prints :func:`format_json_response` to the stream.
        * **rich** / **quiet**: falls back to :meth:`RichOutput.info` with a
          ``str()`` representation; callers normally use :attr:`rich`
          directly for typed output.
        """
        if self._format == "json":
            self._print(format_json_response(data=data, command=command))
        else:
            self._rich.info(str(data))

    def output_stat(self, stat: Stat, *, command: str) -> None:
        """Emit one streamed stat: a single-line envelope or a rich table."""
        if self._format == "json":
            self._print(format_json_response(data=stat, command=command, compact=True))
        else:
            self._rich.stat(stat)

    def output_error(self, *, code: str, message: str, command: str) -> None:
        """Emit an error using the current format.

        * **json**: prints :func:`format_json_error` to the stream.
        * **rich** / **quiet**: prints via :meth:`RichOutput.error`.
        """
        if self._format == "json":
            self._print(format_json_error(code=code, message=message, command=command))
        else:
            self._rich.error(message)
