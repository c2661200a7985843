from __future__ import annotations

import dataclasses
import ipaddress
import json
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel


def _serialize(obj: Any) -> Any:
    """Convert *obj* to a JSON-friendly structure.

    * :class:`pydantic.BaseModel` instances are dumped via
      :meth:`~pydantic.BaseModel.model_dump` with *exclude_none=True*.
    * Dataclasses (the decoded stat records) are walked field by field.
    * IP addresses become strings; durations become whole seconds.
    * Lists are recursed element-wise.
    * Everything else is returned as-is (``json.dumps`` handles the rest via
      *default=str*).
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(exclude_none=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, ipaddress.IPv4Address | ipaddress.IPv6Address):
        return str(obj)
    if isinstance(obj, timedelta):
        return int(obj.total_seconds())
    if isinstance(obj, list | tuple):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _serialize(value) for key, value in obj.items()}
    return obj


def _dumps(envelope: dict[str, Any], compact: bool) -> str:
    if compact:
        return json.dumps(envelope, separators=(",", ":"), default=str)
    return json.dumps(envelope, indent=2, default=str)


def format_json_response(*, data: Any, command: str, compact: bool = False) -> str:
    """Return a JSON envelope for a successful response.

    The envelope has the shape::

        {
          "ok": true,
          "command": "<command>",
          "data": <serialised payload>,
          "timestamp": "<ISO-8601 UTC>"
        }

    With *compact* the envelope is written on a single line, so a stream
    of responses reads as JSON Lines.
    """
    envelope: dict[str, Any] = {
        "ok": True,
        "command": command,
        "data": _serialize(data),
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return _dumps(envelope, compact)


def format_json_error(
    *,
    code: str,
    message: str,
    command: str,
    **extra: Any,
) -> str:
    """Return a JSON envelope for an error response.

    The envelope has the shape::

        {
          "ok": false,
          "command": "<command>",
          "error": {"code": "...", "message": "...", ...extra},
          "timestamp": "<ISO-8601 UTC>"
        }
    """
    error_body: dict[str, Any] = {"code": code, "message": message, **extra}
    envelope: dict[str, Any] = {
        "ok": False,
        "command": command,
        "error": error_body,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return _dumps(envelope, compact=False)
