"""Frame codec for the EdgeMAX stats websocket.

Every message on the socket is a JSON document, usually preceded by its
length in bytes on a line of its own::

    53\\n{"SUBSCRIBE":null,"UNSUBSCRIBE":null,"SESSION_ID":""}

The device also sends bare JSON bodies and header-only frames, so the
decoder accepts all three.  The length line is never checked against the
body: message boundaries come from the websocket transport.
"""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any, TypeVar

from pydantic import BaseModel

from edgemax.api.errors import FrameError

M = TypeVar("M", bound=BaseModel)


class PayloadType(IntEnum):
    """Websocket payload type used for frames.  The protocol has no binary form."""

    TEXT = 1


def _dump(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True)
    return json.dumps(value, separators=(",", ":"))


def encode_frame(value: Any) -> tuple[str, PayloadType]:
    """Encode *value* as ``"<length>\\n<json>"``.

    Pydantic models are dumped using their field aliases.  The length is
    the byte length of the UTF-8 encoded body.
    """
    body = _dump(value)
    return f"{len(body.encode('utf-8'))}\n{body}", PayloadType.TEXT


def decode_frame(data: str | bytes) -> Any:
    """Decode one websocket message into a JSON value.

    Returns ``None`` for a frame that carries a length line but no body.

    Raises:
        FrameError: If the message is not a bare JSON object and does not
            split into exactly a length line and a body, or if the body is
            not valid JSON.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    if data[:1] == b"{":
        return _loads(data)

    parts = data.split(b"\n", 1)
    if len(parts) != 2:
        raise FrameError(f"incorrect number of elements in websocket message: {len(parts)}")

    if not parts[1]:
        return None

    return _loads(parts[1])


def decode_frame_into(data: str | bytes, model: type[M]) -> M:
    """Decode one websocket message into an instance of *model*.

    A header-only frame yields ``model()``, the model's zero value.
    """
    value = decode_frame(data)
    if value is None:
        return model()
    return model.model_validate(value)


def _loads(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError as exc:
        raise FrameError(f"invalid JSON in websocket message: {exc}") from exc
