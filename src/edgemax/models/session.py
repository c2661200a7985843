from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_EXTRA_ALLOW = ConfigDict(extra="allow", populate_by_name=True)


class HeartbeatStatus(BaseModel):
    """Acknowledgement returned by the device's heartbeat endpoint."""

    model_config = _EXTRA_ALLOW

    success: bool = False
    ping: bool = Field(default=False, alias="PING")
    session: bool = Field(default=False, alias="SESSION")
