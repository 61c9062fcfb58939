"""Viewer telemetry request schemas.

``camera_id`` is optional at the schema level so a missing id reaches the
route and is rejected with the same 400 as an empty one.
"""
from pydantic import BaseModel, Field
from typing import Optional


class ViewEventRequest(BaseModel):
    """Body of /view-start and /view-end."""
    camera_id: Optional[str] = Field(None, description="Camera being watched")


class HeartbeatRequest(ViewEventRequest):
    """Body of /heartbeat."""
    seconds: Optional[float] = Field(
        None,
        gt=0,
        allow_inf_nan=False,
        description="Seconds watched since the previous heartbeat (default 10)"
    )
