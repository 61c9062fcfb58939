"""Camera catalog response schemas.

Two shapes are served:
- CameraSummary: one entry of the map listing (no stream locator)
- CameraDetail: a single camera including its stream locator
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CameraSummary(BaseModel):
    """Schema for one camera in a viewport/role listing.

    ``stream_url`` is deliberately absent: listings are public map data and
    the locator may carry credentials.
    """
    id: str = Field(..., description="Camera identifier")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Camera role (e.g. 'traffic', 'perimeter')")
    width: Optional[int] = Field(None, description="Frame width in pixels")
    height: Optional[int] = Field(None, description="Frame height in pixels")
    fps: Optional[int] = Field(None, description="Frame rate")
    video_profile: Optional[str] = Field(None, description="Encoding profile name")
    audio_enabled: Optional[bool] = Field(None, description="Whether the stream carries audio")
    last_status: Optional[str] = Field(None, description="Last observed health status")
    last_checked: Optional[datetime] = Field(None, description="When health was last checked")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude (WGS-84)")
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude (WGS-84)")

    class Config:
        from_attributes = True


class CameraDetail(CameraSummary):
    """Schema for a single camera, including its stream locator."""
    stream_url: str = Field(..., description="Stream locator for the media gateway")
    is_active: Optional[bool] = Field(None, description="Activity flag")
