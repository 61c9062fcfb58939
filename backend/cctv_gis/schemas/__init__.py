"""Pydantic request/response schemas."""
from cctv_gis.schemas.camera import CameraDetail, CameraSummary
from cctv_gis.schemas.telemetry import HeartbeatRequest, ViewEventRequest

__all__ = ["CameraDetail", "CameraSummary", "HeartbeatRequest", "ViewEventRequest"]
