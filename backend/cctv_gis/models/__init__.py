"""ORM models."""
from cctv_gis.models.camera import Camera

__all__ = ["Camera"]
