"""Camera catalog model.

The ``cameras`` table is the single source of truth for which video sources
exist and where they are. This service only reads it; provisioning happens
elsewhere.

Critical constraints:
- Every camera has exactly one WGS-84 point (``geom`` is NOT NULL)
- ``stream_url`` may be sensitive and is only exposed by the single-camera read
- ``last_status`` / ``last_checked`` are NULL until a health check has run
- Viewport queries filter on ``geom::geometry``, so the GiST index is built on
  that expression rather than on the geography column
"""
from geoalchemy2 import Geography, Geometry
from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Text, cast

from cctv_gis.database import Base


WGS84_SRID = 4326


def as_geometry(column):
    """Cast a geography point to geometry(POINT, 4326) for planar operations."""
    return cast(column, Geometry(geometry_type="POINT", srid=WGS84_SRID, spatial_index=False))


class Camera(Base):
    """A geographically placed video source."""

    __tablename__ = "cameras"

    # Opaque, stable identifier (e.g. "cam-0042")
    id = Column(Text, primary_key=True)

    name = Column(Text, nullable=False)

    # Free-form classification used by the role filter ("traffic", "perimeter", ...)
    # Exact, case-sensitive match
    role = Column(Text, nullable=False)

    # Stream locator handed to the media gateway (not validated here)
    stream_url = Column(Text, nullable=False)

    is_active = Column(Boolean, default=True)

    # Encoding profile
    video_profile = Column(Text, default="H264 Main")
    width = Column(Integer, default=640)
    height = Column(Integer, default=480)
    fps = Column(Integer, default=15)
    audio_enabled = Column(Boolean, default=False)

    # Last observed health
    last_status = Column(Text, nullable=True)
    last_checked = Column(DateTime(timezone=True), nullable=True)

    # Position (lng/lat)
    geom = Column(
        Geography(geometry_type="POINT", srid=WGS84_SRID, spatial_index=False),
        nullable=False
    )

    __table_args__ = (
        # Query pattern: cameras with a given role
        Index("idx_cameras_role", "role"),
    )

    def __repr__(self):
        return f"<Camera id={self.id} name={self.name} role={self.role}>"


# Query pattern: cameras inside a map viewport (planar ST_Covers on geom::geometry)
Index(
    "idx_cameras_geom",
    as_geometry(Camera.__table__.c.geom),
    postgresql_using="gist",
)
