"""Camera catalog reads: viewport parsing, query construction and execution.

A listing translates an optional map viewport and an optional role into ONE
statement against the PostGIS ``cameras`` table:

    SELECT id, name, role, ..., ST_X(geom::geometry) AS lng, ST_Y(geom::geometry) AS lat
    FROM cameras
    WHERE ST_Covers(ST_MakeEnvelope(minLng, minLat, maxLng, maxLat, 4326), geom::geometry)
      AND role = :role
    ORDER BY id

Containment is planar (geometry, not geodesic) and the envelope is closed:
a camera exactly on the edge of the viewport is returned. Boxes crossing the
antimeridian or covering a pole are NOT handled; callers split such boxes.

Constraints:
- Read-only (no writes, no side effects)
- No pagination (the catalog holds hundreds to low thousands of cameras)
- Store failures raise CatalogUnavailableError; "no rows" is never an error
- No retries
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy import Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cctv_gis.models.camera import WGS84_SRID, Camera, as_geometry
from cctv_gis.schemas.camera import CameraDetail, CameraSummary


VIEWPORT_FORMAT_MESSAGE = "bbox must be four numeric values: minLng,minLat,maxLng,maxLat"


class InvalidViewportError(ValueError):
    """Raised when a bbox string is not four finite comma-separated numbers."""


class CatalogUnavailableError(RuntimeError):
    """Raised when the catalog store cannot be queried."""


@dataclass(frozen=True)
class Viewport:
    """Axis-aligned lng/lat rectangle (lower-left corner first)."""

    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @classmethod
    def parse(cls, raw: str) -> "Viewport":
        """Parse ``"minLng,minLat,maxLng,maxLat"``.

        Raises:
            InvalidViewportError: wrong component count, or any component that
                is empty, non-numeric, NaN or infinite.
        """
        parts = raw.split(",")
        if len(parts) != 4:
            raise InvalidViewportError(VIEWPORT_FORMAT_MESSAGE)

        values = []
        for part in parts:
            try:
                value = float(part.strip())
            except ValueError:
                raise InvalidViewportError(VIEWPORT_FORMAT_MESSAGE) from None
            if not math.isfinite(value):
                raise InvalidViewportError(VIEWPORT_FORMAT_MESSAGE)
            values.append(value)

        return cls(*values)

    @property
    def is_inverted(self) -> bool:
        """True when a min corner value exceeds its max on either axis."""
        return self.min_lng > self.max_lng or self.min_lat > self.max_lat


def _summary_columns() -> list:
    return [
        Camera.id,
        Camera.name,
        Camera.role,
        Camera.width,
        Camera.height,
        Camera.fps,
        Camera.video_profile,
        Camera.audio_enabled,
        Camera.last_status,
        Camera.last_checked,
        func.ST_X(as_geometry(Camera.geom)).label("lng"),
        func.ST_Y(as_geometry(Camera.geom)).label("lat"),
    ]


def build_camera_list_query(
    viewport: Optional[Viewport] = None,
    role: Optional[str] = None
) -> Select:
    """Build the listing statement for an optional viewport and role.

    Both filters are AND-ed; with neither, the whole catalog is selected.
    The role match is exact and case-sensitive.
    """
    conditions = []

    if viewport is not None:
        envelope = func.ST_MakeEnvelope(
            viewport.min_lng,
            viewport.min_lat,
            viewport.max_lng,
            viewport.max_lat,
            WGS84_SRID,
        )
        conditions.append(func.ST_Covers(envelope, as_geometry(Camera.geom)))

    if role is not None:
        conditions.append(Camera.role == role)

    query = select(*_summary_columns())

    if conditions:
        query = query.where(and_(*conditions))

    return query.order_by(Camera.id)


def build_camera_detail_query(camera_id: str) -> Select:
    """Build the single-camera statement (includes the stream locator)."""
    columns = _summary_columns() + [Camera.stream_url, Camera.is_active]
    return select(*columns).where(Camera.id == camera_id)


class PostgisCameraCatalog:
    """Executes catalog reads against a PostGIS-backed session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_cameras(
        self,
        viewport: Optional[Viewport] = None,
        role: Optional[str] = None
    ) -> List[CameraSummary]:
        """List cameras inside ``viewport`` (closed envelope) with ``role``.

        An inverted viewport matches nothing and is answered without a
        store round-trip.

        Raises:
            CatalogUnavailableError: the store could not be queried
        """
        if viewport is not None and viewport.is_inverted:
            logger.debug(f"Inverted viewport {viewport}; returning no cameras")
            return []

        rows = await self._fetch(build_camera_list_query(viewport=viewport, role=role))
        return [CameraSummary.model_validate(row) for row in rows]

    async def get_camera(self, camera_id: str) -> Optional[CameraDetail]:
        """Return one camera with its stream locator, or None if absent.

        Raises:
            CatalogUnavailableError: the store could not be queried
        """
        rows = await self._fetch(build_camera_detail_query(camera_id))
        if not rows:
            return None
        return CameraDetail.model_validate(rows[0])

    async def _fetch(self, query: Select) -> List[Dict[str, Any]]:
        try:
            result = await self.db.execute(query)
            return [dict(row) for row in result.mappings().all()]
        except Exception as e:
            raise CatalogUnavailableError(f"{type(e).__name__}: {e}") from e
