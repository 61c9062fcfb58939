"""Camera catalog API routes.

Read-only endpoints backing the map view:
- GET /api/cameras?bbox=minLng,minLat,maxLng,maxLat&role=traffic
- GET /api/cameras/{camera_id}

Constraints:
- Read-only operations (no writes, updates, or deletes)
- No pagination (catalog is small)
- Malformed bbox -> 400, unknown camera -> 404, store failure -> 500
- Store error details are logged, never returned to the caller
"""
from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional
from loguru import logger

from cctv_gis.routes.dependencies import get_camera_catalog
from cctv_gis.schemas.camera import CameraDetail, CameraSummary
from cctv_gis.services.camera_catalog import (
    InvalidViewportError,
    PostgisCameraCatalog,
    Viewport,
)


router = APIRouter(prefix="/api/cameras", tags=["cameras"])


@router.get("", response_model=List[CameraSummary])
async def list_cameras(
    bbox: Optional[str] = Query(
        None,
        description="Viewport as minLng,minLat,maxLng,maxLat (closed envelope)"
    ),
    role: Optional[str] = Query(None, description="Exact, case-sensitive role filter"),
    catalog: PostgisCameraCatalog = Depends(get_camera_catalog)
):
    """List cameras inside a viewport and/or with a role.

    Query parameters:
        bbox: Optional viewport; an inverted box (min > max) matches nothing
        role: Optional role filter

    Returns:
        List of camera summaries ordered by id (without stream locators)

    Raises:
        HTTPException: 400 if bbox is malformed, 500 on store failure

    Example:
        GET /api/cameras?bbox=0,0,20,30
        GET /api/cameras?role=perimeter
    """
    try:
        viewport = Viewport.parse(bbox) if bbox else None
        return await catalog.list_cameras(viewport=viewport, role=role or None)

    except InvalidViewportError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error fetching cameras (bbox={bbox!r}, role={role!r}): {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal error"
        )


@router.get("/{camera_id}", response_model=CameraDetail)
async def get_camera(
    camera_id: str,
    catalog: PostgisCameraCatalog = Depends(get_camera_catalog)
):
    """Get a single camera, including its stream locator.

    Raises:
        HTTPException: 404 if camera not found, 500 on store failure
    """
    try:
        camera = await catalog.get_camera(camera_id)

        if camera is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="camera not found"
            )

        return camera

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching camera {camera_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal error"
        )
