"""Viewer telemetry API routes.

Write-only endpoints called by the player:
- POST /view-start   {"camera_id": "..."}
- POST /heartbeat    {"camera_id": "...", "seconds": 10}
- POST /view-end     {"camera_id": "..."}

All return 204 with no body. Only a missing camera_id (400) or an invalid
duration (400/422) rejects a call; geolocation or User-Agent problems
degrade to the "ZZ"/"Other" labels instead.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import Optional

from cctv_gis.routes.dependencies import get_client_context, get_viewer_telemetry
from cctv_gis.schemas.telemetry import HeartbeatRequest, ViewEventRequest
from cctv_gis.services.client_context import ClientContext
from cctv_gis.services.viewer_telemetry import ViewerTelemetry


router = APIRouter(tags=["telemetry"])


@router.post("/view-start", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def view_start(
    payload: Optional[ViewEventRequest] = None,
    context: ClientContext = Depends(get_client_context),
    telemetry: ViewerTelemetry = Depends(get_viewer_telemetry)
):
    """A viewer started watching a camera."""
    try:
        telemetry.record_view_start(payload.camera_id if payload else None, context)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/heartbeat", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def heartbeat(
    payload: Optional[HeartbeatRequest] = None,
    context: ClientContext = Depends(get_client_context),
    telemetry: ViewerTelemetry = Depends(get_viewer_telemetry)
):
    """A viewer is still watching; ``seconds`` defaults to 10."""
    try:
        telemetry.record_heartbeat(
            payload.camera_id if payload else None,
            context,
            payload.seconds if payload else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/view-end", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def view_end(
    payload: Optional[ViewEventRequest] = None,
    context: ClientContext = Depends(get_client_context),
    telemetry: ViewerTelemetry = Depends(get_viewer_telemetry)
):
    """A viewer stopped watching a camera."""
    try:
        telemetry.record_view_end(payload.camera_id if payload else None, context)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
