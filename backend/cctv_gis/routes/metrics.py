"""Prometheus scrape endpoint (GET /metrics)."""
from fastapi import APIRouter, Depends, Response

from cctv_gis.routes.dependencies import get_viewer_telemetry
from cctv_gis.services.viewer_telemetry import ViewerTelemetry


router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=Response)
async def metrics(telemetry: ViewerTelemetry = Depends(get_viewer_telemetry)) -> Response:
    """Expose viewer (and default runtime) metrics in the text exposition format."""
    return Response(content=telemetry.snapshot(), media_type=telemetry.content_type)
