"""HTTP routers."""
from cctv_gis.routes.cameras import router as cameras_router
from cctv_gis.routes.metrics import router as metrics_router
from cctv_gis.routes.telemetry import router as telemetry_router

__all__ = ["cameras_router", "metrics_router", "telemetry_router"]
