"""FastAPI dependencies shared by the route modules.

The telemetry instruments and the client context resolver are owned by the
application (``app.state``) rather than being module-level singletons, so
each app instance (and each test) gets its own.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cctv_gis.database import get_db
from cctv_gis.services.camera_catalog import PostgisCameraCatalog
from cctv_gis.services.client_context import ClientContext, ClientContextResolver
from cctv_gis.services.viewer_telemetry import ViewerTelemetry


def get_camera_catalog(db: AsyncSession = Depends(get_db)) -> PostgisCameraCatalog:
    return PostgisCameraCatalog(db)


def get_viewer_telemetry(request: Request) -> ViewerTelemetry:
    return request.app.state.viewer_telemetry


def get_client_context_resolver(request: Request) -> ClientContextResolver:
    return request.app.state.client_context_resolver


def get_client_context(
    request: Request,
    resolver: ClientContextResolver = Depends(get_client_context_resolver)
) -> ClientContext:
    """Resolve the viewer's country, browser and OS for this request."""
    return resolver.resolve(
        forwarded_for=request.headers.getlist("x-forwarded-for"),
        peer_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
