"""CCTV GIS backend application.

Serves camera metadata from a PostGIS catalog and records anonymised viewing
statistics as Prometheus metrics, labelled by country, browser and OS.
Media streaming (RTSP/WebRTC) is handled by a separate gateway.
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from cctv_gis.config import Settings, settings
from cctv_gis.database import engine
from cctv_gis.routes import cameras_router, metrics_router, telemetry_router
from cctv_gis.services.client_context import ClientContextResolver, load_country_resolver
from cctv_gis.services.viewer_telemetry import ViewerTelemetry


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.client_context_resolver.close()
    await engine.dispose()
    logger.info("CCTV backend stopped")


def create_app(
    app_settings: Optional[Settings] = None,
    viewer_telemetry: Optional[ViewerTelemetry] = None,
    client_context_resolver: Optional[ClientContextResolver] = None
) -> FastAPI:
    """Build the FastAPI application.

    The telemetry registry and the client context resolver are created here
    once per app and stored on ``app.state``. Tests pass their own.
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.log_level)

    app = FastAPI(
        title="CCTV GIS Backend",
        description="Camera catalog and viewer telemetry",
        lifespan=lifespan,
    )

    if viewer_telemetry is None:
        viewer_telemetry = ViewerTelemetry(
            default_collectors=app_settings.metrics_default_collectors
        )
    if client_context_resolver is None:
        client_context_resolver = ClientContextResolver(
            load_country_resolver(app_settings.geoip_db_path)
        )

    app.state.viewer_telemetry = viewer_telemetry
    app.state.client_context_resolver = client_context_resolver

    app.include_router(cameras_router)
    app.include_router(telemetry_router)
    app.include_router(metrics_router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    logger.info(f"CCTV backend listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "cctv_gis.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
