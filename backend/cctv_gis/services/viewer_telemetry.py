"""Viewer telemetry aggregation.

Three Prometheus instruments, owned by one ViewerTelemetry instance and its
CollectorRegistry:

- webrtc_view_start_total{camera_id, country, browser, os}   counter
- webrtc_viewers_current{camera_id, country}                 gauge
- webrtc_view_seconds_total{camera_id, country}              counter

There is no session identity. Start, heartbeat and end events are
independent and may arrive out of order, twice, or not at all. The viewers
gauge is therefore best-effort and is NOT clamped at zero: an end without a
matching start drives it negative.

Heartbeat durations are trusted as sent (positive, finite, no upper bound).

Concurrency: each labelled child value is guarded by prometheus_client's own
per-value lock. Updates to different instruments in one call are not atomic
as a pair, and a scrape is consistent per series, not across series.
"""
import math
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from cctv_gis.services.client_context import ClientContext


DEFAULT_HEARTBEAT_SECONDS = 10.0


class MissingCameraIdError(ValueError):
    """Raised when a telemetry event carries no camera id."""

    def __init__(self):
        super().__init__("camera_id is required")


def _require_camera_id(camera_id: Optional[str]) -> str:
    if not camera_id:
        raise MissingCameraIdError()
    return camera_id


class ViewerTelemetry:
    """Owns the viewer metric instruments and their registry.

    Create one per process (the application factory does this) or one per
    test for isolation.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        default_collectors: bool = False
    ):
        """
        Args:
            registry: Registry to register instruments on (fresh one if None)
            default_collectors: Also expose process, platform and GC metrics
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        if default_collectors:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        self.view_starts = Counter(
            "webrtc_view_start_total",
            "Total number of view starts by camera, country, browser and OS",
            ["camera_id", "country", "browser", "os"],
            registry=self.registry,
        )
        self.viewers = Gauge(
            "webrtc_viewers_current",
            "Current number of viewers by camera and country",
            ["camera_id", "country"],
            registry=self.registry,
        )
        self.view_seconds = Counter(
            "webrtc_view_seconds_total",
            "Total seconds watched by camera and country",
            ["camera_id", "country"],
            registry=self.registry,
        )

    def record_view_start(self, camera_id: Optional[str], context: ClientContext) -> None:
        """Count a view start and add one concurrent viewer.

        Raises:
            MissingCameraIdError: camera_id is missing or empty
        """
        camera_id = _require_camera_id(camera_id)
        self.view_starts.labels(
            camera_id=camera_id,
            country=context.country,
            browser=context.browser,
            os=context.os,
        ).inc()
        self.viewers.labels(camera_id=camera_id, country=context.country).inc()

    def record_heartbeat(
        self,
        camera_id: Optional[str],
        context: ClientContext,
        seconds: Optional[float] = None
    ) -> None:
        """Add watched seconds (``DEFAULT_HEARTBEAT_SECONDS`` if omitted).

        Raises:
            MissingCameraIdError: camera_id is missing or empty
            ValueError: seconds is not a positive finite number
        """
        camera_id = _require_camera_id(camera_id)
        if seconds is None:
            seconds = DEFAULT_HEARTBEAT_SECONDS
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValueError("seconds must be a positive number")

        self.view_seconds.labels(camera_id=camera_id, country=context.country).inc(seconds)

    def record_view_end(self, camera_id: Optional[str], context: ClientContext) -> None:
        """Remove one concurrent viewer (no floor at zero).

        Raises:
            MissingCameraIdError: camera_id is missing or empty
        """
        camera_id = _require_camera_id(camera_id)
        self.viewers.labels(camera_id=camera_id, country=context.country).dec()

    def snapshot(self) -> bytes:
        """Serialize every registered metric in the Prometheus text format."""
        return generate_latest(self.registry)
