"""CCTV GIS backend: camera catalog reads and viewer telemetry."""

__version__ = "0.1.0"
