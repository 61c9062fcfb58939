"""Catalog, client-context and telemetry services."""
