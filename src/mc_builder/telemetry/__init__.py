"""Logging and operational telemetry."""
