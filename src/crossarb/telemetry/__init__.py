"""Telemetry module for logging and metrics."""

from crossarb.telemetry.logger import AsyncLogger, setup_logging
from crossarb.telemetry.metrics import LatencyStats, MetricsCollector


__all__ = [
    "AsyncLogger",
    "LatencyStats",
    "MetricsCollector",
    "setup_logging",
]
