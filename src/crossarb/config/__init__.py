"""Configuration module for the arbitrage scanner."""

from crossarb.config.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_THRESHOLD_PCT,
    DEFAULT_VENUE_TIMEOUT_MS,
    DEFAULT_VENUES,
)
from crossarb.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_THRESHOLD_PCT",
    "DEFAULT_VENUE_TIMEOUT_MS",
    "DEFAULT_VENUES",
]
