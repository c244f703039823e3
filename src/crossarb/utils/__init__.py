"""Utility functions for the arbitrage scanner."""

from crossarb.utils.concurrency import create_limiter, run_bounded
from crossarb.utils.math import (
    format_pct,
    is_valid_price,
    relative_difference_pct,
    round_pct,
)
from crossarb.utils.time import (
    LatencyTimer,
    StageClock,
    format_duration_us,
    get_timestamp_us,
)


__all__ = [
    "LatencyTimer",
    "StageClock",
    "create_limiter",
    "format_duration_us",
    "format_pct",
    "get_timestamp_us",
    "is_valid_price",
    "relative_difference_pct",
    "round_pct",
    "run_bounded",
]
