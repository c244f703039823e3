"""
Time utilities for scan latency measurement.

Latencies are kept in integer microseconds.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager


def get_timestamp_us() -> int:
    """Get current Unix timestamp in microseconds."""
    return time.time_ns() // 1000


class LatencyTimer:
    """
    Context manager measuring the wall time of a block.

    Example:
        >>> with LatencyTimer() as timer:
        ...     await catalog.fetch_symbols()
        >>> timer.latency_us
    """

    __slots__ = ("start_us", "latency_us")

    def __init__(self) -> None:
        self.start_us: int = 0
        self.latency_us: int = 0

    def __enter__(self) -> "LatencyTimer":
        self.start_us = get_timestamp_us()
        return self

    def __exit__(self, *args: object) -> None:
        self.latency_us = get_timestamp_us() - self.start_us


class StageClock:
    """
    Collects named stage latencies for one scan.

    A stage that raises is not recorded.
    """

    __slots__ = ("latencies_us",)

    def __init__(self) -> None:
        self.latencies_us: dict[str, int] = {}

    @contextmanager
    def stage(self, name: str) -> Iterator[LatencyTimer]:
        """Time a block and store its latency under name."""
        with LatencyTimer() as timer:
            yield timer
        self.latencies_us[name] = timer.latency_us


def format_duration_us(duration_us: int) -> str:
    """
    Format a duration in microseconds for log lines.

    Examples:
        >>> format_duration_us(500)
        '500μs'
        >>> format_duration_us(1500)
        '1.50ms'
        >>> format_duration_us(1500000)
        '1.50s'
    """
    if duration_us < 1000:
        return f"{duration_us}μs"
    elif duration_us < 1_000_000:
        return f"{duration_us / 1000:.2f}ms"
    else:
        return f"{duration_us / 1_000_000:.2f}s"
