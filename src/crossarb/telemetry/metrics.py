"""
In-memory scan metrics.

Keeps a bounded window of stage latencies per stage name and running
counters for scan outcomes. Exposed through GET /api/status.
"""

import time
from collections import deque
from dataclasses import asdict, dataclass

from crossarb.core.types import ScanReport


@dataclass
class LatencyStats:
    """Latency summary for one stage, in microseconds."""

    count: int = 0
    min_us: int = 0
    max_us: int = 0
    avg_us: float = 0.0
    p50_us: int = 0
    p95_us: int = 0

    @classmethod
    def from_samples(cls, samples: list[int]) -> "LatencyStats":
        if not samples:
            return cls()
        ordered = sorted(samples)
        n = len(ordered)
        return cls(
            count=n,
            min_us=ordered[0],
            max_us=ordered[-1],
            avg_us=sum(ordered) / n,
            p50_us=ordered[n // 2],
            p95_us=ordered[min(int(n * 0.95), n - 1)],
        )


class MetricsCollector:
    """
    Aggregates the outcome of every scan run by an orchestrator.

    Counters only grow until reset(); latency windows keep the most
    recent samples per stage.
    """

    SCANS_COMPLETED = "scans_completed"
    SCANS_FAILED = "scans_failed"
    SYMBOL_FETCH_FAILURES = "symbol_fetch_failures"
    PRICE_FETCH_FAILURES = "price_fetch_failures"
    OPPORTUNITIES_FOUND = "opportunities_found"

    def __init__(self, window: int = 1000) -> None:
        """
        Args:
            window: Latency samples kept per stage.
        """
        self._window = window
        self._stages: dict[str, deque[int]] = {}
        self._counters: dict[str, int] = {}
        self._last_error: str | None = None
        self._started = time.monotonic()

    def record_latency(self, stage: str, latency_us: int) -> None:
        """Add one latency sample for a stage."""
        self._stages.setdefault(stage, deque(maxlen=self._window)).append(latency_us)

    def increment_counter(self, name: str, value: int = 1) -> None:
        self._counters[name] = self._counters.get(name, 0) + value

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def record_scan(self, report: ScanReport) -> None:
        """Fold a finished scan report into the counters and latency windows."""
        for stage, latency_us in report.latencies_us.items():
            self.record_latency(stage, latency_us)

        self.increment_counter(self.SCANS_COMPLETED)
        self.increment_counter(self.SYMBOL_FETCH_FAILURES, len(report.symbol_failures))
        self.increment_counter(self.PRICE_FETCH_FAILURES, report.price_failures)
        self.increment_counter(self.OPPORTUNITIES_FOUND, report.opportunities)

    def record_failure(self, error: BaseException) -> None:
        """Count a scan that raised and remember its error."""
        self.increment_counter(self.SCANS_FAILED)
        self._last_error = repr(error)

    def get_latency_stats(self, stage: str) -> LatencyStats:
        return LatencyStats.from_samples(list(self._stages.get(stage, ())))

    @property
    def last_error(self) -> str | None:
        """Error of the most recent failed scan."""
        return self._last_error

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started

    def to_dict(self) -> dict[str, object]:
        """Export counters, latency summaries and the last error."""
        return {
            "uptime_seconds": round(self.uptime_seconds, 3),
            "counters": dict(self._counters),
            "latencies_us": {
                stage: asdict(self.get_latency_stats(stage)) for stage in self._stages
            },
            "last_error": self._last_error,
        }

    def reset(self) -> None:
        self._stages.clear()
        self._counters.clear()
        self._last_error = None
        self._started = time.monotonic()
