"""
Scan orchestrator.

Runs the three scan stages strictly in sequence:
symbol catalog -> price collection -> opportunity scan.
"""

import logging
from typing import Any

from crossarb.config.constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_THRESHOLD_PCT,
    METRIC_PRICES_STAGE,
    METRIC_SCAN_STAGE,
    METRIC_SYMBOLS_STAGE,
    METRIC_TOTAL,
)
from crossarb.config.settings import Settings
from crossarb.core.types import ArbitrageOpportunity, ScanReport
from crossarb.exchange.registry import VenueRegistry
from crossarb.market.prices import PriceCollector
from crossarb.market.symbols import SymbolCatalog
from crossarb.strategy.opportunity import OpportunityScanner
from crossarb.telemetry.metrics import MetricsCollector
from crossarb.utils.time import StageClock, format_duration_us, get_timestamp_us


logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """
    Sequences one arbitrage scan.

    Each stage fully settles before the next begins. Venue failures are
    absorbed inside the stages; anything else raised during a scan
    propagates to the caller.
    """

    def __init__(
        self,
        registry: VenueRegistry,
        threshold_pct: float = DEFAULT_THRESHOLD_PCT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            registry: Venues to scan.
            threshold_pct: Minimum divergence to report, in percent.
            max_concurrency: Maximum venue requests in flight per stage.
            metrics: Optional metrics collector.
        """
        self._registry = registry
        self._threshold_pct = threshold_pct
        self._catalog = SymbolCatalog(registry, max_concurrency=max_concurrency)
        self._collector = PriceCollector(registry, max_concurrency=max_concurrency)
        self._scanner = OpportunityScanner(threshold_pct=threshold_pct)
        self._metrics = metrics or MetricsCollector()
        self._last_report: ScanReport | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: VenueRegistry,
        metrics: MetricsCollector | None = None,
    ) -> "ScanOrchestrator":
        """Build an orchestrator configured from settings."""
        return cls(
            registry,
            threshold_pct=settings.threshold_pct,
            max_concurrency=settings.max_concurrency,
            metrics=metrics,
        )

    async def run_scan(self) -> list[ArbitrageOpportunity]:
        """
        Run one complete scan.

        Returns:
            Opportunities above the threshold.

        Raises:
            Exception: Any failure outside the per-venue fetch paths.
        """
        report = ScanReport(venues=self._registry.ids)
        clock = StageClock()

        try:
            with clock.stage(METRIC_TOTAL) as total:
                with clock.stage(METRIC_SYMBOLS_STAGE):
                    venue_symbols = await self._catalog.fetch_symbols()
                    common = self._catalog.find_common_symbols(venue_symbols)
                report.symbol_failures = venue_symbols.failed_venues
                report.common_symbols = len(common)

                with clock.stage(METRIC_PRICES_STAGE):
                    prices = await self._collector.fetch_prices(common)
                report.price_slots = len(common) * len(self._registry)
                report.price_failures = prices.missing_count

                with clock.stage(METRIC_SCAN_STAGE):
                    opportunities = self._scanner.scan(prices, self._threshold_pct)
                report.opportunities = len(opportunities)

        except Exception as e:
            self._metrics.record_failure(e)
            logger.exception("Scan failed")
            raise

        report.latencies_us = clock.latencies_us
        report.finished_at_us = get_timestamp_us()
        self._metrics.record_scan(report)
        self._last_report = report

        logger.info(
            f"Scan complete: {report.common_symbols} common symbols, "
            f"{report.opportunities} opportunities in {format_duration_us(total.latency_us)}"
        )
        return opportunities

    @staticmethod
    def serialize(opportunities: list[ArbitrageOpportunity]) -> list[dict[str, Any]]:
        """
        Render opportunities in the public wire format.

        Returns:
            List of {symbol, exchange1, price1, exchange2, price2,
            percentageDifference} with percentageDifference as a
            two-decimal string.
        """
        return [opportunity.to_dict() for opportunity in opportunities]

    async def run_serialized(self) -> list[dict[str, Any]]:
        """Run a scan and return the serialized result."""
        return self.serialize(await self.run_scan())

    @property
    def last_report(self) -> ScanReport | None:
        """Get the report of the most recent successful scan."""
        return self._last_report

    @property
    def metrics(self) -> MetricsCollector:
        """Get the metrics collector."""
        return self._metrics

    @property
    def threshold_pct(self) -> float:
        """Get the reporting threshold."""
        return self._threshold_pct
