"""
Opportunity detection.

Compares every pair of venue prices per symbol and reports the pairs whose
relative difference exceeds a percentage threshold.
"""

import logging
from dataclasses import dataclass

from crossarb.config.constants import DEFAULT_THRESHOLD_PCT
from crossarb.core.types import ArbitrageOpportunity, PriceTable
from crossarb.utils.math import relative_difference_pct, round_pct


logger = logging.getLogger(__name__)


@dataclass
class OpportunityStats:
    """Statistics for opportunity detection."""

    total_scans: int = 0
    symbols_scanned: int = 0
    pairs_compared: int = 0
    pairs_undefined: int = 0
    opportunities_found: int = 0
    best_pct: float = 0.0

    def record_opportunity(self, pct: float) -> None:
        """Record an emitted opportunity."""
        self.opportunities_found += 1
        if pct > self.best_pct:
            self.best_pct = pct


class OpportunityScanner:
    """
    Detects cross-venue price divergence.

    For each symbol, the venues with a price are taken in table order and
    every unordered pair (i < j) is compared once. The threshold is
    applied to the unrounded percentage; the reported value is rounded
    to two decimals.
    """

    def __init__(self, threshold_pct: float = DEFAULT_THRESHOLD_PCT) -> None:
        """
        Initialize the scanner.

        Args:
            threshold_pct: Default threshold in percent (0.5 = 0.5%).
        """
        if threshold_pct < 0:
            raise ValueError(f"Threshold must be non-negative, got {threshold_pct}")
        self._threshold_pct = threshold_pct
        self._stats = OpportunityStats()

    def scan(
        self,
        price_table: PriceTable,
        threshold_pct: float | None = None,
    ) -> list[ArbitrageOpportunity]:
        """
        Find all venue pairs whose prices diverge beyond the threshold.

        Symbols with fewer than two prices produce no comparisons. A pair
        whose prices are both zero has no defined percentage and is skipped.

        Args:
            price_table: Prices from the collector.
            threshold_pct: Override for the default threshold.

        Returns:
            Opportunities in symbol order, then pair order.
        """
        threshold = self._threshold_pct if threshold_pct is None else threshold_pct
        self._stats.total_scans += 1
        opportunities: list[ArbitrageOpportunity] = []

        for symbol in price_table.symbols:
            entries = price_table.available(symbol)
            if not entries:
                continue
            self._stats.symbols_scanned += 1

            for i in range(len(entries)):
                venue1, price1 = entries[i]
                for j in range(i + 1, len(entries)):
                    venue2, price2 = entries[j]
                    self._stats.pairs_compared += 1

                    pct = relative_difference_pct(price1, price2)
                    if pct is None:
                        self._stats.pairs_undefined += 1
                        logger.debug(f"{symbol}: skipping {venue1}/{venue2}, both prices are zero")
                        continue

                    if pct > threshold:
                        opportunity = ArbitrageOpportunity(
                            symbol=symbol,
                            exchange1=venue1,
                            price1=price1,
                            exchange2=venue2,
                            price2=price2,
                            percentage_difference=round_pct(pct),
                        )
                        opportunities.append(opportunity)
                        self._stats.record_opportunity(pct)

        logger.info(f"Found {len(opportunities)} opportunities above {threshold}%")
        return opportunities

    @property
    def threshold_pct(self) -> float:
        """Get the default threshold."""
        return self._threshold_pct

    @property
    def stats(self) -> OpportunityStats:
        """Get detection statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset detection statistics."""
        self._stats = OpportunityStats()
