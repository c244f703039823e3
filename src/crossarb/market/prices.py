"""
Price collection.

Fetches the last traded price of every common symbol from every venue.
"""

import asyncio
import logging
from collections.abc import Iterable

from crossarb.config.constants import DEFAULT_MAX_CONCURRENCY
from crossarb.core.types import PriceTable, VenueDescriptor
from crossarb.exchange.registry import VenueRegistry
from crossarb.utils.concurrency import create_limiter, run_bounded
from crossarb.utils.math import is_valid_price


logger = logging.getLogger(__name__)


class PriceCollector:
    """
    Builds the price table for a scan.

    Every (symbol, venue) fetch is independent: a failure leaves only
    that slot empty. Results are merged by key after all fetches settle,
    so completion order has no effect on the table.
    """

    __slots__ = ("_registry", "_max_concurrency")

    def __init__(
        self,
        registry: VenueRegistry,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """
        Initialize the collector.

        Args:
            registry: Venues to query, in scan order.
            max_concurrency: Maximum fetches in flight (1 = sequential).
        """
        self._registry = registry
        self._max_concurrency = max_concurrency

    async def fetch_prices(self, common_symbols: Iterable[str]) -> PriceTable:
        """
        Fetch last prices for every symbol on every venue.

        Args:
            common_symbols: Symbols listed on all venues.

        Returns:
            Price table with one slot per symbol and venue; failed
            fetches hold None.
        """
        symbols = sorted(common_symbols)
        venues = list(self._registry)
        slots = [(symbol, venue) for symbol in symbols for venue in venues]

        limiter = create_limiter(self._max_concurrency)
        prices = await asyncio.gather(
            *(self._fetch_slot(symbol, venue, limiter) for symbol, venue in slots)
        )

        table = PriceTable()
        for (symbol, venue), price in zip(slots, prices, strict=True):
            table.set(symbol, venue.venue_id, price)

        if slots:
            logger.info(
                f"Fetched {len(slots) - table.missing_count}/{len(slots)} prices "
                f"for {len(symbols)} symbols"
            )
        return table

    async def _fetch_slot(
        self,
        symbol: str,
        venue: VenueDescriptor,
        limiter: asyncio.Semaphore,
    ) -> float | None:
        """Fetch one price, returning None on any failure."""
        try:
            price = await run_bounded(
                limiter,
                venue.timeout_s,
                lambda: venue.client.fetch_last_price(symbol),
            )
        except TimeoutError:
            logger.warning(
                f"Error fetching ticker for {symbol} from {venue.venue_id}: "
                f"timed out after {venue.timeout_s}s"
            )
            return None
        except Exception as e:
            logger.warning(f"Error fetching ticker for {symbol} from {venue.venue_id}: {e!r}")
            return None

        if not is_valid_price(price):
            logger.warning(f"Invalid price for {symbol} from {venue.venue_id}: {price!r}")
            return None

        return float(price)
