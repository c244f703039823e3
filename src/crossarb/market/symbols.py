"""
Symbol catalog.

Builds each venue's symbol universe and the set of symbols listed on
every venue.
"""

import asyncio
import logging

from crossarb.config.constants import DEFAULT_MAX_CONCURRENCY
from crossarb.core.types import SymbolListing, VenueDescriptor, VenueSymbolSet
from crossarb.exchange.registry import VenueRegistry
from crossarb.utils.concurrency import create_limiter, run_bounded


logger = logging.getLogger(__name__)


class SymbolCatalog:
    """
    Collects tradable symbols from all venues.

    Responsibilities:
    - Listing symbols on every venue concurrently
    - Absorbing per-venue failures as empty listings
    - Intersecting the listings into the common symbol set
    """

    __slots__ = ("_registry", "_max_concurrency")

    def __init__(
        self,
        registry: VenueRegistry,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """
        Initialize the catalog.

        Args:
            registry: Venues to query, in scan order.
            max_concurrency: Maximum listings in flight (1 = sequential).
        """
        self._registry = registry
        self._max_concurrency = max_concurrency

    async def fetch_symbols(self) -> VenueSymbolSet:
        """
        List the symbols of every venue.

        A venue that fails is logged and recorded with an empty listing;
        it never aborts the others.

        Returns:
            Listings keyed by venue id, in registry order.
        """
        limiter = create_limiter(self._max_concurrency)
        venues = list(self._registry)

        listings = await asyncio.gather(
            *(self._fetch_venue(venue, limiter) for venue in venues)
        )

        result = VenueSymbolSet(
            (venue.venue_id, listing) for venue, listing in zip(venues, listings, strict=True)
        )

        failed = result.failed_venues
        if failed:
            logger.warning(f"Symbol listing failed for {len(failed)} venue(s): {', '.join(failed)}")
        logger.info(f"Listed symbols on {len(result) - len(failed)}/{len(result)} venues")

        return result

    async def _fetch_venue(
        self,
        venue: VenueDescriptor,
        limiter: asyncio.Semaphore,
    ) -> SymbolListing:
        """Fetch one venue's listing, converting failures into an empty listing."""
        try:
            symbols = await run_bounded(limiter, venue.timeout_s, venue.client.list_symbols)
            listing = SymbolListing(symbols=frozenset(symbols))
        except TimeoutError:
            logger.warning(f"Error fetching markets from {venue.venue_id}: timed out after {venue.timeout_s}s")
            return SymbolListing.failed(f"timed out after {venue.timeout_s}s")
        except Exception as e:
            logger.warning(f"Error fetching markets from {venue.venue_id}: {e!r}")
            return SymbolListing.failed(str(e) or type(e).__name__)

        logger.debug(f"{venue.venue_id}: {len(listing)} symbols")
        return listing

    @staticmethod
    def find_common_symbols(venue_symbols: VenueSymbolSet) -> frozenset[str]:
        """
        Intersect the listings of all venues.

        The accumulator is seeded with the first venue's symbols (registry
        order) and then intersected with every venue's symbols, the first
        included. If the first venue failed, its listing is empty and so
        is the result.

        Args:
            venue_symbols: Listings from fetch_symbols().

        Returns:
            Symbols listed on every venue.
        """
        listings = list(venue_symbols.values())
        if not listings:
            return frozenset()

        common = set(listings[0].symbols)
        for listing in listings:
            common &= listing.symbols

        logger.info(f"Found {len(common)} symbols common to {len(listings)} venues")
        return frozenset(common)
