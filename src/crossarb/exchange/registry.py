"""
Venue registry.

Ordered collection of configured venues. The order is significant: it
drives the seed of the common-symbol intersection and the order in which
venue prices are compared.
"""

import logging
from collections.abc import Iterable, Iterator

import aiohttp

from crossarb.config.settings import Settings
from crossarb.core.types import VenueDescriptor
from crossarb.exchange.client import CcxtVenueClient, create_session


logger = logging.getLogger(__name__)


class VenueRegistry:
    """
    Ordered, injectable set of venues.

    Built from settings for production use, or directly from
    descriptors wrapping mock clients in tests.
    """

    __slots__ = ("_venues", "_session")

    def __init__(
        self,
        venues: Iterable[VenueDescriptor],
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            venues: Venue descriptors in scan order.
            session: HTTP session owned by the registry, closed with it.

        Raises:
            ValueError: On duplicate venue ids.
        """
        self._venues: dict[str, VenueDescriptor] = {}
        for venue in venues:
            if venue.venue_id in self._venues:
                raise ValueError(f"Duplicate venue id: {venue.venue_id}")
            self._venues[venue.venue_id] = venue
        self._session = session

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: aiohttp.ClientSession | None = None,
    ) -> "VenueRegistry":
        """
        Build ccxt-backed venues from settings.

        Args:
            settings: Application settings.
            session: Shared HTTP session for all venue clients.

        Returns:
            Registry in configured venue order.
        """
        venues = [
            VenueDescriptor(
                venue_id=venue_id,
                client=CcxtVenueClient(
                    venue_id,
                    timeout_ms=settings.timeout_ms_for(venue_id),
                    session=session,
                ),
                timeout_s=settings.timeout_for(venue_id),
            )
            for venue_id in settings.venues
        ]
        logger.info(f"Configured {len(venues)} venues: {', '.join(settings.venues)}")
        return cls(venues, session=session)

    @classmethod
    async def open(cls, settings: Settings) -> "VenueRegistry":
        """Build ccxt-backed venues sharing a new pooled session."""
        return cls.from_settings(settings, session=create_session())

    async def close(self) -> None:
        """Close every venue client and the owned session."""
        for venue in self._venues.values():
            try:
                await venue.client.close()
            except Exception as e:
                logger.warning(f"Error closing {venue.venue_id}: {e}")

        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def get(self, venue_id: str) -> VenueDescriptor | None:
        """Get a venue by id."""
        return self._venues.get(venue_id)

    @property
    def ids(self) -> list[str]:
        """Get venue ids in scan order."""
        return list(self._venues)

    def __iter__(self) -> Iterator[VenueDescriptor]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._venues
