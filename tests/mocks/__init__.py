"""Mock implementations for testing."""

from tests.mocks.exchange import BrokenVenueClient, ConcurrencyProbe, MockVenueClient


__all__ = [
    "BrokenVenueClient",
    "ConcurrencyProbe",
    "MockVenueClient",
]
