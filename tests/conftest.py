"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from collections.abc import Callable

import pytest

from crossarb.config.settings import Settings
from crossarb.core.types import PriceTable, VenueDescriptor
from crossarb.exchange.registry import VenueRegistry
from crossarb.strategy.opportunity import OpportunityScanner
from tests.mocks.exchange import MockVenueClient


RegistryFactory = Callable[..., VenueRegistry]


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def make_registry() -> RegistryFactory:
    """Build a registry from (venue_id, client) pairs, keeping their order."""

    def _make(*venues: tuple[str, MockVenueClient], timeout_s: float = 1.0) -> VenueRegistry:
        return VenueRegistry(
            VenueDescriptor(venue_id=venue_id, client=client, timeout_s=timeout_s)
            for venue_id, client in venues
        )

    return _make


@pytest.fixture
def scenario_clients() -> dict[str, MockVenueClient]:
    """
    Three venues sharing only X.

    A lists X,Y; B lists X,Y,Z; C lists X. X trades at 100 / 102 / 110.
    """
    return {
        "A": MockVenueClient(symbols=["X", "Y"], prices={"X": 100.0, "Y": 10.0}),
        "B": MockVenueClient(symbols=["X", "Y", "Z"], prices={"X": 102.0, "Y": 10.0, "Z": 1.0}),
        "C": MockVenueClient(symbols=["X"], prices={"X": 110.0}),
    }


@pytest.fixture
def scenario_registry(
    make_registry: RegistryFactory,
    scenario_clients: dict[str, MockVenueClient],
) -> VenueRegistry:
    """Registry over the three scenario venues in A, B, C order."""
    return make_registry(*scenario_clients.items())


# =============================================================================
# Price Fixtures
# =============================================================================


@pytest.fixture
def make_price_table() -> Callable[[dict[str, dict[str, float | None]]], PriceTable]:
    """Build a price table from nested dicts."""

    def _make(rows: dict[str, dict[str, float | None]]) -> PriceTable:
        table = PriceTable()
        for symbol, row in rows.items():
            for venue_id, price in row.items():
                table.set(symbol, venue_id, price)
        return table

    return _make


@pytest.fixture
def scanner() -> OpportunityScanner:
    """Scanner with the default 0.5% threshold."""
    return OpportunityScanner()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings independent of the developer's environment."""
    for name in (
        "VENUES",
        "VENUE_TIMEOUT_MS",
        "VENUE_TIMEOUTS_MS",
        "THRESHOLD_PCT",
        "MAX_CONCURRENCY",
        "PORT",
        "STATIC_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        venues=["A", "B", "C"],
        venue_timeout_ms=1000,
        threshold_pct=0.5,
        max_concurrency=4,
    )
