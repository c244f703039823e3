"""
Unit tests for SymbolCatalog.

Tests symbol listing, failure isolation and the common-symbol intersection.
"""

import pytest

from crossarb.core.types import SymbolListing, VenueSymbolSet
from crossarb.exchange.registry import VenueRegistry
from crossarb.market.symbols import SymbolCatalog
from tests.mocks.exchange import BrokenVenueClient, ConcurrencyProbe, MockVenueClient


def listings(**symbols: list[str] | None) -> VenueSymbolSet:
    """Build a VenueSymbolSet; None marks a failed venue."""
    return VenueSymbolSet(
        (venue, SymbolListing.failed("down") if values is None else SymbolListing(frozenset(values)))
        for venue, values in symbols.items()
    )


class TestFetchSymbols:
    """Tests for SymbolCatalog.fetch_symbols."""

    @pytest.mark.asyncio
    async def test_lists_every_venue(self, scenario_registry: VenueRegistry) -> None:
        """Test that each venue's listing is stored under its id."""
        result = await SymbolCatalog(scenario_registry).fetch_symbols()

        assert list(result) == ["A", "B", "C"]
        assert result.symbols("A") == {"X", "Y"}
        assert result.symbols("B") == {"X", "Y", "Z"}
        assert result.symbols("C") == {"X"}
        assert result.failed_venues == []

    @pytest.mark.asyncio
    async def test_venue_failure_is_isolated(self, make_registry) -> None:
        """Test that a failing venue yields an empty listing and no exception."""
        registry = make_registry(
            ("A", MockVenueClient(symbols=["X"])),
            ("B", MockVenueClient(fail_listing=True)),
            ("C", MockVenueClient(symbols=["X", "Y"])),
        )

        result = await SymbolCatalog(registry).fetch_symbols()

        assert result.symbols("B") == frozenset()
        assert not result["B"].ok
        assert "markets unavailable" in (result["B"].error or "")
        assert result.symbols("A") == {"X"}
        assert result.symbols("C") == {"X", "Y"}
        assert result.failed_venues == ["B"]

    @pytest.mark.asyncio
    async def test_timeout_is_isolated(self, make_registry) -> None:
        """Test that a venue exceeding its timeout is treated as failed."""
        registry = make_registry(
            ("slow", MockVenueClient(symbols=["X"], latency_s=1.0)),
            ("fast", MockVenueClient(symbols=["X"])),
            timeout_s=0.05,
        )

        result = await SymbolCatalog(registry).fetch_symbols()

        assert result.symbols("slow") == frozenset()
        assert "timed out" in (result["slow"].error or "")
        assert result.symbols("fast") == {"X"}

    @pytest.mark.asyncio
    async def test_malformed_listing_is_isolated(self, make_registry) -> None:
        """Test that a non-iterable listing counts as a failure."""
        registry = make_registry(
            ("A", BrokenVenueClient(listing=None)),
            ("B", MockVenueClient(symbols=["X"])),
        )

        result = await SymbolCatalog(registry).fetch_symbols()

        assert not result["A"].ok
        assert result["B"].ok

    @pytest.mark.asyncio
    async def test_order_follows_registry_not_completion(self, make_registry) -> None:
        """Test that slower venues keep their registry position."""
        registry = make_registry(
            ("slow", MockVenueClient(symbols=["X"], latency_s=0.05)),
            ("fast", MockVenueClient(symbols=["X"])),
        )

        result = await SymbolCatalog(registry).fetch_symbols()

        assert list(result) == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_sequential_mode(self, make_registry) -> None:
        """Test that max_concurrency=1 runs one listing at a time."""
        probe = ConcurrencyProbe()
        registry = make_registry(
            *((f"v{i}", MockVenueClient(symbols=["X"], latency_s=0.01, probe=probe)) for i in range(4))
        )

        await SymbolCatalog(registry, max_concurrency=1).fetch_symbols()

        assert probe.total == 4
        assert probe.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_concurrent_mode(self, make_registry) -> None:
        """Test that listings overlap when concurrency allows it."""
        probe = ConcurrencyProbe()
        registry = make_registry(
            *((f"v{i}", MockVenueClient(symbols=["X"], latency_s=0.01, probe=probe)) for i in range(4))
        )

        await SymbolCatalog(registry, max_concurrency=4).fetch_symbols()

        assert probe.max_in_flight > 1

    @pytest.mark.asyncio
    async def test_empty_registry(self) -> None:
        """Test that an empty registry yields an empty result."""
        result = await SymbolCatalog(VenueRegistry([])).fetch_symbols()

        assert len(result) == 0


class TestFindCommonSymbols:
    """Tests for SymbolCatalog.find_common_symbols."""

    def test_scenario_intersection(self) -> None:
        """Test the three-venue scenario resolves to X only."""
        common = SymbolCatalog.find_common_symbols(
            listings(A=["X", "Y"], B=["X", "Y", "Z"], C=["X"])
        )

        assert common == {"X"}

    @pytest.mark.parametrize(
        "sets",
        [
            [{"a", "b", "c"}, {"b", "c", "d"}, {"c", "b"}],
            [{"a"}, {"a"}],
            [{"a", "b"}, {"c", "d"}],
            [{"x", "y", "z"}, {"x", "y", "z", "w"}, {"z", "x"}, {"x"}],
        ],
    )
    def test_equals_set_intersection(self, sets: list[set[str]]) -> None:
        """Test that the result is exactly the intersection of all sets."""
        venue_symbols = listings(**{f"v{i}": sorted(s) for i, s in enumerate(sets)})

        assert SymbolCatalog.find_common_symbols(venue_symbols) == set.intersection(*sets)

    def test_subset_of_every_venue(self) -> None:
        """Test that the common set is contained in each venue's set."""
        venue_symbols = listings(A=["X", "Y", "Q"], B=["X", "Y"], C=["Y", "X", "Z"])

        common = SymbolCatalog.find_common_symbols(venue_symbols)

        for venue in venue_symbols:
            assert common <= venue_symbols.symbols(venue)

    def test_empty_trailing_venue_empties_result(self) -> None:
        """Test that any empty set makes the intersection empty."""
        common = SymbolCatalog.find_common_symbols(listings(A=["X"], B=["X"], C=[]))

        assert common == frozenset()

    def test_failed_seed_venue_collapses_result(self) -> None:
        """Test that a failed first venue empties the result regardless of others."""
        common = SymbolCatalog.find_common_symbols(listings(A=None, B=["X", "Y"], C=["X", "Y"]))

        assert common == frozenset()

    def test_failed_middle_venue_collapses_result(self) -> None:
        """Test that a failed venue anywhere empties the result."""
        common = SymbolCatalog.find_common_symbols(listings(A=["X"], B=None, C=["X"]))

        assert common == frozenset()

    def test_single_venue(self) -> None:
        """Test that one venue yields its full set."""
        common = SymbolCatalog.find_common_symbols(listings(A=["X", "Y", "Z"]))

        assert common == {"X", "Y", "Z"}

    def test_no_venues(self) -> None:
        """Test that no venues yields an empty set."""
        assert SymbolCatalog.find_common_symbols(VenueSymbolSet()) == frozenset()

    @pytest.mark.asyncio
    async def test_leading_venue_failure_end_to_end(self, make_registry) -> None:
        """Test the seed collapse through fetch_symbols."""
        registry = make_registry(
            ("A", MockVenueClient(fail_listing=True)),
            ("B", MockVenueClient(symbols=["X"])),
            ("C", MockVenueClient(symbols=["X"])),
        )
        catalog = SymbolCatalog(registry)

        venue_symbols = await catalog.fetch_symbols()

        assert venue_symbols.symbols("B") == {"X"}
        assert catalog.find_common_symbols(venue_symbols) == frozenset()
