"""
Type definitions for the arbitrage scanner.

This module contains the dataclasses and Protocol definitions shared by the
scan pipeline. Every value here is scan-scoped: it is built during one
orchestration run and discarded once the response is produced.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from crossarb.utils.math import format_pct


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class VenueClient(Protocol):
    """Market-data capability of a single venue."""

    async def list_symbols(self) -> set[str]:
        """Get the symbols currently tradable on the venue."""
        ...

    async def fetch_last_price(self, symbol: str) -> float:
        """Get the last traded price of a symbol."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


# =============================================================================
# Venue Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class VenueDescriptor:
    """
    A configured venue.

    Pairs the venue id with its market-data client and the timeout
    applied to every individual request made against it.
    """

    venue_id: str
    client: VenueClient = field(compare=False, repr=False)
    timeout_s: float = 50.0

    def __post_init__(self) -> None:
        if not self.venue_id:
            raise ValueError("Venue id cannot be empty")
        if self.timeout_s <= 0:
            raise ValueError(f"Timeout for {self.venue_id} must be positive")


# =============================================================================
# Symbol Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class SymbolListing:
    """
    Result of listing one venue's symbols.

    A failed listing carries an empty symbol set and the error text,
    so a failure stays visible after it has been absorbed.
    """

    symbols: frozenset[str] = frozenset()
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "SymbolListing":
        """Create a listing for a venue whose symbols could not be fetched."""
        return cls(symbols=frozenset(), error=error)

    @property
    def ok(self) -> bool:
        """Whether the symbols were fetched successfully."""
        return self.error is None

    def __len__(self) -> int:
        return len(self.symbols)


class VenueSymbolSet(Mapping[str, SymbolListing]):
    """
    Immutable mapping of venue id to its symbol listing.

    Iteration follows venue registry order.
    """

    __slots__ = ("_listings",)

    def __init__(self, listings: Iterable[tuple[str, SymbolListing]] = ()) -> None:
        self._listings: dict[str, SymbolListing] = dict(listings)

    def __getitem__(self, venue_id: str) -> SymbolListing:
        return self._listings[venue_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._listings)

    def __len__(self) -> int:
        return len(self._listings)

    def symbols(self, venue_id: str) -> frozenset[str]:
        """Get the symbols of a venue (empty if unknown or failed)."""
        listing = self._listings.get(venue_id)
        return listing.symbols if listing else frozenset()

    @property
    def failed_venues(self) -> list[str]:
        """Get ids of venues whose listing failed."""
        return [venue for venue, listing in self._listings.items() if not listing.ok]

    def __repr__(self) -> str:
        sizes = ", ".join(f"{venue}={len(listing)}" for venue, listing in self._listings.items())
        return f"VenueSymbolSet({sizes})"


# =============================================================================
# Price Types
# =============================================================================


class PriceTable:
    """
    Last prices per symbol and venue.

    Every venue has a slot under every symbol. A slot holding None
    means the price could not be fetched for that scan.
    """

    __slots__ = ("_rows",)

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, float | None]] = {}

    def set(self, symbol: str, venue_id: str, price: float | None) -> None:
        """Store the price (or its absence) for one slot."""
        self._rows.setdefault(symbol, {})[venue_id] = price

    def get(self, symbol: str, venue_id: str) -> float | None:
        """Get the price in one slot, None if absent."""
        return self._rows.get(symbol, {}).get(venue_id)

    def row(self, symbol: str) -> dict[str, float | None]:
        """Get a copy of every venue slot for a symbol."""
        return dict(self._rows.get(symbol, {}))

    def available(self, symbol: str) -> list[tuple[str, float]]:
        """Get (venue, price) pairs with a present price, in venue order."""
        return [
            (venue, price)
            for venue, price in self._rows.get(symbol, {}).items()
            if price is not None
        ]

    @property
    def symbols(self) -> list[str]:
        """Get symbols in insertion order."""
        return list(self._rows)

    @property
    def missing_count(self) -> int:
        """Count slots without a price."""
        return sum(
            1 for row in self._rows.values() for price in row.values() if price is None
        )

    def to_dict(self) -> dict[str, dict[str, float | None]]:
        """Export as nested dicts."""
        return {symbol: dict(row) for symbol, row in self._rows.items()}

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"PriceTable(symbols={len(self._rows)}, missing={self.missing_count})"


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ArbitrageOpportunity:
    """
    Price divergence of one symbol between two venues.

    percentage_difference is relative to the mean of both prices
    and already rounded to two decimals.
    """

    symbol: str
    exchange1: str
    price1: float
    exchange2: str
    price2: float
    percentage_difference: float

    def to_dict(self) -> dict[str, object]:
        """Serialize to the public wire format."""
        return {
            "symbol": self.symbol,
            "exchange1": self.exchange1,
            "price1": self.price1,
            "exchange2": self.exchange2,
            "price2": self.price2,
            "percentageDifference": format_pct(self.percentage_difference),
        }


@dataclass(slots=True)
class ScanReport:
    """Summary of a single orchestration run."""

    venues: list[str] = field(default_factory=list)
    symbol_failures: list[str] = field(default_factory=list)
    common_symbols: int = 0
    price_slots: int = 0
    price_failures: int = 0
    opportunities: int = 0
    latencies_us: dict[str, int] = field(default_factory=dict)
    finished_at_us: int = 0

    def to_dict(self) -> dict[str, object]:
        """Export as a plain dict."""
        return {
            "venues": list(self.venues),
            "symbol_failures": list(self.symbol_failures),
            "common_symbols": self.common_symbols,
            "price_slots": self.price_slots,
            "price_failures": self.price_failures,
            "opportunities": self.opportunities,
            "latencies_us": dict(self.latencies_us),
            "finished_at_us": self.finished_at_us,
        }
