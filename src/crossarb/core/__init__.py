"""Core module: scan-scoped types (the orchestrator lives in crossarb.core.engine)."""

from crossarb.core.types import (
    ArbitrageOpportunity,
    PriceTable,
    ScanReport,
    SymbolListing,
    VenueClient,
    VenueDescriptor,
    VenueSymbolSet,
)


__all__ = [
    "ArbitrageOpportunity",
    "PriceTable",
    "ScanReport",
    "SymbolListing",
    "VenueClient",
    "VenueDescriptor",
    "VenueSymbolSet",
]
