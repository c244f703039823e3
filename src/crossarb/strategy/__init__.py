"""Strategy module for cross-venue opportunity detection."""

from crossarb.strategy.opportunity import OpportunityScanner, OpportunityStats


__all__ = [
    "OpportunityScanner",
    "OpportunityStats",
]
