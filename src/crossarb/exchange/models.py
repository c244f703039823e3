"""
Pydantic models for venue market-data responses.

ccxt already normalizes venue payloads into unified dicts; these models
validate the few fields the scanner relies on so a malformed response is
rejected at the boundary instead of leaking into the price table.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class MarketsPayload(BaseModel):
    """Markets returned by ccxt's load_markets, keyed by unified symbol."""

    markets: dict[str, dict[str, Any]]

    @field_validator("markets", mode="after")
    @classmethod
    def validate_symbols(cls, v: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """Reject blank symbol keys."""
        if any(not symbol.strip() for symbol in v):
            raise ValueError("Market symbol cannot be blank")
        return v

    @property
    def symbols(self) -> set[str]:
        """Get all listed symbols."""
        return set(self.markets)


class TickerPayload(BaseModel):
    """Unified ccxt ticker (only the fields used here)."""

    symbol: str | None = None
    last: float | None = None
    timestamp: int | None = Field(default=None)

    model_config = {"extra": "ignore"}

    @property
    def has_last(self) -> bool:
        """Check if the venue reported a last traded price."""
        return self.last is not None
