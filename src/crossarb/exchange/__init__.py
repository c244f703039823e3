"""Venue integration module backed by ccxt."""

from crossarb.exchange.client import (
    CcxtVenueClient,
    VenueError,
    VenueResponseError,
    VenueTimeoutError,
    create_session,
)
from crossarb.exchange.models import MarketsPayload, TickerPayload
from crossarb.exchange.registry import VenueRegistry


__all__ = [
    "CcxtVenueClient",
    "MarketsPayload",
    "TickerPayload",
    "VenueError",
    "VenueRegistry",
    "VenueResponseError",
    "VenueTimeoutError",
    "create_session",
]
