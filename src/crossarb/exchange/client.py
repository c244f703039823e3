"""
Async venue market-data client backed by ccxt.

Implements the two capabilities the scanner needs from a venue:
- listing the currently tradable symbols
- fetching the last traded price of a symbol

Authentication, rate limiting and each venue's wire protocol are handled
by ccxt. All venues share a single pooled aiohttp session.
"""

import logging
from typing import Any

import aiohttp
import ccxt.async_support as ccxt_async
import orjson
from ccxt.base.errors import BaseError as CcxtError
from ccxt.base.errors import RequestTimeout
from pydantic import ValidationError

from crossarb.config.constants import (
    DEFAULT_VENUE_TIMEOUT_MS,
    HTTP_KEEPALIVE_TIMEOUT,
    HTTP_POOL_LIMIT,
    HTTP_POOL_LIMIT_PER_HOST,
)
from crossarb.exchange.models import MarketsPayload, TickerPayload


logger = logging.getLogger(__name__)


class VenueError(Exception):
    """Base exception for venue client errors."""

    def __init__(self, message: str, venue_id: str | None = None) -> None:
        super().__init__(message)
        self.venue_id = venue_id


class VenueTimeoutError(VenueError):
    """Exception for requests that exceeded the venue timeout."""

    pass


class VenueResponseError(VenueError):
    """Exception for malformed or incomplete venue responses."""

    pass


def create_session() -> aiohttp.ClientSession:
    """
    Create the shared HTTP session for all venue clients.

    Must be called from a running event loop.
    """
    connector = aiohttp.TCPConnector(
        limit=HTTP_POOL_LIMIT,
        limit_per_host=HTTP_POOL_LIMIT_PER_HOST,
        keepalive_timeout=HTTP_KEEPALIVE_TIMEOUT,
        enable_cleanup_closed=True,
    )
    return aiohttp.ClientSession(
        connector=connector,
        json_serialize=lambda x: orjson.dumps(x).decode(),
    )


class CcxtVenueClient:
    """
    Market-data client for one ccxt-supported venue.

    Features:
    - Unified symbols across venues (e.g. "BTC/USDT")
    - Markets reloaded on every listing, no cross-scan caching
    - ccxt errors translated to VenueError subclasses
    """

    def __init__(
        self,
        venue_id: str,
        timeout_ms: int = DEFAULT_VENUE_TIMEOUT_MS,
        session: aiohttp.ClientSession | None = None,
        exchange: Any | None = None,
    ) -> None:
        """
        Initialize the venue client.

        Args:
            venue_id: ccxt exchange id (e.g. "binance").
            timeout_ms: Per-request timeout handed to ccxt.
            session: Optional shared aiohttp session.
            exchange: Pre-built ccxt exchange instance (mainly for tests).

        Raises:
            VenueError: If ccxt does not know the venue id.
        """
        self._venue_id = venue_id

        if exchange is None:
            exchange_class = getattr(ccxt_async, venue_id, None)
            if exchange_class is None:
                raise VenueError(f"Unsupported venue: {venue_id}", venue_id=venue_id)

            config: dict[str, Any] = {
                "timeout": timeout_ms,
                "enableRateLimit": True,
            }
            if session is not None:
                config["session"] = session
            exchange = exchange_class(config)

        self._exchange = exchange

    @property
    def venue_id(self) -> str:
        """Get the venue id."""
        return self._venue_id

    async def list_symbols(self) -> set[str]:
        """
        Get the symbols currently tradable on the venue.

        Returns:
            Set of unified symbols.

        Raises:
            VenueTimeoutError: On request timeout.
            VenueResponseError: On a malformed markets payload.
            VenueError: On any other venue failure.
        """
        try:
            markets = await self._exchange.load_markets(True)
        except RequestTimeout as e:
            raise VenueTimeoutError(f"{self._venue_id} markets timed out: {e}", self._venue_id) from e
        except CcxtError as e:
            raise VenueError(f"{self._venue_id} markets failed: {e}", self._venue_id) from e

        try:
            payload = MarketsPayload.model_validate({"markets": markets})
        except ValidationError as e:
            raise VenueResponseError(
                f"{self._venue_id} returned invalid markets: {e}", self._venue_id
            ) from e

        logger.debug(f"{self._venue_id}: {len(payload.symbols)} markets")
        return payload.symbols

    async def fetch_last_price(self, symbol: str) -> float:
        """
        Get the last traded price of a symbol.

        Args:
            symbol: Unified symbol (e.g. "BTC/USDT").

        Returns:
            Last price as reported by the venue.

        Raises:
            VenueTimeoutError: On request timeout.
            VenueResponseError: If the ticker has no last price.
            VenueError: On any other venue failure.
        """
        try:
            ticker = await self._exchange.fetch_ticker(symbol)
        except RequestTimeout as e:
            raise VenueTimeoutError(
                f"{self._venue_id} {symbol} ticker timed out: {e}", self._venue_id
            ) from e
        except CcxtError as e:
            raise VenueError(f"{self._venue_id} {symbol} ticker failed: {e}", self._venue_id) from e

        try:
            payload = TickerPayload.model_validate(ticker)
        except ValidationError as e:
            raise VenueResponseError(
                f"{self._venue_id} returned invalid ticker for {symbol}: {e}", self._venue_id
            ) from e

        if not payload.has_last:
            raise VenueResponseError(
                f"{self._venue_id} reported no last price for {symbol}", self._venue_id
            )

        return payload.last

    async def close(self) -> None:
        """Close the underlying ccxt exchange."""
        await self._exchange.close()

    async def __aenter__(self) -> "CcxtVenueClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
