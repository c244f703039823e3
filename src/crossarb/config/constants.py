"""
Scanner constants and default configuration values.

This module contains all hardcoded values used throughout the scanner.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Venues
# =============================================================================

# Venues queried when none are configured (ccxt exchange ids)
DEFAULT_VENUES: Final[tuple[str, ...]] = (
    "binance",
    "kraken",
    "bybit",
    "okx",
    "huobi",
    "mexc",
)

# Per-call timeout for every venue request (milliseconds)
DEFAULT_VENUE_TIMEOUT_MS: Final[int] = 50_000


# =============================================================================
# Connection Pool
# =============================================================================

HTTP_POOL_LIMIT: Final[int] = 100
HTTP_POOL_LIMIT_PER_HOST: Final[int] = 20
HTTP_KEEPALIVE_TIMEOUT: Final[float] = 30.0  # seconds


# =============================================================================
# Scanning
# =============================================================================

# Minimum price divergence to report (percent, 0.5 = 0.5%)
DEFAULT_THRESHOLD_PCT: Final[float] = 0.5

# Maximum number of venue requests in flight at once (1 = sequential)
DEFAULT_MAX_CONCURRENCY: Final[int] = 32

# Decimal places kept for the reported percentage difference
PERCENTAGE_PRECISION: Final[int] = 2


# =============================================================================
# HTTP Server
# =============================================================================

DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 3000

ENDPOINT_ARBITRAGE: Final[str] = "/arbitrage"
ENDPOINT_STATUS: Final[str] = "/api/status"

INTERNAL_ERROR_BODY: Final[str] = "Internal Server Error"


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Metric names
METRIC_SYMBOLS_STAGE: Final[str] = "stage_symbols"
METRIC_PRICES_STAGE: Final[str] = "stage_prices"
METRIC_SCAN_STAGE: Final[str] = "stage_scan"
METRIC_TOTAL: Final[str] = "scan_total"
