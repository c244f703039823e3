"""
Mathematical utilities for price comparison.

Plain float arithmetic; no Decimal on the scan path.
"""

import math
from typing import Final

from crossarb.config.constants import PERCENTAGE_PRECISION


# Number of percentage points per unit ratio
PERCENT: Final[float] = 100.0


def mean_price(price1: float, price2: float) -> float:
    """
    Arithmetic mean of two prices.

    Args:
        price1: First price.
        price2: Second price.

    Returns:
        (price1 + price2) / 2
    """
    return (price1 + price2) / 2


def relative_difference_pct(price1: float, price2: float) -> float | None:
    """
    Absolute price difference as a percentage of the mean price.

    Symmetric in its arguments, so (a, b) and (b, a) give the same result.

    Args:
        price1: First price.
        price2: Second price.

    Returns:
        |price1 - price2| / ((price1 + price2) / 2) * 100, or None when the
        mean is not positive (both prices zero) and the ratio is undefined.

    Example:
        >>> round(relative_difference_pct(100.0, 110.0), 2)
        9.52
        >>> relative_difference_pct(0.0, 0.0) is None
        True
    """
    mean = mean_price(price1, price2)
    if mean <= 0:
        return None
    return abs(price1 - price2) / mean * PERCENT


def round_pct(value: float, precision: int = PERCENTAGE_PRECISION) -> float:
    """
    Round a percentage for reporting.

    Uses Python's built-in round(), i.e. round-half-to-even on the binary
    float value.

    Args:
        value: Percentage to round.
        precision: Decimal places to keep.

    Returns:
        Rounded percentage.

    Example:
        >>> round_pct(1.980198)
        1.98
    """
    return round(value, precision)


def format_pct(value: float, precision: int = PERCENTAGE_PRECISION) -> str:
    """Format a percentage with a fixed number of decimals."""
    return f"{value:.{precision}f}"


def is_valid_price(value: object) -> bool:
    """
    Check that a venue-reported price is a finite real number.

    Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)
