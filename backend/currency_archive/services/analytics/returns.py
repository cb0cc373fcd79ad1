# backend/currency_archive/services/analytics/returns.py
"""
Return calculation functions.

Pure, stateless functions over price sequences. Returns are decimals
(0.02 = 2%) and are never rounded here.

Formulas:
    Simple return      r_i = (P_i - P_{i-1}) / P_{i-1}       (0 if P_{i-1} = 0)
    Log return         l_i = ln(P_i / P_{i-1})               (0 unless both > 0)
    Cumulative return  C = Π(1 + r_i) - 1                    (geometric)
    Annualized return  A = (1 + C)^(252 / n) - 1             (n = number of returns)

Compounding is always geometric; an arithmetic sum of daily returns is
never used as a cumulative figure.
"""

import logging
import math
from collections.abc import Sequence
from decimal import Decimal

from currency_archive.services.analytics.types import PriceSeries, ReturnSeries
from currency_archive.services.constants import TRADING_DAYS_PER_YEAR

logger = logging.getLogger(__name__)


# =============================================================================
# DAILY RETURNS
# =============================================================================

def calculate_simple_returns(prices: Sequence[Decimal | float]) -> list[float]:
    """
    Period-over-period simple returns.

    A zero previous price yields a 0 return for that step rather than an
    error, keeping the output length at exactly n-1.

    Args:
        prices: Chronological prices

    Returns:
        n-1 returns, or an empty list when fewer than 2 prices

    Example:
        >>> calculate_simple_returns([1.00, 1.02, 1.01])
        [0.02, -0.0098...]
    """
    if len(prices) < 2:
        return []

    values = [float(p) for p in prices]
    returns = []
    for i in range(1, len(values)):
        previous = values[i - 1]
        returns.append((values[i] - previous) / previous if previous != 0 else 0.0)
    return returns


def calculate_log_returns(prices: Sequence[Decimal | float]) -> list[float]:
    """
    Period-over-period logarithmic returns.

    Returns:
        n-1 log returns (0 wherever either price is not positive), or an
        empty list when fewer than 2 prices
    """
    if len(prices) < 2:
        return []

    values = [float(p) for p in prices]
    returns = []
    for i in range(1, len(values)):
        previous, current = values[i - 1], values[i]
        if previous > 0 and current > 0:
            returns.append(math.log(current / previous))
        else:
            returns.append(0.0)
    return returns


def build_return_series(series: PriceSeries) -> ReturnSeries:
    """
    Simple returns of a PriceSeries, dated by the closing price of each step.
    """
    if len(series) < 2:
        return ReturnSeries(currency=series.currency)

    return ReturnSeries(
        currency=series.currency,
        dates=series.dates[1:],
        values=tuple(calculate_simple_returns(series.prices)),
    )


# =============================================================================
# COMPOUNDED RETURNS
# =============================================================================

def calculate_cumulative_return(returns: Sequence[float]) -> float:
    """
    Geometric cumulative return: Π(1 + r) - 1.

    Returns:
        Cumulative return as a decimal, 0.0 for an empty sequence
    """
    growth = 1.0
    for r in returns:
        growth *= 1.0 + r
    return growth - 1.0


def annualize_return(
        cumulative_return: float,
        periods: int,
        periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """
    Annualize a cumulative return earned over ``periods`` daily returns.

    Formula: (1 + C)^(periods_per_year / periods) - 1

    Args:
        cumulative_return: Geometric cumulative return (decimal)
        periods: Number of daily returns the cumulative figure spans
        periods_per_year: Trading days per year

    Returns:
        Annualized return as decimal. 0.0 when periods <= 0, -1.0 for a
        total loss, inf when the result overflows a float.
    """
    if periods <= 0:
        return 0.0

    base = 1.0 + cumulative_return
    if base <= 0:
        return -1.0  # Total loss

    try:
        return math.pow(base, periods_per_year / periods) - 1.0
    except OverflowError:
        logger.warning(
            f"Annualized return overflow (cumulative={cumulative_return}, periods={periods})"
        )
        return math.inf
