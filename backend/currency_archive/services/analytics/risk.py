# backend/currency_archive/services/analytics/risk.py
"""
Risk calculation functions.

Volatility:
    Daily volatility = population std-dev of daily LOG returns
    Annualized volatility = daily volatility × √252

Drawdown:
    Running peak over the price series; drawdown = (P - peak) / peak.
    Max drawdown is the most negative value, always <= 0.

Value at Risk (95%, one day):
    Historical  = sorted returns at index floor(n × 0.05)
    Parametric  = μ - 1.65 × σ
    Both are reported as 0 when fewer than 20 returns are available.

The Sharpe ratio is NOT computed here. It needs the annualized return,
annualized volatility and the risk-free rate in the same units, which only
the metrics assembler has together.
"""

import math
from collections.abc import Sequence
from decimal import Decimal

from currency_archive.services.analytics.statistics import calculate_population_std_dev
from currency_archive.services.constants import (
    MIN_VAR_SAMPLE_SIZE,
    TRADING_DAYS_PER_YEAR,
    VAR_CONFIDENCE_PERCENTILE,
    VAR_Z_SCORE_95,
)


# =============================================================================
# VOLATILITY
# =============================================================================

def calculate_volatility(
        log_returns: Sequence[float],
        periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> tuple[float, float]:
    """
    Daily and annualized volatility of a log-return series.

    Returns:
        (daily, annualized), both 0.0 when fewer than 2 returns
    """
    daily = calculate_population_std_dev(log_returns)
    return daily, daily * math.sqrt(periods_per_year)


# =============================================================================
# DRAWDOWN
# =============================================================================

def calculate_drawdowns(prices: Sequence[Decimal | float]) -> tuple[float, list[float]]:
    """
    Single-pass drawdown analysis.

    The running peak starts at the first price. A zero peak produces a
    zero drawdown for that point.

    Args:
        prices: Chronological prices

    Returns:
        Tuple of:
        - max_drawdown: Most negative drawdown as decimal (e.g. -0.25), 0.0
          for an empty or non-decreasing series
        - drawdowns: Drawdown at every price, same length as ``prices``
    """
    if not prices:
        return 0.0, []

    peak = float(prices[0])
    max_drawdown = 0.0
    drawdowns = []

    for raw in prices:
        price = float(raw)
        if price > peak:
            peak = price
        drawdown = (price - peak) / peak if peak != 0 else 0.0
        drawdowns.append(drawdown)
        if drawdown < max_drawdown:
            max_drawdown = drawdown

    return max_drawdown, drawdowns


# =============================================================================
# VALUE AT RISK (VaR)
# =============================================================================

def calculate_historical_var(
        returns: Sequence[float],
        percentile: float = VAR_CONFIDENCE_PERCENTILE,
        min_sample: int = MIN_VAR_SAMPLE_SIZE,
) -> float:
    """
    Historical VaR: the return at the ``percentile`` position of the
    ascending sort.

    Returns:
        VaR as a (usually negative) decimal, or 0.0 below ``min_sample``
    """
    n = len(returns)
    if n < min_sample:
        return 0.0

    sorted_returns = sorted(returns)
    index = max(0, min(int(n * percentile), n - 1))
    return sorted_returns[index]


def calculate_parametric_var(
        returns: Sequence[float],
        mean: float,
        std_dev: float,
        z_score: float = VAR_Z_SCORE_95,
        min_sample: int = MIN_VAR_SAMPLE_SIZE,
) -> float:
    """Parametric (normal) VaR: μ - z·σ, or 0.0 below ``min_sample``."""
    if len(returns) < min_sample:
        return 0.0
    return mean - z_score * std_dev


def calculate_var(
        returns: Sequence[float],
        mean: float,
        std_dev: float,
        percentile: float = VAR_CONFIDENCE_PERCENTILE,
        z_score: float = VAR_Z_SCORE_95,
        min_sample: int = MIN_VAR_SAMPLE_SIZE,
) -> tuple[float, float]:
    """Both VaR flavours as (historical, parametric)."""
    return (
        calculate_historical_var(returns, percentile, min_sample),
        calculate_parametric_var(returns, mean, std_dev, z_score, min_sample),
    )
