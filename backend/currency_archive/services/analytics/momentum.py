# backend/currency_archive/services/analytics/momentum.py
"""
Technical indicators: momentum, simple moving average, z-score.

Momentum(k) = (P_last - P_{last-k}) / P_{last-k}
SMA(k)      = mean of the last k prices
Z-score     = (P_last - mean) / std-dev

Momentum and SMA report None when the series is too short; the z-score
reports 0 when the std-dev is 0.
"""

from collections.abc import Sequence
from decimal import Decimal

from currency_archive.services.analytics.statistics import calculate_mean


def calculate_momentum(prices: Sequence[Decimal | float], period: int) -> float | None:
    """
    Price change over the last ``period`` steps, as a decimal.

    Returns:
        Momentum, or None if fewer than period+1 prices or the past price is 0
    """
    if period < 1 or len(prices) < period + 1:
        return None

    past = float(prices[-(period + 1)])
    if past == 0:
        return None
    return (float(prices[-1]) - past) / past


def calculate_sma(prices: Sequence[Decimal | float], period: int) -> float | None:
    """Mean of the last ``period`` prices, or None if fewer are available."""
    if period < 1 or len(prices) < period:
        return None
    return calculate_mean([float(p) for p in prices[-period:]])


def calculate_z_score(last: float, mean: float, std_dev: float) -> float:
    if std_dev == 0:
        return 0.0
    return (last - mean) / std_dev
