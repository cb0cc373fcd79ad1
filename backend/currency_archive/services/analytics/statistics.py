# backend/currency_archive/services/analytics/statistics.py
"""
Descriptive statistics shared by every analytics calculator.

All dispersion measures are POPULATION statistics (divide by n, not n-1),
since each series is the full set of observations for the requested range.

Formulas:
    mean      μ = Σx / n                        (0 for an empty series)
    std-dev   σ = sqrt(Σ(x - μ)² / n)           (0 when n < 2)
    variance  σ² = Σ(x - μ)² / n                (0 when n < 2)
    Pearson   ρ = Σ(x-μx)(y-μy) / sqrt(Σ(x-μx)² · Σ(y-μy)²)

Pearson returns NaN (undefined) rather than 0 when it cannot be computed;
callers drop NaN values instead of reporting a misleading zero.
"""

import math
from collections.abc import Sequence
from decimal import Decimal

from currency_archive.services.constants import ZERO


def calculate_mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def calculate_population_std_dev(values: Sequence[float]) -> float:
    """
    Population standard deviation.

    Args:
        values: Observations (prices or returns)

    Returns:
        σ with divisor n, or 0.0 when fewer than 2 observations
    """
    n = len(values)
    if n < 2:
        return 0.0

    mean = calculate_mean(values)
    sum_squared_diffs = math.fsum((x - mean) ** 2 for x in values)
    return math.sqrt(sum_squared_diffs / n)


def calculate_variance(prices: Sequence[Decimal], mean: Decimal) -> Decimal:
    """
    Population variance of Decimal prices around a given mean.

    Intermediate arithmetic is done in float; the result is returned as a
    Decimal so it can be rounded to 10 places alongside other price stats.

    Returns:
        Variance, or Decimal 0 when fewer than 2 prices
    """
    n = len(prices)
    if n < 2:
        return ZERO

    mean_f = float(mean)
    sum_squared_diffs = math.fsum((float(p) - mean_f) ** 2 for p in prices)
    return Decimal(str(sum_squared_diffs / n))


def calculate_pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Returns:
        ρ in [-1, 1], or NaN when lengths differ, n < 2, or either series
        has zero variance
    """
    n = len(x)
    if n != len(y) or n < 2:
        return math.nan

    mean_x = calculate_mean(x)
    mean_y = calculate_mean(y)

    covariance = math.fsum((x[i] - mean_x) * (y[i] - mean_y) for i in range(n))
    sum_sq_x = math.fsum((v - mean_x) ** 2 for v in x)
    sum_sq_y = math.fsum((v - mean_y) ** 2 for v in y)

    denominator = math.sqrt(sum_sq_x * sum_sq_y)
    if denominator == 0:
        return math.nan

    # Clamp float drift so perfectly correlated series report exactly ±1
    return max(-1.0, min(1.0, covariance / denominator))
