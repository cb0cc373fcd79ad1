# backend/currency_archive/services/analytics/correlation.py
"""
Cross-currency correlation pass.

Runs once, after every per-currency metrics record exists. For each
ordered pair (A, B) with A ≠ B, the Pearson correlation of the two daily
return series is attached to A's record under key B.

Alignment rule: two return series are only comparable when they were
built from the same sequence of dates. Pairs with different date
sequences (a currency missing on some days) are undefined and omitted,
as are NaN results (zero variance, fewer than 2 returns). A record whose
map would be empty keeps ``correlations = None``.
"""

import logging
import math
from collections.abc import Mapping

from currency_archive.services.analytics.statistics import calculate_pearson_correlation
from currency_archive.services.analytics.types import CurrencyMetrics, ReturnSeries
from currency_archive.services.constants import PERCENTAGE_PRECISION
from currency_archive.services.rounding import to_decimal

logger = logging.getLogger(__name__)


def calculate_return_correlation(a: ReturnSeries, b: ReturnSeries) -> float:
    """Pearson correlation of two return series, NaN unless date-aligned."""
    if a.dates != b.dates:
        return math.nan
    return calculate_pearson_correlation(a.values, b.values)


def add_correlations(
        metrics: Mapping[str, CurrencyMetrics],
        returns_by_currency: Mapping[str, ReturnSeries],
) -> None:
    """
    Attach correlation maps to ``metrics`` in place.

    Args:
        metrics: Currency → completed metrics record
        returns_by_currency: Currency → return series used for that record
    """
    currencies = sorted(c for c in metrics if c in returns_by_currency)
    if len(currencies) < 2:
        return

    # ρ(A, B) = ρ(B, A); compute each unordered pair once
    pair_values: dict[tuple[str, str], float] = {}
    for i, first in enumerate(currencies):
        for second in currencies[i + 1:]:
            pair_values[(first, second)] = calculate_return_correlation(
                returns_by_currency[first], returns_by_currency[second]
            )

    skipped = 0
    for currency in currencies:
        correlations = {}
        for other in currencies:
            if other == currency:
                continue
            key = (currency, other) if currency < other else (other, currency)
            value = pair_values[key]
            if math.isnan(value):
                skipped += 1
                continue
            correlations[other] = to_decimal(value, PERCENTAGE_PRECISION, "correlation")

        if correlations:
            metrics[currency].correlations = correlations

    if skipped:
        logger.debug(f"Omitted {skipped // 2} undefined currency correlations")
