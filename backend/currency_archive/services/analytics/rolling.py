# backend/currency_archive/services/analytics/rolling.py
"""
Rolling window statistics.

Two kinds of windows are supported:

1. Trailing windows (part of every metrics record)

   For window size W over n prices and n-1 returns:

       prices:  mean and population std-dev of the last W prices
       return:  (P_last - P_first) / P_first over those W prices
       vol:     population std-dev of the W-1 most recent returns × √252

   The window is None when n < W or fewer than 2 returns are available.

2. Date-sliding windows (rolling analytics endpoint)

   Over N sorted dates with data, every start position 0..N-W yields one
   window covering W consecutive dates with data. For each currency the
   window reports average, min, max, std-dev and variance of the rates
   actually present in it.

   Windows are independent and computed on the shared pool; output order
   is restored by start index.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from concurrent.futures import Executor
from datetime import date
from decimal import Decimal

from currency_archive.services.analytics.statistics import (
    calculate_mean,
    calculate_population_std_dev,
    calculate_variance,
)
from currency_archive.services.analytics.types import (
    RollingAverageData,
    RollingWindow,
    RollingWindowStats,
)
from currency_archive.services.concurrency import run_parallel
from currency_archive.services.constants import (
    PRICE_PRECISION,
    ROLLING_WINDOW_SIZES,
    STD_DEV_PRECISION,
    TRADING_DAYS_PER_YEAR,
)
from currency_archive.services.exceptions import InvalidRangeError
from currency_archive.services.rounding import round_decimal, to_decimal
from currency_archive.utils.date_utils import calendar_days_inclusive

logger = logging.getLogger(__name__)


# =============================================================================
# TRAILING WINDOWS
# =============================================================================

def calculate_rolling_window(
        prices: Sequence[float],
        returns: Sequence[float],
        window_size: int,
        periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> RollingWindowStats | None:
    """
    Statistics of the trailing ``window_size`` prices.

    Args:
        prices: Chronological prices (floats)
        returns: Simple daily returns of ``prices`` (len(prices) - 1 values)
        window_size: W
        periods_per_year: Annualization factor for the volatility

    Returns:
        RollingWindowStats, or None when the series is shorter than W or
        fewer than 2 returns fall into the window
    """
    n = len(prices)
    if window_size < 1 or n < window_size:
        return None

    window_prices = prices[n - window_size:]
    mean = calculate_mean(window_prices)
    std_dev = calculate_population_std_dev(window_prices)

    first = window_prices[0]
    window_return = (window_prices[-1] - first) / first if first != 0 else 0.0

    return_start = max(0, len(returns) - window_size + 1)
    return_count = min(window_size - 1, len(returns) - return_start)
    if return_count < 2:
        return None

    window_returns = returns[return_start:return_start + return_count]
    volatility = calculate_population_std_dev(window_returns) * math.sqrt(periods_per_year)

    return RollingWindowStats(
        window_size=window_size,
        mean=mean,
        std_dev=std_dev,
        window_return=window_return,
        volatility=volatility,
        return_count=return_count,
    )


def calculate_rolling_metrics(
        prices: Sequence[float],
        returns: Sequence[float],
        window_sizes: Sequence[int] = ROLLING_WINDOW_SIZES,
        periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> dict[int, RollingWindowStats | None]:
    """Trailing windows for every size in ``window_sizes``, keyed by size."""
    return {
        size: calculate_rolling_window(prices, returns, size, periods_per_year)
        for size in window_sizes
    }


# =============================================================================
# DATE-SLIDING WINDOWS
# =============================================================================

def calculate_window_statistics(rates: Sequence[Decimal]) -> RollingAverageData:
    """
    Average, min, max, std-dev and variance of one currency's rates in a window.

    Rounded to 6 places except variance (8 places).
    """
    average = sum(rates, Decimal(0)) / len(rates)
    variance = calculate_variance(rates, average)
    std_dev = math.sqrt(float(variance))

    return RollingAverageData(
        average=round_decimal(average, PRICE_PRECISION),
        min=round_decimal(min(rates), PRICE_PRECISION),
        max=round_decimal(max(rates), PRICE_PRECISION),
        std_dev=to_decimal(std_dev, PRICE_PRECISION, "window std_dev"),
        variance=round_decimal(variance, STD_DEV_PRECISION),
    )


class RollingWindowCalculator:
    """
    Date-sliding window analytics over a collected timeseries.

    Usage:
        calculator = RollingWindowCalculator(executor, timeout=30)
        calculator.validate_window_parameters(start, end, window_size)
        windows = calculator.calculate_windows(timeseries, window_size)
    """

    def __init__(self, executor: Executor, timeout: float | None = None) -> None:
        self.executor = executor
        self.timeout = timeout

    @staticmethod
    def validate_window_parameters(start_date: date, end_date: date, window_size: int) -> None:
        """
        Raises:
            InvalidRangeError: end before start, window below 1, or window
                longer than the calendar days in the range
        """
        if end_date < start_date:
            raise InvalidRangeError(
                f"End date {end_date.isoformat()} must not be before start date {start_date.isoformat()}",
                field="end_date",
            )
        if window_size < 1:
            raise InvalidRangeError("Window size must be at least 1", field="window_size")

        total_days = calendar_days_inclusive(start_date, end_date)
        if window_size > total_days:
            raise InvalidRangeError(
                f"Window size {window_size} exceeds the {total_days} calendar days in the range",
                field="window_size",
            )

    def calculate_windows(
            self,
            timeseries: Mapping[date, Mapping[str, Decimal]],
            window_size: int,
    ) -> list[RollingWindow]:
        """
        Every window of ``window_size`` consecutive dates with data.

        Args:
            timeseries: {date: rates}, only dates with data
            window_size: Number of dates with data per window

        Returns:
            Windows ordered by start date; empty when there are fewer
            dates than ``window_size``
        """
        sorted_dates = sorted(timeseries)
        window_count = len(sorted_dates) - window_size + 1
        if window_size < 1 or window_count <= 0:
            return []

        def compute(index: int) -> RollingWindow:
            return self._calculate_single_window(timeseries, sorted_dates, index, window_size)

        windows = run_parallel(
            self.executor, compute, range(window_count),
            timeout=self.timeout, stage="rolling_windows",
        )
        logger.debug(f"Computed {len(windows)} rolling windows of size {window_size}")
        return windows

    @staticmethod
    def _calculate_single_window(
            timeseries: Mapping[date, Mapping[str, Decimal]],
            sorted_dates: Sequence[date],
            index: int,
            window_size: int,
    ) -> RollingWindow:
        window_dates = sorted_dates[index:index + window_size]

        rates_by_currency: dict[str, list[Decimal]] = {}
        for rate_date in window_dates:
            for code, rate in timeseries[rate_date].items():
                rates_by_currency.setdefault(code, []).append(rate)

        return RollingWindow(
            window_start=window_dates[0],
            window_end=window_dates[-1],
            data_points=len(window_dates),
            rates={
                code: calculate_window_statistics(rates)
                for code, rates in sorted(rates_by_currency.items())
            },
        )
