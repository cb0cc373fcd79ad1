# backend/currency_archive/services/series_collector.py
"""
Builds time series from the archive for a date range.

Two modes:
    - Timeseries mode: ``collect_timeseries`` → {date: {code: rate}}
    - Single-series mode: ``collect_price_series`` → PriceSeries

Every calendar date in the range is fetched through the BaseConverter on
the shared pool. Dates that are absent from the archive, cannot be
converted, or leave an empty map after filtering are skipped silently
(weekends and holidays are normal). Output is always ascending by date.

Missing dates are never errors here; only a reversed or oversized range is.
"""

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import Executor
from datetime import date
from decimal import Decimal
from functools import partial

from currency_archive.services.analytics.types import PriceSeries
from currency_archive.services.base_converter import (
    BaseConverter,
    normalize_currency,
    normalize_symbols,
)
from currency_archive.services.concurrency import run_parallel
from currency_archive.services.constants import BASE_CURRENCY
from currency_archive.services.exceptions import InvalidRangeError, RateNotFoundError
from currency_archive.utils.date_utils import calendar_days_inclusive, iter_calendar_days

logger = logging.getLogger(__name__)

Timeseries = dict[date, dict[str, Decimal]]


def validate_date_range(
        start_date: date,
        end_date: date,
        max_days: int | None = None,
) -> None:
    """
    Raises:
        InvalidRangeError: end before start, or range longer than ``max_days``
    """
    if end_date < start_date:
        raise InvalidRangeError(
            f"End date {end_date.isoformat()} must not be before start date {start_date.isoformat()}",
            field="end_date",
        )
    if max_days is not None:
        days = calendar_days_inclusive(start_date, end_date)
        if days > max_days:
            raise InvalidRangeError(
                f"Date range of {days} days exceeds the maximum of {max_days} days",
                field="end_date",
            )


class SeriesCollector:
    """
    Range collection over a BaseConverter.

    Attributes:
        converter: Per-date base conversion
        executor: Shared worker pool for per-date fetches
        timeout: Seconds allowed for one collection stage (None = unbounded)
    """

    def __init__(
            self,
            converter: BaseConverter,
            executor: Executor,
            timeout: float | None = None,
            max_range_days: int | None = None,
    ) -> None:
        self.converter = converter
        self.executor = executor
        self.timeout = timeout
        self.max_range_days = max_range_days

    # =========================================================================
    # TIMESERIES MODE
    # =========================================================================

    def collect_timeseries(
            self,
            start_date: date,
            end_date: date,
            base: str = BASE_CURRENCY,
            symbols: Iterable[str] | str | None = None,
    ) -> Timeseries:
        """
        Rates against ``base`` for every archive date in [start_date, end_date].

        Returns:
            Ascending {date: rates}; dates without usable data are omitted
        """
        validate_date_range(start_date, end_date, self.max_range_days)
        base = normalize_currency(base)
        codes = normalize_symbols(symbols)

        dates = list(iter_calendar_days(start_date, end_date))
        fetch = partial(self._fetch_date, base=base, symbols=codes)
        results = run_parallel(
            self.executor, fetch, dates, timeout=self.timeout, stage="collect_timeseries"
        )

        timeseries = {d: rates for d, rates in zip(dates, results) if rates}
        logger.debug(
            f"Collected {len(timeseries)} of {len(dates)} dates "
            f"({start_date} to {end_date}, base={base})"
        )
        return timeseries

    def collect_dates_with_data(
            self,
            start_date: date,
            end_date: date,
            base: str = BASE_CURRENCY,
            symbols: Iterable[str] | str | None = None,
    ) -> list[date]:
        """Ascending dates in the range that yield a non-empty rate map."""
        return list(self.collect_timeseries(start_date, end_date, base, symbols))

    def _fetch_date(
            self,
            rate_date: date,
            base: str,
            symbols: frozenset[str] | None,
    ) -> dict[str, Decimal] | None:
        try:
            return self.converter.get_rates_for_date(rate_date, base, symbols)
        except RateNotFoundError as e:
            logger.debug(f"Skipping {rate_date}: {e}")
            return None

    # =========================================================================
    # SINGLE-SERIES MODE
    # =========================================================================

    def collect_price_series(
            self,
            currency: str,
            start_date: date,
            end_date: date,
            base: str = BASE_CURRENCY,
    ) -> PriceSeries:
        """Prices of one currency against ``base`` over the range."""
        currency = normalize_currency(currency)
        timeseries = self.collect_timeseries(start_date, end_date, base, [currency])
        return series_for_currency(currency, timeseries)


# =============================================================================
# SERIES EXTRACTION
# =============================================================================

def series_for_currency(currency: str, timeseries: Mapping[date, Mapping[str, Decimal]]) -> PriceSeries:
    """
    Extract one currency from an already collected timeseries.

    Dates on which the currency is missing are skipped, not filled.
    """
    dates: list[date] = []
    prices: list[Decimal] = []
    for rate_date in sorted(timeseries):
        rate = timeseries[rate_date].get(currency)
        if rate is not None:
            dates.append(rate_date)
            prices.append(rate)
    return PriceSeries(currency=currency, dates=tuple(dates), prices=tuple(prices))


def currencies_in(timeseries: Mapping[date, Mapping[str, Decimal]]) -> list[str]:
    """Sorted union of every currency code appearing in the timeseries."""
    codes: set[str] = set()
    for rates in timeseries.values():
        codes.update(rates)
    return sorted(codes)
