# backend/currency_archive/services/historical_rates_service.py
"""
Historical rate lookups against any base currency.

Operations:
    get_historical_rates - one date, rebased and filtered
    get_timeseries       - every date with data in a range
    get_fluctuation      - start vs end of a range, per currency
    get_rate_history     - raw EUR-quoted history of one currency

Design Principles:
- No HTTP Knowledge: raises domain exceptions, not HTTPException
- Financial Precision: Decimal end to end, rounded once at 6 places
- Missing days (weekends, holidays) are skipped in ranges, but an explicitly
  requested date that is absent is a RateNotFoundError

Usage:
    service = HistoricalRatesService(archive, executor)
    result = service.get_historical_rates(date(2024, 1, 2), "GBP", ["USD"])
    result.rates["USD"]   # Decimal("1.294118")
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from currency_archive.services.base_converter import (
    BaseConverter,
    normalize_currency,
    normalize_symbols,
)
from currency_archive.services.constants import (
    BASE_CURRENCY,
    HUNDRED,
    PERCENTAGE_PRECISION,
    PRICE_PRECISION,
    ZERO,
)
from currency_archive.services.protocols import RateAccessProtocol
from currency_archive.services.rounding import round_decimal
from currency_archive.services.series_collector import SeriesCollector, validate_date_range
from currency_archive.utils.date_utils import iter_calendar_days

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass
class HistoricalRatesResult:
    """Rates for one date against ``base``."""
    date: date
    base: str
    rates: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class TimeseriesResult:
    """Rates for every date with data in [start_date, end_date], ascending."""
    start_date: date
    end_date: date
    base: str
    rates: dict[date, dict[str, Decimal]] = field(default_factory=dict)


@dataclass
class Fluctuation:
    """
    Movement of one currency between two dates.

    Attributes:
        start_rate / end_rate: Rates on the two dates (6 places)
        change: end - start (6 places)
        change_pct: change / start, percent (4 places); 0 when start is 0
    """
    start_rate: Decimal
    end_rate: Decimal
    change: Decimal
    change_pct: Decimal


@dataclass
class FluctuationResult:
    start_date: date
    end_date: date
    base: str
    rates: dict[str, Fluctuation] = field(default_factory=dict)


@dataclass
class RateHistoryResult:
    """Raw EUR-quoted rates of one currency, for dates where it exists."""
    currency: str
    start_date: date
    end_date: date
    rates: dict[date, Decimal] = field(default_factory=dict)


# =============================================================================
# FLUCTUATION CALCULATION
# =============================================================================

def calculate_fluctuations(
        start_rates: dict[str, Decimal],
        end_rates: dict[str, Decimal],
) -> dict[str, Fluctuation]:
    """
    Per-currency change between two rate maps.

    Only currencies present in BOTH maps are reported.
    """
    result: dict[str, Fluctuation] = {}

    for code in sorted(start_rates.keys() & end_rates.keys()):
        start_rate = start_rates[code]
        end_rate = end_rates[code]
        change = end_rate - start_rate
        change_pct = change / start_rate * HUNDRED if start_rate != ZERO else ZERO

        result[code] = Fluctuation(
            start_rate=round_decimal(start_rate, PRICE_PRECISION),
            end_rate=round_decimal(end_rate, PRICE_PRECISION),
            change=round_decimal(change, PRICE_PRECISION),
            change_pct=round_decimal(change_pct, PERCENTAGE_PRECISION),
        )

    return result


# =============================================================================
# SERVICE
# =============================================================================

class HistoricalRatesService:
    """
    Rate lookups over the archive.

    Attributes:
        converter: Per-date base conversion
        collector: Range collection on the shared pool
    """

    def __init__(
            self,
            rate_access: RateAccessProtocol,
            executor: Executor,
            timeout: float | None = None,
            max_range_days: int | None = None,
    ) -> None:
        self._rates = rate_access
        self._max_range_days = max_range_days
        self.converter = BaseConverter(rate_access)
        self.collector = SeriesCollector(
            self.converter, executor, timeout=timeout, max_range_days=max_range_days
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_historical_rates(
            self,
            rate_date: date,
            base: str = BASE_CURRENCY,
            symbols: Iterable[str] | str | None = None,
    ) -> HistoricalRatesResult:
        """
        Raises:
            RateNotFoundError: Date absent, or base has no rate that day
        """
        base = normalize_currency(base)
        rates = self.converter.get_rates_for_date(rate_date, base, symbols)
        return HistoricalRatesResult(date=rate_date, base=base, rates=rates)

    def get_timeseries(
            self,
            base: str,
            symbols: Iterable[str] | str | None,
            start_date: date,
            end_date: date,
    ) -> TimeseriesResult:
        """
        Rates for every date with data in the range.

        A range containing no archive dates returns an empty result.

        Raises:
            InvalidRangeError: end before start, or range too long
        """
        base = normalize_currency(base)
        rates = self.collector.collect_timeseries(start_date, end_date, base, symbols)
        logger.debug(f"Timeseries {start_date} to {end_date} (base={base}): {len(rates)} dates")
        return TimeseriesResult(start_date=start_date, end_date=end_date, base=base, rates=rates)

    def get_fluctuation(
            self,
            base: str,
            symbols: Iterable[str] | str | None,
            start_date: date,
            end_date: date,
    ) -> FluctuationResult:
        """
        Change of every currency between exactly ``start_date`` and ``end_date``.

        Raises:
            InvalidRangeError: end before start
            RateNotFoundError: Either endpoint date is absent, or the base
                has no rate on it
        """
        validate_date_range(start_date, end_date, self._max_range_days)
        base = normalize_currency(base)
        codes = normalize_symbols(symbols)

        start_rates = self.converter.get_rates_for_date(start_date, base, codes)
        end_rates = self.converter.get_rates_for_date(end_date, base, codes)

        return FluctuationResult(
            start_date=start_date,
            end_date=end_date,
            base=base,
            rates=calculate_fluctuations(start_rates, end_rates),
        )

    def get_rate_history(
            self,
            currency: str,
            start_date: date,
            end_date: date,
    ) -> RateHistoryResult:
        """
        EUR-quoted history of one currency (no rebasing, no rounding).

        Raises:
            InvalidRangeError: end before start, or range too long
        """
        validate_date_range(start_date, end_date, self._max_range_days)
        currency = normalize_currency(currency)

        history: dict[date, Decimal] = {}
        for rate_date in iter_calendar_days(start_date, end_date):
            rate = self._rates.get_rate(rate_date, currency)
            if rate is not None:
                history[rate_date] = rate

        return RateHistoryResult(
            currency=currency, start_date=start_date, end_date=end_date, rates=history
        )
