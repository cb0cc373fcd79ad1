# backend/currency_archive/services/analytics/service.py
"""
Financial analytics orchestrator.

Entry point for the two analytics operations:

    get_rolling_metrics    - date-sliding window statistics per currency
    get_financial_metrics  - full metrics record per currency + correlations

Architecture:
    FinancialAnalyticsService
        ├── uses → SeriesCollector (per-date fetches on the shared pool)
        ├── uses → MetricsAssembler (per-currency record, on the shared pool)
        ├── uses → RollingWindowCalculator (per-window stats, on the shared pool)
        └── uses → add_correlations (sequential pass after all records exist)

Stage ordering (financial metrics):

    1. collect timeseries        ── parallel per date ──┐ barrier
    2. build per-currency record ── parallel per code ──┐ barrier
    3. correlations              ── sequential
    4. sort by currency code

Stages never nest pool submissions. Each stage is bounded by the
configured timeout; on expiry pending work is cancelled and
AnalyticsTimeoutError is raised.

Usage:
    service = FinancialAnalyticsService(archive, executor)
    result = service.get_financial_metrics("EUR", ["USD", "GBP"], start, end)
"""

import logging
from collections.abc import Iterable
from concurrent.futures import Executor
from datetime import date

from currency_archive.services.analytics.correlation import add_correlations
from currency_archive.services.analytics.metrics import MetricsAssembler
from currency_archive.services.analytics.rolling import RollingWindowCalculator
from currency_archive.services.analytics.types import (
    AnalyticsConfig,
    CurrencyMetrics,
    FinancialMetricsResult,
    ReturnSeries,
    RollingMetricsResult,
)
from currency_archive.services.base_converter import BaseConverter, normalize_currency
from currency_archive.services.concurrency import run_parallel
from currency_archive.services.exceptions import InsufficientDataError
from currency_archive.services.protocols import RateAccessProtocol
from currency_archive.services.series_collector import (
    SeriesCollector,
    currencies_in,
    series_for_currency,
    validate_date_range,
)

logger = logging.getLogger(__name__)


class FinancialAnalyticsService:
    """
    Orchestrates range analytics over the rate archive.

    Attributes:
        collector: Range collection through the BaseConverter
        assembler: Per-currency metrics
        rolling_calculator: Date-sliding windows
    """

    def __init__(
            self,
            rate_access: RateAccessProtocol,
            executor: Executor,
            config: AnalyticsConfig | None = None,
            timeout: float | None = None,
            max_range_days: int | None = None,
    ) -> None:
        """
        Args:
            rate_access: EUR-quoted archive
            executor: Shared worker pool (owned by the caller)
            config: Analytics conventions; defaults from constants
            timeout: Seconds allowed per stage (None = unbounded)
            max_range_days: Largest accepted calendar range
        """
        self._executor = executor
        self._timeout = timeout
        self._max_range_days = max_range_days
        self.collector = SeriesCollector(
            BaseConverter(rate_access), executor, timeout=timeout, max_range_days=max_range_days
        )
        self.assembler = MetricsAssembler(config)
        self.rolling_calculator = RollingWindowCalculator(executor, timeout=timeout)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_rolling_metrics(
            self,
            base: str,
            symbols: Iterable[str] | str | None,
            start_date: date,
            end_date: date,
            window_size: int,
    ) -> RollingMetricsResult:
        """
        Date-sliding window statistics.

        Raises:
            InvalidRangeError: Bad range or window size
            InsufficientDataError: Fewer dates with data than ``window_size``
            AnalyticsTimeoutError: A stage exceeded the timeout
        """
        self.rolling_calculator.validate_window_parameters(start_date, end_date, window_size)
        base = normalize_currency(base)

        timeseries = self.collector.collect_timeseries(start_date, end_date, base, symbols)
        if len(timeseries) < window_size:
            raise InsufficientDataError(found=len(timeseries), required=window_size)

        windows = self.rolling_calculator.calculate_windows(timeseries, window_size)

        logger.info(
            f"Rolling metrics computed: {len(windows)} windows of {window_size} "
            f"({start_date} to {end_date}, base={base})"
        )
        return RollingMetricsResult(
            start_date=start_date,
            end_date=end_date,
            base=base,
            window_size=window_size,
            windows=windows,
        )

    def get_financial_metrics(
            self,
            base: str,
            symbols: Iterable[str] | str | None,
            start_date: date,
            end_date: date,
    ) -> FinancialMetricsResult:
        """
        Full metrics record for every currency with at least 2 prices.

        An empty range (no dates with data) yields an empty result, not an
        error.

        Raises:
            InvalidRangeError: end before start, or range too long
            AnalyticsTimeoutError: A stage exceeded the timeout
        """
        validate_date_range(start_date, end_date, self._max_range_days)
        base = normalize_currency(base)

        timeseries = self.collector.collect_timeseries(start_date, end_date, base, symbols)
        result = FinancialMetricsResult(start_date=start_date, end_date=end_date, base=base)

        if not timeseries:
            logger.info(f"No rates between {start_date} and {end_date}, returning empty metrics")
            return result

        series_list = [series_for_currency(code, timeseries) for code in currencies_in(timeseries)]

        # Phase 1: independent per-currency records
        built = run_parallel(
            self._executor, self.assembler.build, series_list,
            timeout=self._timeout, stage="currency_metrics",
        )

        metrics: dict[str, CurrencyMetrics] = {}
        returns: dict[str, ReturnSeries] = {}
        for item in built:
            if item is None:
                continue
            record, return_series = item
            metrics[record.currency] = record
            returns[record.currency] = return_series

        # Phase 2: cross-currency pass, only after every record exists
        add_correlations(metrics, returns)

        result.metrics = [metrics[code] for code in sorted(metrics)]
        logger.info(
            f"Financial metrics computed for {len(result.metrics)} currencies "
            f"over {len(timeseries)} dates (base={base})"
        )
        return result
