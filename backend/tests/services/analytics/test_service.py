# backend/tests/services/analytics/test_service.py
"""
Integration tests for FinancialAnalyticsService over the sample archive.

These tests exercise the full pipeline: collection on the pool, per-currency
records on the pool, then the correlation pass.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest

from currency_archive.services.analytics.service import FinancialAnalyticsService
from currency_archive.services.exceptions import (
    AnalyticsTimeoutError,
    InsufficientDataError,
    InvalidRangeError,
)
from currency_archive.services.rate_archive import RateArchive

TUE = date(2024, 1, 2)
WED = date(2024, 1, 3)
FRI = date(2024, 1, 5)
SAT = date(2024, 1, 6)
SUN = date(2024, 1, 7)
MON = date(2024, 1, 8)


# =============================================================================
# ROLLING METRICS
# =============================================================================

class TestRollingMetrics:

    def test_window_count(self, analytics_service):
        result = analytics_service.get_rolling_metrics("EUR", ["USD"], TUE, MON, 2)

        # 5 dates with data → 4 windows of 2
        assert result.window_size == 2
        assert len(result.windows) == 4
        assert result.windows[0].window_start == TUE
        assert result.windows[-1].window_end == MON

    def test_window_spanning_weekend(self, analytics_service):
        result = analytics_service.get_rolling_metrics("EUR", ["USD"], TUE, MON, 2)

        last = result.windows[-1]
        assert last.window_start == FRI
        assert last.window_end == MON
        # USD 1.15 and 1.14
        assert last.rates["USD"].average == Decimal("1.145000")

    def test_rebased_windows(self, analytics_service):
        result = analytics_service.get_rolling_metrics("gbp", ["USD"], TUE, TUE, 1)

        assert result.base == "GBP"
        assert result.windows[0].rates["USD"].average == Decimal("1.294118")

    def test_insufficient_dates(self, analytics_service):
        with pytest.raises(InsufficientDataError) as exc_info:
            analytics_service.get_rolling_metrics("EUR", None, TUE, MON, 6)

        assert exc_info.value.found == 5
        assert exc_info.value.required == 6

    def test_window_longer_than_range(self, analytics_service):
        with pytest.raises(InvalidRangeError):
            analytics_service.get_rolling_metrics("EUR", None, TUE, FRI, 5)

    def test_end_before_start(self, analytics_service):
        with pytest.raises(InvalidRangeError):
            analytics_service.get_rolling_metrics("EUR", None, MON, TUE, 1)


# =============================================================================
# FINANCIAL METRICS
# =============================================================================

class TestFinancialMetrics:

    def test_sorted_by_currency(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", None, TUE, MON)

        assert result.currencies == ["EUR", "GBP", "JPY", "USD"]

    def test_symbol_filter(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", "usd,gbp", TUE, MON)

        assert result.currencies == ["GBP", "USD"]

    def test_record_values(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", ["USD"], TUE, MON)
        usd = result.metrics[0]

        assert usd.data_points == 5
        assert usd.open_rate == Decimal("1.100000")
        assert usd.close_rate == Decimal("1.140000")
        assert usd.min_rate == Decimal("1.100000")
        assert usd.max_rate == Decimal("1.150000")

    def test_correlations_symmetric_for_aligned_currencies(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", ["USD", "GBP"], TUE, MON)
        by_code = {m.currency: m for m in result.metrics}

        assert by_code["USD"].correlations["GBP"] == by_code["GBP"].correlations["USD"]

    def test_currency_missing_a_day_not_correlated(self, analytics_service):
        # JPY is absent on MON, so its return dates differ from USD's
        result = analytics_service.get_financial_metrics("EUR", ["USD", "JPY"], TUE, MON)
        by_code = {m.currency: m for m in result.metrics}

        assert by_code["JPY"].data_points == 4
        assert by_code["JPY"].correlations is None
        assert by_code["USD"].correlations is None

    def test_single_price_currency_skipped(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", None, MON, MON)

        assert result.metrics == []

    def test_weekend_range_is_empty(self, analytics_service):
        result = analytics_service.get_financial_metrics("EUR", None, SAT, SUN)

        assert result.metrics == []
        assert result.currencies == []

    def test_base_currency_record_is_flat(self, analytics_service):
        result = analytics_service.get_financial_metrics("USD", ["USD"], TUE, MON)
        usd = result.metrics[0]

        assert usd.average_rate == Decimal("1.000000")
        assert usd.annualized_volatility == Decimal("0")
        assert usd.max_drawdown == Decimal("0")

    def test_max_range_enforced(self, archive, executor):
        service = FinancialAnalyticsService(archive, executor, max_range_days=3)

        with pytest.raises(InvalidRangeError):
            service.get_financial_metrics("EUR", None, TUE, MON)


    def test_extreme_move_does_not_sink_batch(self, executor):
        """1.3^252 overflows Decimal precision once scaled to a percent."""
        archive = RateArchive.from_mapping({
            TUE: {"USD": Decimal("1.10"), "XAU": Decimal("1.0")},
            WED: {"USD": Decimal("1.12"), "XAU": Decimal("1.3")},
        })
        service = FinancialAnalyticsService(archive, executor)

        result = service.get_financial_metrics("EUR", ["USD", "XAU"], TUE, WED)
        by_code = {m.currency: m for m in result.metrics}

        assert result.currencies == ["USD", "XAU"]
        assert by_code["USD"].close_rate == Decimal("1.120000")
        assert by_code["XAU"].cumulative_return == Decimal("30.0000")
        assert by_code["XAU"].annualized_return == Decimal("0.0000")


class TestTimeout:

    def test_stage_timeout_raises(self, archive):
        """A pool with no free worker cannot finish the stage in time."""
        release = threading.Event()
        pool = ThreadPoolExecutor(max_workers=1)
        pool.submit(release.wait, 5)
        try:
            service = FinancialAnalyticsService(archive, pool, timeout=0.05)
            with pytest.raises(AnalyticsTimeoutError) as exc_info:
                service.get_financial_metrics("EUR", None, TUE, MON)
            assert exc_info.value.stage == "collect_timeseries"
        finally:
            release.set()
            pool.shutdown(wait=True, cancel_futures=True)
