# backend/tests/services/analytics/test_returns.py
"""
Unit tests for return calculations.

These tests verify the pure calculation logic with known values that can
be verified by hand.

Test Coverage:
- calculate_simple_returns / calculate_log_returns: n-1 outputs, zero handling
- build_return_series: dating of returns
- calculate_cumulative_return: geometric compounding
- annualize_return: edge cases (no periods, total loss, overflow)
"""

import math
from datetime import date
from decimal import Decimal

import pytest

from currency_archive.services.analytics.returns import (
    annualize_return,
    build_return_series,
    calculate_cumulative_return,
    calculate_log_returns,
    calculate_simple_returns,
)
from currency_archive.services.analytics.types import PriceSeries

SCENARIO_PRICES = [Decimal("1.00"), Decimal("1.02"), Decimal("1.01"), Decimal("1.05")]


# =============================================================================
# DAILY RETURNS
# =============================================================================

class TestSimpleReturns:
    """Tests for calculate_simple_returns."""

    def test_scenario_values(self):
        returns = calculate_simple_returns(SCENARIO_PRICES)

        assert len(returns) == 3
        assert returns[0] == pytest.approx(0.02)
        assert returns[1] == pytest.approx(-0.00980392, abs=1e-8)
        assert returns[2] == pytest.approx(0.03960396, abs=1e-8)

    @pytest.mark.parametrize("n", [2, 5, 30])
    def test_length_is_n_minus_one(self, n):
        prices = [1.0 + i * 0.01 for i in range(n)]
        assert len(calculate_simple_returns(prices)) == n - 1

    def test_fewer_than_two_prices(self):
        assert calculate_simple_returns([]) == []
        assert calculate_simple_returns([1.0]) == []

    def test_zero_previous_price_gives_zero_return(self):
        assert calculate_simple_returns([0.0, 1.0, 2.0]) == [0.0, 1.0]


class TestLogReturns:
    """Tests for calculate_log_returns."""

    def test_values(self):
        returns = calculate_log_returns([1.0, 2.0])
        assert returns == [pytest.approx(math.log(2.0))]

    def test_non_positive_price_gives_zero(self):
        assert calculate_log_returns([1.0, 0.0, 1.0]) == [0.0, 0.0]


class TestBuildReturnSeries:
    """Tests for build_return_series."""

    def test_dated_by_closing_price(self):
        dates = (date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4))
        series = PriceSeries("USD", dates, (Decimal("1.0"), Decimal("1.1"), Decimal("1.2")))

        returns = build_return_series(series)

        assert returns.currency == "USD"
        assert returns.dates == dates[1:]
        assert len(returns) == 2

    def test_single_price_gives_empty_series(self):
        series = PriceSeries("USD", (date(2024, 1, 2),), (Decimal("1.0"),))
        assert len(build_return_series(series)) == 0


# =============================================================================
# COMPOUNDED RETURNS
# =============================================================================

class TestCumulativeReturn:
    """Tests for calculate_cumulative_return."""

    def test_equals_last_over_first(self):
        """Geometric compounding telescopes to P_last / P_first - 1."""
        returns = calculate_simple_returns(SCENARIO_PRICES)
        assert calculate_cumulative_return(returns) == pytest.approx(0.05)

    def test_not_arithmetic_sum(self):
        # +10% then -10% loses 1%, the sum would say 0
        assert calculate_cumulative_return([0.1, -0.1]) == pytest.approx(-0.01)

    def test_empty_is_zero(self):
        assert calculate_cumulative_return([]) == 0.0

    @pytest.mark.parametrize("r, n", [(0.01, 10), (0.05, 20), (-0.02, 15)])
    def test_constant_return_compounds(self, r, n):
        cumulative = calculate_cumulative_return([r] * n)

        assert cumulative == pytest.approx((1 + r) ** n - 1)
        assert cumulative != pytest.approx(n * r)


class TestAnnualizeReturn:
    """Tests for annualize_return."""

    def test_one_year_of_returns_is_unchanged(self):
        assert annualize_return(0.10, 252) == pytest.approx(0.10)

    def test_half_year_compounds(self):
        assert annualize_return(0.10, 126) == pytest.approx(0.21)

    def test_zero_periods(self):
        assert annualize_return(0.5, 0) == 0.0

    def test_total_loss(self):
        assert annualize_return(-1.0, 10) == -1.0

    def test_overflow_is_infinite(self):
        assert annualize_return(1e10, 1) == math.inf
