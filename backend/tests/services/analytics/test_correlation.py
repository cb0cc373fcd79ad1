# backend/tests/services/analytics/test_correlation.py
"""
Unit tests for the cross-currency correlation pass.

Test Coverage:
- calculate_return_correlation: date alignment rule
- add_correlations: symmetry, omission of undefined pairs, rounding
"""

import math
from datetime import date, timedelta
from decimal import Decimal

import pytest

from currency_archive.services.analytics.correlation import (
    add_correlations,
    calculate_return_correlation,
)
from currency_archive.services.analytics.metrics import MetricsAssembler
from currency_archive.services.analytics.types import PriceSeries, ReturnSeries

DATES = tuple(date(2024, 1, 1) + timedelta(days=i) for i in range(6))


def _series(code: str, prices: list[str], dates=DATES) -> PriceSeries:
    return PriceSeries(code, tuple(dates[:len(prices)]), tuple(Decimal(p) for p in prices))


def _build(*series: PriceSeries):
    assembler = MetricsAssembler()
    metrics, returns = {}, {}
    for s in series:
        record, return_series = assembler.build(s)
        metrics[s.currency] = record
        returns[s.currency] = return_series
    return metrics, returns


class TestReturnCorrelation:
    """Tests for calculate_return_correlation."""

    def test_self_correlation(self):
        a = ReturnSeries("USD", DATES[1:4], (0.01, -0.02, 0.015))
        assert calculate_return_correlation(a, a) == pytest.approx(1.0)

    def test_misaligned_dates_is_nan(self):
        a = ReturnSeries("USD", DATES[1:4], (0.01, -0.02, 0.015))
        b = ReturnSeries("GBP", DATES[2:5], (0.01, -0.02, 0.015))
        assert math.isnan(calculate_return_correlation(a, b))


class TestAddCorrelations:
    """Tests for add_correlations."""

    def test_symmetric(self):
        metrics, returns = _build(
            _series("USD", ["1.10", "1.12", "1.11", "1.15", "1.14"]),
            _series("GBP", ["0.85", "0.86", "0.855", "0.87", "0.865"]),
            _series("JPY", ["160", "158", "161", "159", "162"]),
        )

        add_correlations(metrics, returns)

        assert metrics["USD"].correlations["GBP"] == metrics["GBP"].correlations["USD"]
        assert metrics["USD"].correlations["JPY"] == metrics["JPY"].correlations["USD"]
        assert "USD" not in metrics["USD"].correlations

    def test_identical_moves_correlate_perfectly(self):
        metrics, returns = _build(
            _series("AAA", ["1.0", "1.1", "1.0", "1.2"]),
            _series("BBB", ["2.0", "2.2", "2.0", "2.4"]),
        )

        add_correlations(metrics, returns)

        assert metrics["AAA"].correlations == {"BBB": Decimal("1.0000")}

    def test_values_rounded_and_bounded(self):
        metrics, returns = _build(
            _series("USD", ["1.10", "1.12", "1.11", "1.15", "1.14"]),
            _series("GBP", ["0.85", "0.86", "0.855", "0.87", "0.865"]),
        )

        add_correlations(metrics, returns)

        value = metrics["USD"].correlations["GBP"]
        assert value.as_tuple().exponent == -4
        assert Decimal("-1") <= value <= Decimal("1")

    def test_misaligned_pair_omitted(self):
        metrics, returns = _build(
            _series("USD", ["1.10", "1.12", "1.11", "1.15"]),
            _series("JPY", ["160", "161", "159.5", "162"], dates=DATES[1:]),
        )

        add_correlations(metrics, returns)

        assert metrics["USD"].correlations is None
        assert metrics["JPY"].correlations is None

    def test_constant_series_omitted(self):
        metrics, returns = _build(
            _series("EUR", ["1", "1", "1", "1"]),
            _series("USD", ["1.10", "1.12", "1.11", "1.15"]),
        )

        add_correlations(metrics, returns)

        assert metrics["EUR"].correlations is None

    def test_single_currency_untouched(self):
        metrics, returns = _build(_series("USD", ["1.10", "1.12", "1.11"]))

        add_correlations(metrics, returns)

        assert metrics["USD"].correlations is None
