# backend/tests/services/test_historical_rates_service.py
"""
Tests for HistoricalRatesService.

Test Coverage:
- get_historical_rates: rebasing, filters, missing date
- get_timeseries: ascending dates, empty ranges
- get_fluctuation: change arithmetic, endpoint rules, intersection
- get_rate_history: raw EUR-quoted values
"""

from datetime import date
from decimal import Decimal

import pytest

from currency_archive.services.exceptions import InvalidRangeError, RateNotFoundError
from currency_archive.services.historical_rates_service import (
    HistoricalRatesService,
    calculate_fluctuations,
)

TUE = date(2024, 1, 2)
WED = date(2024, 1, 3)
FRI = date(2024, 1, 5)
SAT = date(2024, 1, 6)
SUN = date(2024, 1, 7)
MON = date(2024, 1, 8)


# =============================================================================
# SINGLE DATE
# =============================================================================

class TestHistoricalRates:

    def test_eur_base(self, historical_service):
        result = historical_service.get_historical_rates(TUE)

        assert result.base == "EUR"
        assert result.rates["USD"] == Decimal("1.100000")
        assert result.rates["EUR"] == Decimal("1.000000")

    def test_gbp_base_filtered(self, historical_service):
        result = historical_service.get_historical_rates(TUE, "gbp", ["USD"])

        assert result.base == "GBP"
        assert result.rates == {"USD": Decimal("1.294118")}

    def test_weekend_date(self, historical_service):
        with pytest.raises(RateNotFoundError) as exc_info:
            historical_service.get_historical_rates(SAT)

        assert exc_info.value.rate_date == SAT


# =============================================================================
# TIMESERIES
# =============================================================================

class TestTimeseries:

    def test_dates_ascending(self, historical_service):
        result = historical_service.get_timeseries("EUR", ["USD"], TUE, MON)

        dates = list(result.rates)
        assert dates == sorted(dates)
        assert len(dates) == 5
        assert result.rates[MON] == {"USD": Decimal("1.140000")}

    def test_weekend_range_is_empty(self, historical_service):
        result = historical_service.get_timeseries("EUR", None, SAT, SUN)

        assert result.rates == {}
        assert result.start_date == SAT

    def test_reversed_range(self, historical_service):
        with pytest.raises(InvalidRangeError):
            historical_service.get_timeseries("EUR", None, MON, TUE)


# =============================================================================
# FLUCTUATION
# =============================================================================

class TestFluctuation:

    def test_change_values(self, historical_service):
        result = historical_service.get_fluctuation("EUR", ["USD"], TUE, FRI)
        usd = result.rates["USD"]

        assert usd.start_rate == Decimal("1.100000")
        assert usd.end_rate == Decimal("1.150000")
        assert usd.change == Decimal("0.050000")
        # 0.05 / 1.10 = 4.5454...%
        assert usd.change_pct == Decimal("4.5455")

    def test_only_currencies_on_both_dates(self, historical_service):
        result = historical_service.get_fluctuation("EUR", None, TUE, MON)

        assert "JPY" not in result.rates
        assert set(result.rates) == {"EUR", "GBP", "USD"}

    def test_weekend_endpoint(self, historical_service):
        with pytest.raises(RateNotFoundError):
            historical_service.get_fluctuation("EUR", None, TUE, SAT)

    def test_same_date_has_no_change(self, historical_service):
        result = historical_service.get_fluctuation("EUR", ["GBP"], WED, WED)

        assert result.rates["GBP"].change == Decimal("0.000000")
        assert result.rates["GBP"].change_pct == Decimal("0.0000")

    def test_zero_start_rate_gives_zero_percent(self):
        result = calculate_fluctuations({"XXX": Decimal("0")}, {"XXX": Decimal("1")})

        assert result["XXX"].change == Decimal("1.000000")
        assert result["XXX"].change_pct == Decimal("0.0000")


# =============================================================================
# RATE HISTORY
# =============================================================================

class TestRateHistory:

    def test_raw_values(self, historical_service):
        result = historical_service.get_rate_history("usd", TUE, MON)

        assert result.currency == "USD"
        assert len(result.rates) == 5
        assert result.rates[TUE] == Decimal("1.10")

    def test_missing_days_omitted(self, historical_service):
        result = historical_service.get_rate_history("JPY", FRI, MON)

        assert list(result.rates) == [FRI]

    def test_unknown_currency_is_empty(self, historical_service):
        assert historical_service.get_rate_history("XYZ", TUE, MON).rates == {}

    def test_max_range_days(self, archive, executor):
        service = HistoricalRatesService(archive, executor, max_range_days=2)

        with pytest.raises(InvalidRangeError):
            service.get_rate_history("USD", TUE, MON)
