# backend/tests/services/test_base_converter.py
"""
Tests for per-date base conversion.

Test Coverage:
- normalize_currency / normalize_symbols
- BaseConverter.get_rates_for_date: EUR base, cross rates, filters, errors
"""

from datetime import date
from decimal import Decimal

import pytest

from currency_archive.services.base_converter import (
    BaseConverter,
    normalize_currency,
    normalize_symbols,
)
from currency_archive.services.exceptions import RateNotFoundError
from currency_archive.services.rate_archive import RateArchive

TUE = date(2024, 1, 2)


class TestNormalization:

    def test_currency_upper_cased(self):
        assert normalize_currency(" gbp ") == "GBP"

    def test_blank_currency_defaults_to_eur(self):
        assert normalize_currency("") == "EUR"
        assert normalize_currency(None) == "EUR"

    def test_symbols_from_string(self):
        assert normalize_symbols(" usd,GBP,usd,, ") == frozenset({"USD", "GBP"})

    def test_symbols_from_list(self):
        assert normalize_symbols(["jpy", "Usd"]) == frozenset({"JPY", "USD"})

    def test_empty_symbols_mean_all(self):
        assert normalize_symbols(None) is None
        assert normalize_symbols("") is None
        assert normalize_symbols([" "]) is None


class TestBaseConverter:

    def test_eur_base_returns_archive_rates(self, archive):
        rates = BaseConverter(archive).get_rates_for_date(TUE)

        assert rates["USD"] == Decimal("1.100000")
        assert rates["EUR"] == Decimal("1.000000")

    def test_cross_rate(self, archive):
        """USD 1.10 / GBP 0.85 against GBP."""
        rates = BaseConverter(archive).get_rates_for_date(TUE, "GBP")

        assert rates["USD"] == Decimal("1.294118")
        assert rates["GBP"] == Decimal("1.000000")
        assert rates["EUR"] == Decimal("1.176471")

    def test_filter_excludes_base_unless_requested(self, archive):
        converter = BaseConverter(archive)

        assert set(converter.get_rates_for_date(TUE, "GBP", ["USD"])) == {"USD"}
        assert set(converter.get_rates_for_date(TUE, "GBP", ["USD", "GBP"])) == {"USD", "GBP"}

    def test_unknown_symbols_yield_empty_map(self, archive):
        assert BaseConverter(archive).get_rates_for_date(TUE, "EUR", ["XYZ"]) == {}

    def test_rates_rounded_to_six_places(self, archive):
        rates = BaseConverter(archive).get_rates_for_date(TUE, "JPY")
        assert all(r.as_tuple().exponent == -6 for r in rates.values())

    def test_missing_date(self, archive):
        with pytest.raises(RateNotFoundError) as exc_info:
            BaseConverter(archive).get_rates_for_date(date(2024, 1, 6))

        assert exc_info.value.currency is None

    def test_missing_base(self, archive):
        with pytest.raises(RateNotFoundError) as exc_info:
            BaseConverter(archive).get_rates_for_date(date(2024, 1, 8), "JPY")

        assert exc_info.value.currency == "JPY"

    def test_zero_base_rate(self):
        archive = RateArchive.from_mapping({TUE: {"USD": "1.1", "XXX": "0"}})

        with pytest.raises(RateNotFoundError):
            BaseConverter(archive).get_rates_for_date(TUE, "XXX")

    @pytest.mark.parametrize("base", ["GBP", "USD", "JPY"])
    def test_rebasing_round_trip(self, archive, base):
        """r_c / r_EUR under any base recovers the EUR-quoted rate."""
        converter = BaseConverter(archive)
        eur_rates = converter.get_rates_for_date(TUE)
        rebased = converter.get_rates_for_date(TUE, base)

        assert set(rebased) == set(eur_rates)
        for code, rate in rebased.items():
            recovered = rate / rebased["EUR"]
            # both legs are rounded to 6 places, so the error is relative
            assert float(recovered) == pytest.approx(float(eur_rates[code]), rel=1e-6)
