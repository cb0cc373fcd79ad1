# backend/currency_archive/services/conversion_service.py
"""
Amount conversion and archive catalogue queries.

=============================================================================
CONVERSION FORMULA
=============================================================================

With EUR-quoted rates r_from and r_to on the same date:

    result = (amount / r_from) × r_to
    rate   = r_to / r_from

EUR on either side uses its implicit rate of 1; converting a currency to
itself returns the amount unchanged without touching the archive.

=============================================================================

Usage:
    service = CurrencyConversionService(archive)
    result = service.convert("USD", "GBP", date(2024, 1, 2), Decimal("100"))
    result.result    # amount in GBP
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from currency_archive.services.base_converter import normalize_currency
from currency_archive.services.constants import (
    BASE_CURRENCY,
    ONE,
    PRICE_PRECISION,
    ZERO,
)
from currency_archive.services.exceptions import (
    ArchiveNotReadyError,
    InvalidAmountError,
    RateNotFoundError,
)
from currency_archive.services.protocols import RateArchiveProtocol
from currency_archive.services.rounding import round_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass
class ConversionResult:
    """
    Result of converting an amount between two currencies on one date.

    Attributes:
        rate: Units of ``to_currency`` per unit of ``from_currency`` (6 places)
        result: Converted amount (6 places)
    """
    from_currency: str
    to_currency: str
    date: date
    amount: Decimal
    rate: Decimal
    result: Decimal


@dataclass
class DatasetInfo:
    """Summary of the loaded archive."""
    is_loaded: bool
    total_dates: int
    start_date: date | None = None
    end_date: date | None = None
    currencies: list[str] = field(default_factory=list)


# =============================================================================
# SERVICE
# =============================================================================

class CurrencyConversionService:
    """
    Conversions and catalogue lookups over the archive.

    Attributes:
        _archive: EUR-quoted rate archive
    """

    def __init__(self, archive: RateArchiveProtocol) -> None:
        self._archive = archive

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def get_exchange_rate(self, from_currency: str, to_currency: str, rate_date: date) -> Decimal:
        """
        Units of ``to_currency`` per unit of ``from_currency`` (unrounded).

        Raises:
            RateNotFoundError: Either currency has no usable rate on the date
        """
        from_code = normalize_currency(from_currency)
        to_code = normalize_currency(to_currency)

        if from_code == to_code:
            return ONE

        from_rate = self._eur_rate(rate_date, from_code)
        to_rate = self._eur_rate(rate_date, to_code)
        if from_rate == ZERO:
            raise RateNotFoundError(rate_date, from_code)

        return to_rate / from_rate

    def convert(
            self,
            from_currency: str,
            to_currency: str,
            rate_date: date,
            amount: Decimal,
    ) -> ConversionResult:
        """
        Convert ``amount`` on ``rate_date``.

        Raises:
            InvalidAmountError: amount is negative
            RateNotFoundError: Either currency has no usable rate on the date
        """
        if amount < ZERO:
            raise InvalidAmountError(amount)

        from_code = normalize_currency(from_currency)
        to_code = normalize_currency(to_currency)

        if from_code == to_code:
            return ConversionResult(
                from_currency=from_code,
                to_currency=to_code,
                date=rate_date,
                amount=amount,
                rate=round_decimal(ONE, PRICE_PRECISION),
                result=amount,
            )

        from_rate = self._eur_rate(rate_date, from_code)
        to_rate = self._eur_rate(rate_date, to_code)
        if from_rate == ZERO:
            raise RateNotFoundError(rate_date, from_code)

        converted = amount / from_rate * to_rate
        logger.debug(f"Converted {amount} {from_code} -> {converted} {to_code} on {rate_date}")

        return ConversionResult(
            from_currency=from_code,
            to_currency=to_code,
            date=rate_date,
            amount=amount,
            rate=round_decimal(to_rate / from_rate, PRICE_PRECISION),
            result=round_decimal(converted, PRICE_PRECISION),
        )

    # =========================================================================
    # CATALOGUE
    # =========================================================================

    def get_available_currencies(self, rate_date: date | None = None) -> list[str]:
        """
        Sorted currency codes.

        With a date: codes present on that date (empty if the date is absent).
        Without: union of the codes on the first and last archive dates.
        """
        if rate_date is not None:
            return self._archive.get_available_currencies(rate_date)

        date_range = self._archive.get_date_range()
        if date_range is None:
            return []

        codes: set[str] = set()
        for sample_date in date_range:
            codes.update(self._archive.get_available_currencies(sample_date))
        return sorted(codes)

    def is_currency_available(self, currency: str, rate_date: date) -> bool:
        return self._archive.get_rate(rate_date, normalize_currency(currency)) is not None

    def get_dataset_info(self) -> DatasetInfo:
        """
        Raises:
            ArchiveNotReadyError: The archive holds no dates
        """
        if not self._archive.is_loaded:
            raise ArchiveNotReadyError()

        date_range = self._archive.get_date_range()
        start_date, end_date = date_range if date_range else (None, None)
        return DatasetInfo(
            is_loaded=True,
            total_dates=self._archive.total_dates,
            start_date=start_date,
            end_date=end_date,
            currencies=self.get_available_currencies(),
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _eur_rate(self, rate_date: date, code: str) -> Decimal:
        if code == BASE_CURRENCY:
            return ONE
        rate = self._archive.get_rate(rate_date, code)
        if rate is None:
            raise RateNotFoundError(rate_date, code)
        return rate
