# backend/currency_archive/services/base_converter.py
"""
Re-expresses one date's EUR-quoted rates against any base currency.

=============================================================================
CROSS-RATE FORMULA
=============================================================================

The archive stores "1 EUR = r_c units of c". For base B:

    1 B = r_c / r_B units of c

Example (USD 1.10, GBP 0.85 per EUR), base GBP:

    USD = 1.10 / 0.85 = 1.294118
    GBP = 1 (the base itself)

=============================================================================

Symbol filter:
    - None / empty  → every currency of the date, base included as 1
    - non-empty     → only the listed codes (case-insensitive, deduplicated);
                      the base is included only when listed

Every returned rate is rounded to 6 places; this is a presentation
boundary, so downstream analytics see the same values clients see.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from currency_archive.services.constants import (
    BASE_CURRENCY,
    ONE,
    PRICE_PRECISION,
    ZERO,
)
from currency_archive.services.exceptions import RateNotFoundError
from currency_archive.services.protocols import RateAccessProtocol
from currency_archive.services.rounding import round_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# PURE HELPERS
# =============================================================================

def normalize_currency(code: str | None, default: str = BASE_CURRENCY) -> str:
    """Upper-case and strip a currency code; blank codes become ``default``."""
    if code is None:
        return default
    code = code.strip().upper()
    return code or default


def normalize_symbols(symbols: Iterable[str] | str | None) -> frozenset[str] | None:
    """
    Normalize a symbol filter.

    Accepts an iterable of codes or one comma-separated string. Codes are
    stripped, upper-cased and deduplicated; blanks are dropped.

    Returns:
        The set of codes, or None when nothing remains (meaning "all")

    Example:
        >>> normalize_symbols(" usd,GBP,usd,, ")
        frozenset({'USD', 'GBP'})
    """
    if symbols is None:
        return None
    if isinstance(symbols, str):
        symbols = symbols.split(",")

    codes = frozenset(s.strip().upper() for s in symbols if s and s.strip())
    return codes or None


def filter_rates(
        rates: Mapping[str, Decimal],
        symbols: frozenset[str] | None,
) -> dict[str, Decimal]:
    """Keep the requested codes (all if ``symbols`` is None), rounded to 6 places."""
    return {
        code: round_decimal(rate, PRICE_PRECISION)
        for code, rate in rates.items()
        if symbols is None or code in symbols
    }


def convert_rates_to_base(
        eur_rates: Mapping[str, Decimal],
        base: str,
        base_rate: Decimal,
        symbols: frozenset[str] | None,
) -> dict[str, Decimal]:
    """
    Divide every EUR-quoted rate by the base's EUR rate.

    Args:
        eur_rates: One date's EUR-quoted rates
        base: Target base currency (already normalized)
        base_rate: EUR-quoted rate of ``base`` on that date, must be non-zero
        symbols: Normalized filter, None for all

    Returns:
        Rates against ``base``, rounded to 6 places
    """
    result: dict[str, Decimal] = {}

    if symbols is None or base in symbols:
        result[base] = round_decimal(ONE, PRICE_PRECISION)

    for code, eur_rate in eur_rates.items():
        if code == base:
            continue
        if symbols is not None and code not in symbols:
            continue
        result[code] = round_decimal(eur_rate / base_rate, PRICE_PRECISION)

    return result


# =============================================================================
# CONVERTER
# =============================================================================

class BaseConverter:
    """
    Per-date base conversion over a RateAccessProtocol.

    Stateless apart from the archive reference; safe to share between
    threads.
    """

    def __init__(self, rate_access: RateAccessProtocol) -> None:
        self._rates = rate_access

    def get_rates_for_date(
            self,
            rate_date: date,
            base: str = BASE_CURRENCY,
            symbols: Iterable[str] | str | None = None,
    ) -> dict[str, Decimal]:
        """
        Rates on ``rate_date`` against ``base``.

        Raises:
            RateNotFoundError: The date is absent from the archive, or the
                base currency has no usable rate on that date
        """
        base = normalize_currency(base)
        symbols = normalize_symbols(symbols)

        eur_rates = self._rates.get_rates_for_date(rate_date)
        if eur_rates is None:
            raise RateNotFoundError(rate_date)

        if base == BASE_CURRENCY:
            return filter_rates(eur_rates, symbols)

        base_rate = self._rates.get_rate(rate_date, base)
        if base_rate is None:
            raise RateNotFoundError(rate_date, base)
        if base_rate == ZERO:
            logger.warning(f"Zero EUR rate for base {base} on {rate_date}, cannot convert")
            raise RateNotFoundError(rate_date, base)

        return convert_rates_to_base(eur_rates, base, base_rate, symbols)
