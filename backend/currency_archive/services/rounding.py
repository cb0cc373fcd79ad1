# backend/currency_archive/services/rounding.py
"""
Presentation rounding.

All engine arithmetic is unrounded; these helpers are the single point
where values become fixed-precision Decimals. Banker's rounding
(ROUND_HALF_EVEN) is used throughout.

Float inputs go through ``Decimal(str(x))`` so the shortest repr is
rounded, not the binary expansion.

Values that cannot be represented degrade to 0 with a warning: NaN,
infinities, and magnitudes whose rounded form needs more digits than the
Decimal context carries (an annualized 30% daily move is ~5e28).
"""

import logging
import math
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from currency_archive.services.constants import HUNDRED, ZERO

logger = logging.getLogger(__name__)


def round_decimal(value: Decimal, precision: Decimal, label: str = "value") -> Decimal:
    """Round a Decimal to the exponent of ``precision``."""
    try:
        return value.quantize(precision, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        logger.warning(f"Unrepresentable {label} ({value}) replaced with 0")
        return ZERO.quantize(precision)


def to_decimal(value: float | Decimal, precision: Decimal, label: str = "value") -> Decimal:
    """
    Convert a float (or Decimal) to a rounded Decimal.

    NaN and infinities degrade to 0 and are logged, so an output record is
    always fully numeric.
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            logger.warning(f"Non-finite {label} ({value}) replaced with 0")
            return round_decimal(ZERO, precision)
        return round_decimal(value, precision, label)

    if not math.isfinite(value):
        logger.warning(f"Non-finite {label} ({value}) replaced with 0")
        return round_decimal(ZERO, precision)
    return round_decimal(Decimal(str(value)), precision, label)


def to_percent(value: float, precision: Decimal, label: str = "value") -> Decimal:
    """Convert a decimal fraction (0.1234) to a rounded percentage (12.34)."""
    if not math.isfinite(value):
        return to_decimal(value, precision, label)
    return round_decimal(Decimal(str(value)) * HUNDRED, precision, label)
