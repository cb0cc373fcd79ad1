# backend/currency_archive/routers/common.py
"""
Helpers shared by the routers: query parsing and Decimal formatting.

Malformed currency codes become a domain ValidationError so they render
as 400 through the global handler, like every other bad input.
"""

from datetime import date
from decimal import Decimal

from currency_archive.schemas.validators import parse_symbols, validate_currency
from currency_archive.services.exceptions import ValidationError


def decimal_to_str(value: Decimal | None) -> str | None:
    """
    Convert Decimal to string for JSON response, preserving precision.

    Fixed-point notation keeps the rounded scale ("1.000000", never "1E+0").
    """
    if value is None:
        return None
    if isinstance(value, int):
        value = Decimal(value)
    return format(value, "f")


def decimal_map_to_str(values: dict[str, Decimal]) -> dict[str, str]:
    return {code: decimal_to_str(value) for code, value in values.items()}


def date_key(value: date) -> str:
    return value.isoformat()


def parse_currency_param(value: str, field: str) -> str:
    """
    Raises:
        ValidationError: ``value`` is not a 3-letter code
    """
    try:
        return validate_currency(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field) from e


def parse_symbols_param(value: str | None) -> list[str] | None:
    """
    Raises:
        ValidationError: Any listed code is malformed
    """
    try:
        return parse_symbols(value)
    except ValueError as e:
        raise ValidationError(str(e), field="symbols") from e
