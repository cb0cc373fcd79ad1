# backend/currency_archive/schemas/validators.py
"""
Reusable validation functions for query parameters and schemas.

This module provides:
- Currency code validation and normalization
- Parsing of the comma-separated ``symbols`` parameter

Validators raise ValueError; routers translate it into a 400 response.
"""

import re

# =============================================================================
# CONSTANTS
# =============================================================================

# Currency: ISO 4217 format (3 uppercase letters)
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

# Upper bound on codes in one symbols list (the archive holds ~40)
MAX_SYMBOLS = 200


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code.

    Args:
        value: Raw currency input (e.g., "usd", " EUR ")

    Returns:
        Normalized currency (uppercase, trimmed)

    Raises:
        ValueError: If currency format is invalid
    """
    if not value or not value.strip():
        raise ValueError("Currency cannot be empty")

    normalized = value.strip().upper()

    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid currency format: '{normalized}'. "
            "Currency must be a 3-letter ISO code (e.g., USD, EUR)"
        )

    return normalized


def parse_symbols(value: str | None) -> list[str] | None:
    """
    Parse a comma-separated list of currency codes.

    Empty items are ignored and duplicates collapse, so "usd,,GBP,USD"
    becomes ["USD", "GBP"]. None or a blank string means "no filter".

    Raises:
        ValueError: If any code is malformed or the list is too long
    """
    if value is None or not value.strip():
        return None

    codes: list[str] = []
    for item in value.split(","):
        if not item.strip():
            continue
        code = validate_currency(item)
        if code not in codes:
            codes.append(code)

    if len(codes) > MAX_SYMBOLS:
        raise ValueError(f"At most {MAX_SYMBOLS} symbols may be requested")

    return codes or None
