# backend/currency_archive/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- RateArchive satisfies RateAccessProtocol without inheriting from it
- Test doubles (plain in-memory stores) work without explicit inheritance
- The analytics core depends on this interface, never on how rates are stored
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Protocol


class RateAccessProtocol(Protocol):
    """
    Read-only access to EUR-quoted daily rates.

    Implementations must be safe for concurrent readers.
    """

    def get_rate(self, rate_date: date, currency: str) -> Decimal | None:
        """EUR-quoted rate of ``currency`` on ``rate_date``, or None."""
        ...

    def get_rates_for_date(self, rate_date: date) -> Mapping[str, Decimal] | None:
        """Every EUR-quoted rate on ``rate_date``, or None if the date is absent."""
        ...

    def get_date_range(self) -> tuple[date, date] | None:
        """First and last archive dates, or None for an empty archive."""
        ...


class RateArchiveProtocol(RateAccessProtocol, Protocol):
    """RateAccessProtocol plus the catalogue queries used by the conversion service."""

    def get_available_currencies(self, rate_date: date | None = None) -> list[str]:
        ...

    @property
    def total_dates(self) -> int:
        ...

    @property
    def is_loaded(self) -> bool:
        ...
