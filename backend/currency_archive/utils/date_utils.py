# backend/currency_archive/utils/date_utils.py
"""
Date utility functions shared by the rate services.

Usage:
    from currency_archive.utils.date_utils import iter_calendar_days

    for d in iter_calendar_days(start_date, end_date):
        ...
"""

from collections.abc import Iterator
from datetime import date, timedelta


def iter_calendar_days(start_date: date, end_date: date) -> Iterator[date]:
    """
    Yield every calendar day from start_date to end_date (both inclusive).

    Yields nothing when start_date is after end_date.

    Example:
        >>> list(iter_calendar_days(date(2024, 1, 1), date(2024, 1, 3)))
        [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    """
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def calendar_days_inclusive(start_date: date, end_date: date) -> int:
    """Number of calendar days in [start_date, end_date], 0 if the range is reversed."""
    return max((end_date - start_date).days + 1, 0)
