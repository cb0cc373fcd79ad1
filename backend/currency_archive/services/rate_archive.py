# backend/currency_archive/services/rate_archive.py
"""
In-memory archive of daily EUR-quoted exchange rates.

The archive is loaded once and never mutated afterwards, so any number of
request threads may read it concurrently without locking.

=============================================================================
RATE CONVENTION
=============================================================================

Every stored rate means "1 EUR = X currency":

    rates[date]["USD"] = 1.10   →   1 EUR = 1.10 USD
    rates[date]["EUR"] = 1      →   always, forced on load

Cross rates against another base are derived on request (BaseConverter).

=============================================================================
ON-DISK LAYOUT
=============================================================================

    <root>/<year>/<month>/DD-MM-YYYY.json

Each file is a JSON object mapping currency code to rate:

    {"USD": 1.1, "GBP": 0.85, "JPY": 160.2}

Numbers are parsed straight to Decimal (never through float). Unreadable
files and files whose name is not a date are skipped with a warning, as are
negative rates.

Usage:
    archive = RateArchive.from_directory(Path("Data"))
    rate = archive.get_rate(date(2024, 1, 2), "USD")
"""

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType
from typing import Any

from currency_archive.services.constants import (
    ARCHIVE_FILE_DATE_FORMAT,
    ARCHIVE_FILE_SUFFIX,
    BASE_CURRENCY,
    ONE,
    ZERO,
)

logger = logging.getLogger(__name__)


class RateArchive:
    """
    Immutable store of EUR-quoted rates keyed by date.

    Satisfies RateAccessProtocol. Construct through ``from_directory`` for
    the real archive or ``from_mapping`` for in-memory data.
    """

    def __init__(self, rates: Mapping[date, Mapping[str, Any]]) -> None:
        frozen: dict[date, Mapping[str, Decimal]] = {}
        for rate_date, day_rates in rates.items():
            cleaned = _clean_day(rate_date, day_rates)
            frozen[rate_date] = MappingProxyType(cleaned)

        self._rates: Mapping[date, Mapping[str, Decimal]] = MappingProxyType(frozen)
        self._dates: tuple[date, ...] = tuple(sorted(frozen))

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_mapping(cls, rates: Mapping[date, Mapping[str, Any]]) -> "RateArchive":
        """Build an archive from ``{date: {code: rate}}``."""
        return cls(rates)

    @classmethod
    def from_directory(cls, root: Path) -> "RateArchive":
        """
        Bulk-load every daily file below ``root``.

        A missing root directory yields an empty archive (logged as a
        warning); the caller decides whether that is fatal.
        """
        root = Path(root)
        if not root.is_dir():
            logger.warning(f"Rate archive directory not found: {root}")
            return cls({})

        loaded: dict[date, dict[str, Any]] = {}
        skipped = 0

        for path in _iter_archive_files(root):
            rate_date = _parse_file_date(path)
            if rate_date is None:
                skipped += 1
                continue

            try:
                with path.open(encoding="utf-8") as f:
                    payload = json.load(f, parse_float=Decimal, parse_int=Decimal)
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable rate file {path}: {e}")
                skipped += 1
                continue

            if not isinstance(payload, dict):
                logger.warning(f"Skipping rate file {path}: expected a JSON object")
                skipped += 1
                continue

            if rate_date in loaded:
                logger.warning(f"Duplicate rate file for {rate_date}, keeping {path}")
            loaded[rate_date] = payload

        archive = cls(loaded)
        date_range = archive.get_date_range()
        logger.info(
            f"Rate archive loaded: {archive.total_dates} dates"
            + (f" ({date_range[0]} to {date_range[1]})" if date_range else "")
            + (f", {skipped} files skipped" if skipped else "")
        )
        return archive

    # =========================================================================
    # RATE ACCESS
    # =========================================================================

    def get_rate(self, rate_date: date, currency: str) -> Decimal | None:
        day_rates = self._rates.get(rate_date)
        if day_rates is None:
            return None
        return day_rates.get(currency.upper())

    def get_rates_for_date(self, rate_date: date) -> Mapping[str, Decimal] | None:
        return self._rates.get(rate_date)

    def get_date_range(self) -> tuple[date, date] | None:
        if not self._dates:
            return None
        return self._dates[0], self._dates[-1]

    # =========================================================================
    # ARCHIVE INFO
    # =========================================================================

    def get_available_currencies(self, rate_date: date | None = None) -> list[str]:
        """
        Sorted currency codes present on ``rate_date``.

        Without a date, the codes of the most recent archive date are
        returned.
        """
        if rate_date is None:
            if not self._dates:
                return []
            rate_date = self._dates[-1]

        day_rates = self._rates.get(rate_date)
        return sorted(day_rates) if day_rates else []

    @property
    def dates(self) -> tuple[date, ...]:
        """Every archive date, ascending."""
        return self._dates

    @property
    def total_dates(self) -> int:
        return len(self._dates)

    @property
    def is_loaded(self) -> bool:
        return bool(self._dates)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _iter_archive_files(root: Path) -> Iterable[Path]:
    """Daily files in <root>/<year>/<month>/, in path order."""
    return sorted(
        p for p in root.glob(f"*/*/*{ARCHIVE_FILE_SUFFIX}") if p.is_file()
    )


def _parse_file_date(path: Path) -> date | None:
    try:
        return datetime.strptime(path.stem, ARCHIVE_FILE_DATE_FORMAT).date()
    except ValueError:
        logger.warning(f"Skipping rate file with non-date name: {path}")
        return None


def _clean_day(rate_date: date, day_rates: Mapping[str, Any]) -> dict[str, Decimal]:
    """
    Normalize one day's rates.

    Codes are upper-cased; values become Decimal; negative or non-numeric
    values are dropped; EUR is forced to exactly 1.
    """
    cleaned: dict[str, Decimal] = {}

    for code, raw in day_rates.items():
        code = str(code).strip().upper()
        if not code:
            continue
        try:
            rate = raw if isinstance(raw, Decimal) else Decimal(str(raw))
        except (InvalidOperation, ValueError):
            logger.warning(f"Dropping non-numeric rate {code}={raw!r} on {rate_date}")
            continue
        if not rate.is_finite() or rate < ZERO:
            logger.warning(f"Dropping invalid rate {code}={rate} on {rate_date}")
            continue
        cleaned[code] = rate

    cleaned[BASE_CURRENCY] = ONE
    return cleaned
