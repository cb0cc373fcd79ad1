# backend/currency_archive/schemas/rates.py
"""
Pydantic schemas for rate lookup, conversion and catalogue endpoints.

These schemas handle:
- Historical rates for one date
- Timeseries and fluctuation over a range
- Raw EUR-quoted history of one currency
- Amount conversion
- Currency catalogue, dataset summary and health

Rates and amounts are serialized as STRINGS to preserve Decimal precision.
Date-keyed maps use ISO dates ("2024-01-02") as keys.
"""

import datetime as dt

from pydantic import BaseModel, Field


# =============================================================================
# HISTORICAL / TIMESERIES
# =============================================================================

class HistoricalRatesResponse(BaseModel):
    """Rates for one date against the requested base."""

    date: dt.date = Field(..., description="Date of the rates")
    base: str = Field(..., description="Base currency (e.g., EUR)")
    rates: dict[str, str] = Field(
        ...,
        description="Currency code -> units per 1 base (6 decimal places)"
    )


class TimeseriesResponse(BaseModel):
    """Rates for every date with data in the range."""

    start_date: dt.date
    end_date: dt.date
    base: str
    rates: dict[str, dict[str, str]] = Field(
        ...,
        description="ISO date -> currency code -> rate; dates without data are absent"
    )


# =============================================================================
# FLUCTUATION
# =============================================================================

class FluctuationEntry(BaseModel):
    """Movement of one currency between the range endpoints."""

    start_rate: str
    end_rate: str
    change: str = Field(..., description="end_rate - start_rate")
    change_pct: str = Field(..., description="Change relative to start_rate, percent")


class FluctuationResponse(BaseModel):
    start_date: dt.date
    end_date: dt.date
    base: str
    rates: dict[str, FluctuationEntry]


# =============================================================================
# RATE HISTORY
# =============================================================================

class RateHistoryResponse(BaseModel):
    """EUR-quoted history of one currency (unrounded archive values)."""

    currency: str
    start_date: dt.date
    end_date: dt.date
    rates: dict[str, str] = Field(..., description="ISO date -> EUR-quoted rate")
    total: int = Field(..., description="Number of dates with a rate")


# =============================================================================
# CONVERSION
# =============================================================================

class ConversionResponse(BaseModel):
    """Result of converting an amount on one date."""

    from_currency: str = Field(..., description="Source currency")
    to_currency: str = Field(..., description="Target currency")
    date: dt.date
    amount: str = Field(..., description="Amount in the source currency")
    rate: str = Field(..., description="Units of target per 1 source (6 decimal places)")
    result: str = Field(..., description="Converted amount (6 decimal places)")


# =============================================================================
# CATALOGUE
# =============================================================================

class CurrenciesResponse(BaseModel):
    date: dt.date | None = Field(
        None,
        description="Date the catalogue applies to; null for the whole archive"
    )
    currencies: list[str]
    count: int


class DatasetResponse(BaseModel):
    """Summary of the loaded archive."""

    is_loaded: bool
    total_dates: int
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    currencies: list[str] = Field(default_factory=list)
    currency_count: int = 0


class HealthResponse(BaseModel):
    status: str = Field(..., description="'healthy', or 'unhealthy' while the archive is empty")
    archive_loaded: bool
    total_dates: int
    start_date: dt.date | None = None
    end_date: dt.date | None = None
