# backend/currency_archive/services/__init__.py
"""
Service layer for rate lookups and analytics.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive the rate archive and worker pool by injection
- Are easily testable with in-memory archives

Usage:
    from currency_archive.services import RateArchive, HistoricalRatesService
    from currency_archive.services.analytics.service import FinancialAnalyticsService
    from currency_archive.services import RateNotFoundError, InvalidRangeError

Architecture:
    services/
    ├── __init__.py                  # This file - main exports
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Conventions, precisions and limits
    ├── protocols.py                 # Rate access interfaces (Protocol classes)
    ├── rounding.py                  # Presentation rounding
    ├── concurrency.py               # Fan-out helper for the shared pool
    ├── rate_archive.py              # Immutable in-memory archive + loader
    ├── base_converter.py            # Per-date cross rates
    ├── series_collector.py          # Range collection
    ├── historical_rates_service.py  # Historical / timeseries / fluctuation
    ├── conversion_service.py        # Amount conversion and catalogue
    └── analytics/                   # Analytics engine
        ├── service.py               # FinancialAnalyticsService (orchestrator)
        ├── types.py                 # Analytics data types
        ├── statistics.py            # Shared statistics
        ├── returns.py               # Return calculations
        ├── risk.py                  # Volatility, drawdown, VaR
        ├── momentum.py              # Momentum, SMA, z-score
        ├── rolling.py               # Rolling windows
        ├── correlation.py           # Correlation pass
        └── metrics.py               # MetricsAssembler
"""

# Exceptions
from currency_archive.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidRangeError,
    InvalidAmountError,
    NotFoundError,
    RateNotFoundError,
    ArchiveNotReadyError,
    AnalyticsError,
    InsufficientDataError,
    AnalyticsTimeoutError,
)
# Archive and conversion
from currency_archive.services.rate_archive import RateArchive
from currency_archive.services.base_converter import BaseConverter
from currency_archive.services.series_collector import SeriesCollector
# Services
from currency_archive.services.historical_rates_service import HistoricalRatesService
from currency_archive.services.conversion_service import CurrencyConversionService

__all__ = [
    # ==========================================================================
    # Services
    # ==========================================================================
    "RateArchive",
    "BaseConverter",
    "SeriesCollector",
    "HistoricalRatesService",
    "CurrencyConversionService",

    # ==========================================================================
    # Exceptions
    # ==========================================================================
    "ServiceError",
    "ValidationError",
    "InvalidRangeError",
    "InvalidAmountError",
    "NotFoundError",
    "RateNotFoundError",
    "ArchiveNotReadyError",
    "AnalyticsError",
    "InsufficientDataError",
    "AnalyticsTimeoutError",
]
