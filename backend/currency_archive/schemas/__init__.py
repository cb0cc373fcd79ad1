# backend/currency_archive/schemas/__init__.py
"""
Pydantic schemas for API responses.

This package contains all Pydantic schemas organized by domain:
- analytics: Rolling windows and per-currency financial metrics
- errors: Error response formats
- rates: Historical rates, timeseries, fluctuation, conversion, catalogue
- validators: Reusable validation functions (currency codes, symbols)

Usage:
    from currency_archive.schemas import HistoricalRatesResponse
    from currency_archive.schemas import FinancialMetricsResponse
"""

from currency_archive.schemas.analytics import (
    CurrencyMetricsResponse,
    FinancialMetricsResponse,
    RollingAverageDataResponse,
    RollingMetricsBlock,
    RollingMetricsResponse,
    RollingPeriodMetricsResponse,
    RollingWindowResponse,
)
from currency_archive.schemas.errors import ErrorDetail, ValidationErrorDetail
from currency_archive.schemas.rates import (
    ConversionResponse,
    CurrenciesResponse,
    DatasetResponse,
    FluctuationEntry,
    FluctuationResponse,
    HealthResponse,
    HistoricalRatesResponse,
    RateHistoryResponse,
    TimeseriesResponse,
)
from currency_archive.schemas.validators import parse_symbols, validate_currency

__all__ = [
    # Analytics
    "CurrencyMetricsResponse",
    "FinancialMetricsResponse",
    "RollingAverageDataResponse",
    "RollingMetricsBlock",
    "RollingMetricsResponse",
    "RollingPeriodMetricsResponse",
    "RollingWindowResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Rates
    "ConversionResponse",
    "CurrenciesResponse",
    "DatasetResponse",
    "FluctuationEntry",
    "FluctuationResponse",
    "HealthResponse",
    "HistoricalRatesResponse",
    "RateHistoryResponse",
    "TimeseriesResponse",
    # Validators
    "parse_symbols",
    "validate_currency",
]
