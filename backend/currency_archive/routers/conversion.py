# backend/currency_archive/routers/conversion.py
"""
Conversion and catalogue endpoints.

- GET /convert - Convert an amount between two currencies on one date
- GET /currencies - Currency codes available (on a date, or archive-wide)
- GET /dataset - Summary of the loaded archive
"""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request

from currency_archive.dependencies import get_conversion_service
from currency_archive.middleware.rate_limit import RATE_LIMIT_DEFAULT, limiter
from currency_archive.routers.common import decimal_to_str, parse_currency_param
from currency_archive.schemas.rates import (
    ConversionResponse,
    CurrenciesResponse,
    DatasetResponse,
)
from currency_archive.services.conversion_service import CurrencyConversionService

router = APIRouter(
    prefix="/api/v1",
    tags=["Conversion"],
)


@router.get("/convert", response_model=ConversionResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def convert(
        request: Request,
        from_currency: str = Query(..., alias="from", description="Source currency"),
        to_currency: str = Query(..., alias="to", description="Target currency"),
        amount: Decimal = Query(..., description="Amount to convert (>= 0)"),
        rate_date: date = Query(..., alias="date", description="Date of the rates"),
        service: CurrencyConversionService = Depends(get_conversion_service),
) -> ConversionResponse:
    """
    Convert ``amount`` using the rates of ``date``.

    Returns 400 for a negative amount and 404 if either currency has no
    rate on the date.
    """
    result = service.convert(
        parse_currency_param(from_currency, "from"),
        parse_currency_param(to_currency, "to"),
        rate_date,
        amount,
    )
    return ConversionResponse(
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        date=result.date,
        amount=decimal_to_str(result.amount),
        rate=decimal_to_str(result.rate),
        result=decimal_to_str(result.result),
    )


@router.get("/currencies", response_model=CurrenciesResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_currencies(
        request: Request,
        rate_date: date | None = Query(None, alias="date", description="Restrict to one date"),
        service: CurrencyConversionService = Depends(get_conversion_service),
) -> CurrenciesResponse:
    """List currency codes, sorted. An absent date yields an empty list."""
    currencies = service.get_available_currencies(rate_date)
    return CurrenciesResponse(date=rate_date, currencies=currencies, count=len(currencies))


@router.get("/dataset", response_model=DatasetResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_dataset(
        request: Request,
        service: CurrencyConversionService = Depends(get_conversion_service),
) -> DatasetResponse:
    """Archive summary. Returns 503 while the archive is empty."""
    info = service.get_dataset_info()
    return DatasetResponse(
        is_loaded=info.is_loaded,
        total_dates=info.total_dates,
        start_date=info.start_date,
        end_date=info.end_date,
        currencies=info.currencies,
        currency_count=len(info.currencies),
    )
