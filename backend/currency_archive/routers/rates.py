# backend/currency_archive/routers/rates.py
"""
Historical rate endpoints.

- GET /historical - Rates for one date against any base
- GET /timeseries - Rates for every date with data in a range
- GET /fluctuation - Change between the two range endpoints
- GET /rates/{currency}/history - Raw EUR-quoted history of one currency

Common parameters:
- base: Base currency (default: EUR)
- symbols: Comma-separated currency filter (default: all)

Dates without data (weekends, holidays) are simply absent from range
responses. An explicitly requested date that is absent is a 404.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request

from currency_archive.dependencies import get_historical_rates_service
from currency_archive.middleware.rate_limit import RATE_LIMIT_DEFAULT, limiter
from currency_archive.routers.common import (
    date_key,
    decimal_map_to_str,
    decimal_to_str,
    parse_currency_param,
    parse_symbols_param,
)
from currency_archive.schemas.rates import (
    FluctuationEntry,
    FluctuationResponse,
    HistoricalRatesResponse,
    RateHistoryResponse,
    TimeseriesResponse,
)
from currency_archive.services.constants import BASE_CURRENCY
from currency_archive.services.historical_rates_service import (
    FluctuationResult,
    HistoricalRatesResult,
    HistoricalRatesService,
    RateHistoryResult,
    TimeseriesResult,
)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/api/v1",
    tags=["Rates"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_historical(result: HistoricalRatesResult) -> HistoricalRatesResponse:
    return HistoricalRatesResponse(
        date=result.date,
        base=result.base,
        rates=decimal_map_to_str(result.rates),
    )


def _map_timeseries(result: TimeseriesResult) -> TimeseriesResponse:
    return TimeseriesResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        base=result.base,
        rates={
            date_key(rate_date): decimal_map_to_str(rates)
            for rate_date, rates in result.rates.items()
        },
    )


def _map_fluctuation(result: FluctuationResult) -> FluctuationResponse:
    return FluctuationResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        base=result.base,
        rates={
            code: FluctuationEntry(
                start_rate=decimal_to_str(item.start_rate),
                end_rate=decimal_to_str(item.end_rate),
                change=decimal_to_str(item.change),
                change_pct=decimal_to_str(item.change_pct),
            )
            for code, item in result.rates.items()
        },
    )


def _map_history(result: RateHistoryResult) -> RateHistoryResponse:
    return RateHistoryResponse(
        currency=result.currency,
        start_date=result.start_date,
        end_date=result.end_date,
        rates={date_key(d): decimal_to_str(rate) for d, rate in result.rates.items()},
        total=len(result.rates),
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/historical", response_model=HistoricalRatesResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_historical_rates(
        request: Request,
        rate_date: date = Query(..., alias="date", description="Date of the rates (YYYY-MM-DD)"),
        base: str = Query(BASE_CURRENCY, description="Base currency"),
        symbols: str | None = Query(None, description="Comma-separated currency codes"),
        service: HistoricalRatesService = Depends(get_historical_rates_service),
) -> HistoricalRatesResponse:
    """
    Get every rate on one date, expressed against ``base``.

    Returns 404 if the date is not in the archive or the base currency has
    no rate on it.
    """
    result = service.get_historical_rates(
        rate_date,
        parse_currency_param(base, "base"),
        parse_symbols_param(symbols),
    )
    return _map_historical(result)


@router.get("/timeseries", response_model=TimeseriesResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_timeseries(
        request: Request,
        start_date: date = Query(..., description="First date of the range"),
        end_date: date = Query(..., description="Last date of the range (inclusive)"),
        base: str = Query(BASE_CURRENCY, description="Base currency"),
        symbols: str | None = Query(None, description="Comma-separated currency codes"),
        service: HistoricalRatesService = Depends(get_historical_rates_service),
) -> TimeseriesResponse:
    """
    Get rates for every date with data between start_date and end_date.

    A range that contains no archive dates returns an empty ``rates`` map.
    """
    result = service.get_timeseries(
        parse_currency_param(base, "base"),
        parse_symbols_param(symbols),
        start_date,
        end_date,
    )
    return _map_timeseries(result)


@router.get("/fluctuation", response_model=FluctuationResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_fluctuation(
        request: Request,
        start_date: date = Query(..., description="Start of the comparison"),
        end_date: date = Query(..., description="End of the comparison"),
        base: str = Query(BASE_CURRENCY, description="Base currency"),
        symbols: str | None = Query(None, description="Comma-separated currency codes"),
        service: HistoricalRatesService = Depends(get_historical_rates_service),
) -> FluctuationResponse:
    """
    Compare rates on exactly start_date and end_date.

    Both dates must be in the archive (404 otherwise). Only currencies
    present on both dates are reported.
    """
    result = service.get_fluctuation(
        parse_currency_param(base, "base"),
        parse_symbols_param(symbols),
        start_date,
        end_date,
    )
    return _map_fluctuation(result)


@router.get("/rates/{currency}/history", response_model=RateHistoryResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_rate_history(
        request: Request,
        currency: str,
        start_date: date = Query(..., description="First date of the range"),
        end_date: date = Query(..., description="Last date of the range (inclusive)"),
        service: HistoricalRatesService = Depends(get_historical_rates_service),
) -> RateHistoryResponse:
    """Get the EUR-quoted history of one currency, as stored in the archive."""
    result = service.get_rate_history(
        parse_currency_param(currency, "currency"),
        start_date,
        end_date,
    )
    return _map_history(result)
