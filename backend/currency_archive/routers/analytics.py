# backend/currency_archive/routers/analytics.py
"""
Range analytics endpoints.

- GET /rolling-metrics - Statistics over date-sliding windows
- GET /financial-metrics - Full metrics record per currency + correlations

Required parameters:
- start_date / end_date: Inclusive range
- window_size: Dates with data per window (rolling-metrics only)

Optional parameters:
- base: Base currency (default: EUR)
- symbols: Comma-separated currency filter (default: all)

Both endpoints fan work out on the shared analytics pool and share the
tighter analytics rate limit.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request

from currency_archive.dependencies import get_analytics_service
from currency_archive.middleware.rate_limit import RATE_LIMIT_ANALYTICS, limiter
from currency_archive.routers.common import (
    decimal_to_str,
    parse_currency_param,
    parse_symbols_param,
)
from currency_archive.schemas.analytics import (
    CurrencyMetricsResponse,
    FinancialMetricsResponse,
    RollingAverageDataResponse,
    RollingMetricsBlock,
    RollingMetricsResponse,
    RollingPeriodMetricsResponse,
    RollingWindowResponse,
)
from currency_archive.services.analytics.service import FinancialAnalyticsService
from currency_archive.services.analytics.types import (
    CurrencyMetrics,
    FinancialMetricsResult,
    RollingAverageData,
    RollingMetrics,
    RollingMetricsResult,
    RollingPeriodMetrics,
    RollingWindow,
)
from currency_archive.services.constants import BASE_CURRENCY

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/api/v1",
    tags=["Analytics"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_average_data(data: RollingAverageData) -> RollingAverageDataResponse:
    return RollingAverageDataResponse(
        average=decimal_to_str(data.average),
        min=decimal_to_str(data.min),
        max=decimal_to_str(data.max),
        std_dev=decimal_to_str(data.std_dev),
        variance=decimal_to_str(data.variance),
    )


def _map_window(window: RollingWindow) -> RollingWindowResponse:
    return RollingWindowResponse(
        window_start=window.window_start,
        window_end=window.window_end,
        data_points=window.data_points,
        rates={code: _map_average_data(data) for code, data in window.rates.items()},
    )


def _map_rolling_result(result: RollingMetricsResult) -> RollingMetricsResponse:
    return RollingMetricsResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        base=result.base,
        window_size=result.window_size,
        total_windows=len(result.windows),
        windows=[_map_window(w) for w in result.windows],
    )


def _map_period(period: RollingPeriodMetrics | None) -> RollingPeriodMetricsResponse | None:
    if period is None:
        return None
    return RollingPeriodMetricsResponse(
        mean=decimal_to_str(period.mean),
        std_dev=decimal_to_str(period.std_dev),
        window_return=decimal_to_str(period.window_return),
        volatility=decimal_to_str(period.volatility),
    )


def _map_rolling_block(rolling: RollingMetrics) -> RollingMetricsBlock:
    return RollingMetricsBlock(
        **{f"window_{size}d": _map_period(period) for size, period in rolling.windows.items()}
    )


def _map_currency_metrics(m: CurrencyMetrics) -> CurrencyMetricsResponse:
    """Map internal CurrencyMetrics to Pydantic schema."""
    return CurrencyMetricsResponse(
        currency=m.currency,
        data_points=m.data_points,
        min_rate=decimal_to_str(m.min_rate),
        max_rate=decimal_to_str(m.max_rate),
        average_rate=decimal_to_str(m.average_rate),
        open_rate=decimal_to_str(m.open_rate),
        close_rate=decimal_to_str(m.close_rate),
        change=decimal_to_str(m.change),
        change_pct=decimal_to_str(m.change_pct),
        std_dev=decimal_to_str(m.std_dev),
        variance=decimal_to_str(m.variance),
        coefficient_of_variation=decimal_to_str(m.coefficient_of_variation),
        range_pct=decimal_to_str(m.range_pct),
        avg_daily_return=decimal_to_str(m.avg_daily_return),
        cumulative_return=decimal_to_str(m.cumulative_return),
        annualized_return=decimal_to_str(m.annualized_return),
        daily_volatility=decimal_to_str(m.daily_volatility),
        annualized_volatility=decimal_to_str(m.annualized_volatility),
        max_drawdown=decimal_to_str(m.max_drawdown),
        historical_var_95=decimal_to_str(m.historical_var_95),
        parametric_var_95=decimal_to_str(m.parametric_var_95),
        sharpe_ratio=decimal_to_str(m.sharpe_ratio),
        risk_free_rate=decimal_to_str(m.risk_free_rate),
        z_score=decimal_to_str(m.z_score),
        momentum_3m=decimal_to_str(m.momentum_3m),
        momentum_12m=decimal_to_str(m.momentum_12m),
        sma_50=decimal_to_str(m.sma_50),
        sma_200=decimal_to_str(m.sma_200),
        rolling=_map_rolling_block(m.rolling),
        correlations=(
            {code: decimal_to_str(value) for code, value in m.correlations.items()}
            if m.correlations is not None else None
        ),
    )


def _map_financial_result(result: FinancialMetricsResult) -> FinancialMetricsResponse:
    return FinancialMetricsResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        base=result.base,
        currencies=result.currencies,
        metrics=[_map_currency_metrics(m) for m in result.metrics],
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/rolling-metrics", response_model=RollingMetricsResponse)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_rolling_metrics(
        request: Request,
        start_date: date = Query(..., description="First date of the range"),
        end_date: date = Query(..., description="Last date of the range (inclusive)"),
        window_size: int = Query(..., description="Dates with data per window"),
        base: str = Query(BASE_CURRENCY, description="Base currency"),
        symbols: str | None = Query(None, description="Comma-separated currency codes"),
        service: FinancialAnalyticsService = Depends(get_analytics_service),
) -> RollingMetricsResponse:
    """
    Compute average/min/max/std-dev/variance over every window of
    ``window_size`` consecutive dates with data.

    **Errors:**
    - 400: end before start, window below 1 or longer than the range
    - 422: fewer dates with data than window_size
    - 503: computation exceeded the analytics timeout
    """
    result = service.get_rolling_metrics(
        parse_currency_param(base, "base"),
        parse_symbols_param(symbols),
        start_date,
        end_date,
        window_size,
    )
    return _map_rolling_result(result)


@router.get("/financial-metrics", response_model=FinancialMetricsResponse)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_financial_metrics(
        request: Request,
        start_date: date = Query(..., description="First date of the range"),
        end_date: date = Query(..., description="Last date of the range (inclusive)"),
        base: str = Query(BASE_CURRENCY, description="Base currency"),
        symbols: str | None = Query(None, description="Comma-separated currency codes"),
        service: FinancialAnalyticsService = Depends(get_analytics_service),
) -> FinancialMetricsResponse:
    """
    Compute the full metrics record for every currency with at least two
    prices in the range, plus pairwise return correlations.

    A range with no data returns an empty ``metrics`` list.
    """
    result = service.get_financial_metrics(
        parse_currency_param(base, "base"),
        parse_symbols_param(symbols),
        start_date,
        end_date,
    )
    return _map_financial_result(result)
