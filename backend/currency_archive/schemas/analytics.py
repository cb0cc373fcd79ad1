# backend/currency_archive/schemas/analytics.py
"""
Pydantic schemas for the Analytics API.

These schemas define the response formats for:
- Date-sliding rolling window statistics
- Per-currency financial metrics (returns, risk, momentum, correlations)

Design decisions:
- All numeric values are serialized as STRINGS to preserve Decimal precision
- Fields documented as percent are percentages ("15.5000" = 15.5%)
- risk_free_rate is the only rate in decimal form ("0.04" = 4%)
- Null is returned when a metric cannot be calculated (series too short)
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ROLLING WINDOW SCHEMAS
# =============================================================================

class RollingAverageDataResponse(BaseModel):
    """Statistics of one currency inside one date-sliding window."""

    model_config = ConfigDict(from_attributes=True)

    average: str
    min: str
    max: str
    std_dev: str = Field(..., description="Population standard deviation")
    variance: str = Field(..., description="Population variance")


class RollingWindowResponse(BaseModel):
    """One date-sliding window."""

    window_start: date = Field(..., description="First date with data in the window")
    window_end: date = Field(..., description="Last date with data in the window")
    data_points: int
    rates: dict[str, RollingAverageDataResponse]


class RollingMetricsResponse(BaseModel):
    """Rolling analytics for a range."""

    start_date: date
    end_date: date
    base: str
    window_size: int = Field(..., description="Number of dates with data per window")
    total_windows: int
    windows: list[RollingWindowResponse]


# =============================================================================
# FINANCIAL METRICS SCHEMAS
# =============================================================================

class RollingPeriodMetricsResponse(BaseModel):
    """Trailing window block inside a currency record."""

    mean: str = Field(..., description="Mean price over the window")
    std_dev: str = Field(..., description="Price standard deviation over the window")
    window_return: str = Field(..., description="Return over the window, percent")
    volatility: str = Field(..., description="Annualized volatility of the window, percent")


class RollingMetricsBlock(BaseModel):
    """
    Trailing windows keyed `window_<size>d`; null where the series is shorter.

    The default sizes 30/60/90/180 are always present. Other configured
    sizes are added as extra keys under the same naming.
    """

    model_config = ConfigDict(extra="allow")

    window_30d: RollingPeriodMetricsResponse | None = None
    window_60d: RollingPeriodMetricsResponse | None = None
    window_90d: RollingPeriodMetricsResponse | None = None
    window_180d: RollingPeriodMetricsResponse | None = None


class CurrencyMetricsResponse(BaseModel):
    """
    Complete analytics record for one currency.

    Price-level values are in units of the request base.
    """

    currency: str
    data_points: int

    # Price levels
    min_rate: str
    max_rate: str
    average_rate: str
    open_rate: str = Field(..., description="First price in the range")
    close_rate: str = Field(..., description="Last price in the range")
    change: str = Field(..., description="close_rate - open_rate")
    change_pct: str = Field(..., description="Change relative to open_rate, percent")

    # Dispersion
    std_dev: str
    variance: str
    coefficient_of_variation: str = Field(..., description="std_dev / average_rate, percent")
    range_pct: str = Field(..., description="(max - min) / average_rate, percent")

    # Returns
    avg_daily_return: str = Field(..., description="Mean simple daily return, percent")
    cumulative_return: str = Field(..., description="Compounded return over the range, percent")
    annualized_return: str = Field(..., description="Cumulative return annualized (252 days), percent")
    daily_volatility: str = Field(..., description="Std-dev of daily log returns, percent")
    annualized_volatility: str = Field(..., description="Daily volatility x sqrt(252), percent")

    # Risk
    max_drawdown: str = Field(..., description="Largest peak-to-trough decline (<= 0), percent")
    historical_var_95: str = Field(..., description="One-day 95% historical VaR, percent")
    parametric_var_95: str = Field(..., description="One-day 95% parametric VaR, percent")
    sharpe_ratio: str
    risk_free_rate: str = Field(..., description="Annual risk-free rate used, decimal")

    # Momentum and trend
    z_score: str = Field(..., description="(close - average) / std_dev")
    momentum_3m: str | None = Field(None, description="63-day momentum, percent")
    momentum_12m: str | None = Field(None, description="252-day momentum, percent")
    sma_50: str | None = None
    sma_200: str | None = None

    rolling: RollingMetricsBlock
    correlations: dict[str, str] | None = Field(
        None,
        description="Other currency -> Pearson correlation of daily returns"
    )


class FinancialMetricsResponse(BaseModel):
    """Per-currency analytics for a range, sorted by currency code."""

    start_date: date
    end_date: date
    base: str
    currencies: list[str]
    metrics: list[CurrencyMetricsResponse]
