# backend/currency_archive/services/analytics/types.py
"""
Data types for the analytics engine.

Two families of types live here:

    Working types (unrounded, produced and consumed inside the engine)
        - PriceSeries: one currency's chronological prices
        - ReturnSeries: daily returns derived from a PriceSeries
        - RollingWindowStats: raw statistics of one trailing window
        - AnalyticsConfig: every tunable convention in one frozen object

    Result types (rounded once, handed to the API layer)
        - RollingPeriodMetrics / RollingMetrics
        - RollingAverageData / RollingWindow / RollingMetricsResult
        - CurrencyMetrics / FinancialMetricsResult

Returns and volatilities are decimals inside the engine (0.15 = 15%).
Result types carry percentages (15.0) for every field documented as such.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from currency_archive.services.constants import (
    DEFAULT_RISK_FREE_RATE,
    MIN_PRICES_FOR_METRICS,
    MIN_VAR_SAMPLE_SIZE,
    MOMENTUM_12M_PERIOD,
    MOMENTUM_3M_PERIOD,
    ROLLING_WINDOW_SIZES,
    SMA_LONG_PERIOD,
    SMA_SHORT_PERIOD,
    TRADING_DAYS_PER_YEAR,
    VAR_CONFIDENCE_PERCENTILE,
    VAR_Z_SCORE_95,
)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Conventions used by the metrics assembler.

    Attributes:
        risk_free_rate: Annual risk-free rate as a decimal (0.04 = 4%)
        trading_days_per_year: Annualization factor for returns and volatility
        var_percentile: Left-tail percentile for historical VaR
        var_z_score: z-value for parametric VaR
        var_min_sample: Minimum returns before VaR is reported
        momentum_short_period / momentum_long_period: Look-backs in trading days
        sma_short_period / sma_long_period: Moving average lengths
        rolling_window_sizes: Trailing window lengths for the rolling block
        min_prices: Fewer prices than this means no record for the currency
    """
    risk_free_rate: Decimal = DEFAULT_RISK_FREE_RATE
    trading_days_per_year: int = TRADING_DAYS_PER_YEAR
    var_percentile: float = VAR_CONFIDENCE_PERCENTILE
    var_z_score: float = VAR_Z_SCORE_95
    var_min_sample: int = MIN_VAR_SAMPLE_SIZE
    momentum_short_period: int = MOMENTUM_3M_PERIOD
    momentum_long_period: int = MOMENTUM_12M_PERIOD
    sma_short_period: int = SMA_SHORT_PERIOD
    sma_long_period: int = SMA_LONG_PERIOD
    rolling_window_sizes: tuple[int, ...] = ROLLING_WINDOW_SIZES
    min_prices: int = MIN_PRICES_FOR_METRICS


# =============================================================================
# WORKING TYPES
# =============================================================================

@dataclass(frozen=True)
class PriceSeries:
    """
    Chronological prices of one currency against the request base.

    Dates are strictly increasing; dates with no rate for the currency are
    absent rather than filled.
    """
    currency: str
    dates: tuple[date, ...] = ()
    prices: tuple[Decimal, ...] = ()

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.prices):
            raise ValueError(
                f"PriceSeries {self.currency}: {len(self.dates)} dates "
                f"but {len(self.prices)} prices"
            )

    def __len__(self) -> int:
        return len(self.prices)

    def as_floats(self) -> list[float]:
        return [float(p) for p in self.prices]


@dataclass(frozen=True)
class ReturnSeries:
    """
    Daily returns of one currency.

    ``dates[i]`` is the date of the price that closes return ``i``, so a
    series built from n prices has n-1 entries.
    """
    currency: str
    dates: tuple[date, ...] = ()
    values: tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class RollingWindowStats:
    """
    Unrounded statistics of one trailing window.

    Attributes:
        mean: Mean price over the last W prices
        std_dev: Population std-dev of those prices
        window_return: (last - first) / first over the window, decimal
        volatility: Annualized population std-dev of the window's returns, decimal
        return_count: Number of returns the volatility was computed from
    """
    window_size: int
    mean: float
    std_dev: float
    window_return: float
    volatility: float
    return_count: int


# =============================================================================
# ROLLING RESULTS
# =============================================================================

@dataclass
class RollingPeriodMetrics:
    """
    One trailing window in a metrics record.

    Attributes:
        mean: Mean price (6 places)
        std_dev: Price std-dev (8 places)
        window_return: Window return in percent (4 places)
        volatility: Annualized volatility in percent (4 places)
    """
    mean: Decimal
    std_dev: Decimal
    window_return: Decimal
    volatility: Decimal


@dataclass
class RollingMetrics:
    """Trailing windows keyed by size; None where the series is too short."""
    windows: dict[int, RollingPeriodMetrics | None] = field(default_factory=dict)

    def get(self, window_size: int) -> RollingPeriodMetrics | None:
        return self.windows.get(window_size)


@dataclass
class RollingAverageData:
    """Per-currency statistics for one date-sliding window."""
    average: Decimal
    min: Decimal
    max: Decimal
    std_dev: Decimal
    variance: Decimal


@dataclass
class RollingWindow:
    """
    One date-sliding window.

    Attributes:
        window_start: First date with data in the window
        window_end: Last date with data in the window
        data_points: Number of dates with data in the window
        rates: Currency code → statistics over the rates present
    """
    window_start: date
    window_end: date
    data_points: int
    rates: dict[str, RollingAverageData] = field(default_factory=dict)


@dataclass
class RollingMetricsResult:
    """Date-sliding rolling analytics for a range."""
    start_date: date
    end_date: date
    base: str
    window_size: int
    windows: list[RollingWindow] = field(default_factory=list)


# =============================================================================
# FINANCIAL METRICS RESULTS
# =============================================================================

@dataclass
class CurrencyMetrics:
    """
    Complete analytics record for one currency.

    Price-level fields are rounded to 6 places (std_dev 8, variance 10).
    Every field described as percent is a percentage rounded to 4 places.
    Sharpe ratio and z-score are plain ratios rounded to 4 places.

    Attributes:
        currency: ISO code
        data_points: Number of prices used
        min_rate / max_rate / average_rate: Price range and mean
        open_rate / close_rate: First and last price
        change: close - open
        change_pct: Change relative to open, percent
        std_dev / variance: Population dispersion of prices
        coefficient_of_variation: std_dev / average, percent
        range_pct: (max - min) / average, percent
        avg_daily_return: Mean simple daily return, percent
        cumulative_return: Geometric cumulative return, percent
        annualized_return: (1 + cumulative)^(252/n) - 1, percent
        daily_volatility: Population std-dev of log returns, percent
        annualized_volatility: daily_volatility × √252, percent
        max_drawdown: Largest peak-to-trough decline (≤ 0), percent
        historical_var_95 / parametric_var_95: 95% one-day VaR, percent
        sharpe_ratio: (annualized_return - risk_free_rate) / annualized_volatility
        risk_free_rate: Rate used for the Sharpe ratio, as a decimal (0.04)
        z_score: (close - average) / std_dev
        momentum_3m / momentum_12m: Look-back momentum, percent (None if too short)
        sma_50 / sma_200: Moving averages (None if too short)
        rolling: Trailing window block
        correlations: Other currency → Pearson correlation of daily returns
    """
    currency: str
    data_points: int

    min_rate: Decimal
    max_rate: Decimal
    average_rate: Decimal
    open_rate: Decimal
    close_rate: Decimal
    change: Decimal
    change_pct: Decimal

    std_dev: Decimal
    variance: Decimal
    coefficient_of_variation: Decimal
    range_pct: Decimal

    avg_daily_return: Decimal
    cumulative_return: Decimal
    annualized_return: Decimal
    daily_volatility: Decimal
    annualized_volatility: Decimal

    max_drawdown: Decimal
    historical_var_95: Decimal
    parametric_var_95: Decimal
    sharpe_ratio: Decimal
    risk_free_rate: Decimal

    z_score: Decimal
    momentum_3m: Decimal | None = None
    momentum_12m: Decimal | None = None
    sma_50: Decimal | None = None
    sma_200: Decimal | None = None

    rolling: RollingMetrics = field(default_factory=RollingMetrics)
    correlations: dict[str, Decimal] | None = None


@dataclass
class FinancialMetricsResult:
    """Per-currency analytics for a range, sorted by currency code."""
    start_date: date
    end_date: date
    base: str
    metrics: list[CurrencyMetrics] = field(default_factory=list)

    @property
    def currencies(self) -> list[str]:
        return [m.currency for m in self.metrics]
