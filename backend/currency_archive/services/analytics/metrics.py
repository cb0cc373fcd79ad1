# backend/currency_archive/services/analytics/metrics.py
"""
Assembles one currency's metrics record.

This is the only place where:
    - the Sharpe ratio is computed (all inputs as decimals)
    - decimals become percentages (× 100)
    - values are rounded

Unit & rounding contract:
    Price-level (min/max/average/open/close/change, SMA, rolling mean)  → 6 places
    Price std-dev (and rolling std-dev)                                  → 8 places
    Price variance                                                       → 10 places
    Percentages and ratios (returns, volatility, VaR, drawdown,
    momentum, CV, range, change %, z-score, Sharpe)                      → 4 places

Inputs to the formulas:
    avg daily return, cumulative return, annualized return → SIMPLE returns
    daily / annualized volatility                          → LOG returns
    parametric VaR → mean simple return and daily (log) volatility
    z-score        → price-level std-dev
"""

import logging
import math
from decimal import Decimal

from currency_archive.services.analytics.momentum import (
    calculate_momentum,
    calculate_sma,
    calculate_z_score,
)
from currency_archive.services.analytics.returns import (
    annualize_return,
    build_return_series,
    calculate_cumulative_return,
    calculate_log_returns,
)
from currency_archive.services.analytics.risk import (
    calculate_drawdowns,
    calculate_var,
    calculate_volatility,
)
from currency_archive.services.analytics.rolling import calculate_rolling_metrics
from currency_archive.services.analytics.statistics import calculate_mean, calculate_variance
from currency_archive.services.analytics.types import (
    AnalyticsConfig,
    CurrencyMetrics,
    PriceSeries,
    ReturnSeries,
    RollingMetrics,
    RollingPeriodMetrics,
    RollingWindowStats,
)
from currency_archive.services.constants import (
    HUNDRED,
    PERCENTAGE_PRECISION,
    PRICE_PRECISION,
    STD_DEV_PRECISION,
    VARIANCE_PRECISION,
    ZERO,
)
from currency_archive.services.rounding import round_decimal, to_decimal, to_percent

logger = logging.getLogger(__name__)


def calculate_sharpe_ratio(
        annualized_return: float,
        annualized_volatility: float,
        risk_free_rate: float,
) -> float:
    """
    (annualized return - risk-free rate) / annualized volatility.

    All three arguments are decimals (0.08, 0.12, 0.04). Returns 0.0 when
    volatility is 0.
    """
    if annualized_volatility == 0:
        return 0.0
    return (annualized_return - risk_free_rate) / annualized_volatility


class MetricsAssembler:
    """
    Builds CurrencyMetrics records from price series.

    Attributes:
        config: Conventions (risk-free rate, periods, precisions of inputs)
    """

    def __init__(self, config: AnalyticsConfig | None = None) -> None:
        self.config = config or AnalyticsConfig()

    def build(self, series: PriceSeries) -> tuple[CurrencyMetrics, ReturnSeries] | None:
        """
        Compute the full record for one currency.

        Args:
            series: Chronological prices against the request base

        Returns:
            (record, return series used for correlations), or None when the
            series has fewer than ``config.min_prices`` prices
        """
        cfg = self.config
        n = len(series)
        if n < max(cfg.min_prices, 2):
            logger.debug(f"Skipping {series.currency}: {n} prices")
            return None

        prices = series.prices
        price_floats = series.as_floats()

        # Price statistics (Decimal)
        min_rate = min(prices)
        max_rate = max(prices)
        average = sum(prices, ZERO) / n
        open_rate = prices[0]
        close_rate = prices[-1]
        change = close_rate - open_rate
        change_pct = change / open_rate * HUNDRED if open_rate != ZERO else ZERO
        range_pct = (max_rate - min_rate) / average * HUNDRED if average != ZERO else ZERO

        variance = calculate_variance(prices, average)
        std_dev = math.sqrt(float(variance))
        average_f = float(average)
        cv_pct = std_dev / average_f * 100 if average_f != 0 else 0.0

        # Returns
        returns = build_return_series(series)
        simple_returns = list(returns.values)
        log_returns = calculate_log_returns(prices)

        avg_daily_return = calculate_mean(simple_returns)
        cumulative_return = calculate_cumulative_return(simple_returns)
        annualized_return = annualize_return(
            cumulative_return, len(simple_returns), cfg.trading_days_per_year
        )

        # Volatility and risk
        daily_vol, annualized_vol = calculate_volatility(log_returns, cfg.trading_days_per_year)
        max_drawdown, _ = calculate_drawdowns(price_floats)
        historical_var, parametric_var = calculate_var(
            simple_returns,
            avg_daily_return,
            daily_vol,
            percentile=cfg.var_percentile,
            z_score=cfg.var_z_score,
            min_sample=cfg.var_min_sample,
        )
        sharpe = calculate_sharpe_ratio(annualized_return, annualized_vol, float(cfg.risk_free_rate))

        # Technical indicators
        momentum_short = calculate_momentum(prices, cfg.momentum_short_period)
        momentum_long = calculate_momentum(prices, cfg.momentum_long_period)
        sma_short = calculate_sma(prices, cfg.sma_short_period)
        sma_long = calculate_sma(prices, cfg.sma_long_period)
        z_score = calculate_z_score(float(close_rate), average_f, std_dev)

        rolling = calculate_rolling_metrics(
            price_floats, simple_returns, cfg.rolling_window_sizes, cfg.trading_days_per_year
        )

        record = CurrencyMetrics(
            currency=series.currency,
            data_points=n,
            min_rate=round_decimal(min_rate, PRICE_PRECISION),
            max_rate=round_decimal(max_rate, PRICE_PRECISION),
            average_rate=round_decimal(average, PRICE_PRECISION),
            open_rate=round_decimal(open_rate, PRICE_PRECISION),
            close_rate=round_decimal(close_rate, PRICE_PRECISION),
            change=round_decimal(change, PRICE_PRECISION),
            change_pct=round_decimal(change_pct, PERCENTAGE_PRECISION),
            std_dev=to_decimal(std_dev, STD_DEV_PRECISION, "std_dev"),
            variance=round_decimal(variance, VARIANCE_PRECISION),
            coefficient_of_variation=to_decimal(cv_pct, PERCENTAGE_PRECISION, "coefficient_of_variation"),
            range_pct=round_decimal(range_pct, PERCENTAGE_PRECISION),
            avg_daily_return=to_percent(avg_daily_return, PERCENTAGE_PRECISION, "avg_daily_return"),
            cumulative_return=to_percent(cumulative_return, PERCENTAGE_PRECISION, "cumulative_return"),
            annualized_return=to_percent(annualized_return, PERCENTAGE_PRECISION, "annualized_return"),
            daily_volatility=to_percent(daily_vol, PERCENTAGE_PRECISION, "daily_volatility"),
            annualized_volatility=to_percent(annualized_vol, PERCENTAGE_PRECISION, "annualized_volatility"),
            max_drawdown=to_percent(max_drawdown, PERCENTAGE_PRECISION, "max_drawdown"),
            historical_var_95=to_percent(historical_var, PERCENTAGE_PRECISION, "historical_var_95"),
            parametric_var_95=to_percent(parametric_var, PERCENTAGE_PRECISION, "parametric_var_95"),
            sharpe_ratio=to_decimal(sharpe, PERCENTAGE_PRECISION, "sharpe_ratio"),
            risk_free_rate=cfg.risk_free_rate,
            z_score=to_decimal(z_score, PERCENTAGE_PRECISION, "z_score"),
            momentum_3m=_optional_percent(momentum_short, "momentum_3m"),
            momentum_12m=_optional_percent(momentum_long, "momentum_12m"),
            sma_50=_optional_price(sma_short, "sma_50"),
            sma_200=_optional_price(sma_long, "sma_200"),
            rolling=RollingMetrics(
                windows={size: _rolling_period(stats) for size, stats in rolling.items()}
            ),
        )
        return record, returns


# =============================================================================
# ROUNDING HELPERS
# =============================================================================

def _optional_percent(value: float | None, label: str) -> Decimal | None:
    if value is None:
        return None
    return to_percent(value, PERCENTAGE_PRECISION, label)


def _optional_price(value: float | None, label: str) -> Decimal | None:
    if value is None:
        return None
    return to_decimal(value, PRICE_PRECISION, label)


def _rolling_period(stats: RollingWindowStats | None) -> RollingPeriodMetrics | None:
    if stats is None:
        return None
    return RollingPeriodMetrics(
        mean=to_decimal(stats.mean, PRICE_PRECISION, "rolling mean"),
        std_dev=to_decimal(stats.std_dev, STD_DEV_PRECISION, "rolling std_dev"),
        window_return=to_percent(stats.window_return, PERCENTAGE_PRECISION, "rolling return"),
        volatility=to_percent(stats.volatility, PERCENTAGE_PRECISION, "rolling volatility"),
    )
