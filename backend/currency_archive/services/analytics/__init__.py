# backend/currency_archive/services/analytics/__init__.py
"""
Analytics Package.

Time-series analytics over EUR-quoted exchange rates:
- Returns (simple, log, geometric cumulative, annualized)
- Risk (volatility, drawdown, historical and parametric VaR)
- Technical indicators (momentum, SMA, z-score)
- Rolling windows (trailing and date-sliding)
- Cross-currency correlation

Architecture:
    analytics/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Working and result dataclasses
    ├── statistics.py            # Mean, population std-dev, variance, Pearson
    ├── returns.py               # Return calculations
    ├── risk.py                  # Volatility, drawdown, VaR
    ├── momentum.py              # Momentum, SMA, z-score
    ├── rolling.py               # Trailing and date-sliding windows
    ├── correlation.py           # Cross-currency correlation pass
    ├── metrics.py               # MetricsAssembler (Sharpe, units, rounding)
    └── service.py               # FinancialAnalyticsService (orchestrator)

Data Flow:
    RateArchive (EUR-quoted)
        ↓
    BaseConverter  (per date)
        ↓
    SeriesCollector (range, parallel per date)
        ↓
    ┌─────────────────────────────────────────┐
    │       FinancialAnalyticsService         │
    │  ┌─────────────┐  ┌─────────────────┐   │
    │  │ Returns     │  │ Risk            │   │
    │  │ • simple    │  │ • volatility    │   │
    │  │ • log       │  │ • drawdown      │   │
    │  │ • cumulative│  │ • VaR           │   │
    │  └─────────────┘  └─────────────────┘   │
    │  ┌─────────────┐  ┌─────────────────┐   │
    │  │ Momentum    │  │ Rolling         │   │
    │  └─────────────┘  └─────────────────┘   │
    │          ↓ MetricsAssembler ↓           │
    │          ↓ (barrier)                    │
    │        Correlation pass                 │
    └─────────────────────────────────────────┘
        ↓
    FinancialMetricsResult (sorted by currency)

The orchestrator lives in ``analytics.service`` and is imported from there
directly, which keeps this package importable by the collection layer.
"""

from currency_archive.services.analytics.correlation import add_correlations
from currency_archive.services.analytics.metrics import MetricsAssembler, calculate_sharpe_ratio
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
    calculate_simple_returns,
)
from currency_archive.services.analytics.risk import (
    calculate_drawdowns,
    calculate_historical_var,
    calculate_parametric_var,
    calculate_var,
    calculate_volatility,
)
from currency_archive.services.analytics.rolling import (
    RollingWindowCalculator,
    calculate_rolling_metrics,
    calculate_rolling_window,
)
from currency_archive.services.analytics.statistics import (
    calculate_mean,
    calculate_pearson_correlation,
    calculate_population_std_dev,
    calculate_variance,
)
from currency_archive.services.analytics.types import (
    AnalyticsConfig,
    CurrencyMetrics,
    FinancialMetricsResult,
    PriceSeries,
    ReturnSeries,
    RollingAverageData,
    RollingMetrics,
    RollingMetricsResult,
    RollingPeriodMetrics,
    RollingWindow,
)

__all__ = [
    # Types
    "AnalyticsConfig",
    "CurrencyMetrics",
    "FinancialMetricsResult",
    "PriceSeries",
    "ReturnSeries",
    "RollingAverageData",
    "RollingMetrics",
    "RollingMetricsResult",
    "RollingPeriodMetrics",
    "RollingWindow",
    # Statistics
    "calculate_mean",
    "calculate_population_std_dev",
    "calculate_variance",
    "calculate_pearson_correlation",
    # Returns
    "calculate_simple_returns",
    "calculate_log_returns",
    "build_return_series",
    "calculate_cumulative_return",
    "annualize_return",
    # Risk
    "calculate_volatility",
    "calculate_drawdowns",
    "calculate_historical_var",
    "calculate_parametric_var",
    "calculate_var",
    # Momentum
    "calculate_momentum",
    "calculate_sma",
    "calculate_z_score",
    # Rolling
    "calculate_rolling_window",
    "calculate_rolling_metrics",
    "RollingWindowCalculator",
    # Assembly
    "MetricsAssembler",
    "calculate_sharpe_ratio",
    "add_correlations",
]
