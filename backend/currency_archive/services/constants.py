# backend/currency_archive/services/constants.py
"""
Centralized constants for the rate archive and analytics services.

Single source of truth for conventions that must agree across modules:
annualization factor, VaR parameters, indicator periods, rolling window
sizes and output precisions.

Usage:
    from currency_archive.services.constants import (
        TRADING_DAYS_PER_YEAR,
        DEFAULT_RISK_FREE_RATE,
        PRICE_PRECISION,
    )
"""

from decimal import Decimal


# =============================================================================
# ARCHIVE CONVENTIONS
# =============================================================================

# Every rate at rest is quoted against this currency and equals 1 for itself
BASE_CURRENCY: str = "EUR"

# ISO 4217 codes are three letters
CURRENCY_CODE_LENGTH: int = 3

# Daily files are named DD-MM-YYYY.json below <root>/<year>/<month>/
ARCHIVE_FILE_DATE_FORMAT: str = "%d-%m-%Y"
ARCHIVE_FILE_SUFFIX: str = ".json"


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Trading days per year, used for every annualization in the engine
# (volatility scaling and the annualized-return exponent)
TRADING_DAYS_PER_YEAR: int = 252

# Calendar days per year. Only used in range validation messages; the
# analytics never annualize with it
CALENDAR_DAYS_PER_YEAR: int = 365


# =============================================================================
# RISK-FREE RATE
# =============================================================================

# Annual risk-free rate for the Sharpe ratio, as a decimal (4%)
# Overridable through the RISK_FREE_RATE setting
DEFAULT_RISK_FREE_RATE: Decimal = Decimal("0.04")


# =============================================================================
# RISK CALCULATION CONSTANTS
# =============================================================================

# Minimum number of daily returns before VaR is reported (else 0)
MIN_VAR_SAMPLE_SIZE: int = 20

# Left-tail percentile for 95% VaR
VAR_CONFIDENCE_PERCENTILE: float = 0.05

# One-sided z-value used for parametric 95% VaR
VAR_Z_SCORE_95: float = 1.65

# Minimum prices for any per-currency statistic
MIN_PRICES_FOR_METRICS: int = 2


# =============================================================================
# TECHNICAL INDICATORS
# =============================================================================

# Momentum look-backs in trading days (about 3 and 12 months)
MOMENTUM_3M_PERIOD: int = 63
MOMENTUM_12M_PERIOD: int = 252

# Simple moving average lengths
SMA_SHORT_PERIOD: int = 50
SMA_LONG_PERIOD: int = 200

# Trailing windows reported in the rolling block of every metrics record
ROLLING_WINDOW_SIZES: tuple[int, ...] = (30, 60, 90, 180)


# =============================================================================
# DECIMAL PRECISION CONSTANTS
# =============================================================================
# Applied once, when a result record is built. Intermediate values are
# never rounded.

# Price-level values (rates, min/max/average, change, SMA): 6 places
PRICE_PRECISION: Decimal = Decimal("0.000001")

# Percentages and ratios (returns, volatility, VaR, Sharpe, z-score,
# correlation): 4 places
PERCENTAGE_PRECISION: Decimal = Decimal("0.0001")

# Standard deviation of price levels: 8 places
STD_DEV_PRECISION: Decimal = Decimal("0.00000001")

# Variance of price levels: 10 places
VARIANCE_PRECISION: Decimal = Decimal("0.0000000001")


# =============================================================================
# UTILITY CONSTANTS
# =============================================================================

ZERO: Decimal = Decimal("0")
ONE: Decimal = Decimal("1")
HUNDRED: Decimal = Decimal("100")


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

# Rate lookups (historical, timeseries, fluctuation, conversion)
RATE_LIMIT_DEFAULT: str = "100/minute"

# Analytics are CPU-intensive and fan out on the worker pool
RATE_LIMIT_ANALYTICS: str = "30/minute"

# Monitoring tools poll health frequently
RATE_LIMIT_HEALTH: str = "300/minute"
