# backend/currency_archive/routers/__init__.py
"""
API routers for Currency Archive Analytics.

Each router handles a specific domain (all under /api/v1):
- rates: Historical rates, timeseries, fluctuation, rate history
- analytics: Rolling windows and financial metrics
- conversion: Amount conversion and archive catalogue
"""

from currency_archive.routers.analytics import router as analytics_router
from currency_archive.routers.conversion import router as conversion_router
from currency_archive.routers.rates import router as rates_router

__all__ = [
    "rates_router",
    "analytics_router",
    "conversion_router",
]
