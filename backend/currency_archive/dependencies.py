# backend/currency_archive/dependencies.py
"""
Dependency injection module for FastAPI services.

The rate archive, the worker pool and the analytics conventions are process
singletons shared across all requests. Services are thin wrappers around
them and are built per request.

Everything is lazily initialized on first use to avoid import-time side
effects (loading the archive reads every file under DATA_PATH).

Usage in routers:
    from currency_archive.dependencies import get_historical_rates_service

    @router.get("/historical")
    def get_historical(
        service: HistoricalRatesService = Depends(get_historical_rates_service),
    ):
        ...

Tests replace ``get_rate_archive`` (and optionally ``get_executor``) through
``app.dependency_overrides``.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from fastapi import Depends

from currency_archive.config import settings
from currency_archive.services.analytics.service import FinancialAnalyticsService
from currency_archive.services.analytics.types import AnalyticsConfig
from currency_archive.services.conversion_service import CurrencyConversionService
from currency_archive.services.historical_rates_service import HistoricalRatesService
from currency_archive.services.rate_archive import RateArchive

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETONS
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_rate_archive (no deps)
# 2. get_executor (no deps)
# 3. get_analytics_config (no deps)
# 4. service factories (depend on all of the above)


@lru_cache(maxsize=1)
def get_rate_archive() -> RateArchive:
    """
    Get the singleton RateArchive.

    Loads every file under ``settings.data_path`` on first call. With
    LOAD_ARCHIVE_ON_STARTUP disabled the archive starts empty.
    """
    if not settings.load_archive_on_startup:
        logger.info("Archive loading disabled, starting with an empty archive")
        return RateArchive({})

    logger.info(f"Loading rate archive from {settings.data_path}")
    return RateArchive.from_directory(settings.data_path)


@lru_cache(maxsize=1)
def get_executor() -> ThreadPoolExecutor:
    """
    Get the shared analytics worker pool.

    Sized by ANALYTICS_MAX_WORKERS. Shut down by the application lifespan.
    """
    logger.debug(f"Initializing analytics pool with {settings.analytics_max_workers} workers")
    return ThreadPoolExecutor(
        max_workers=settings.analytics_max_workers,
        thread_name_prefix="analytics",
    )


@lru_cache(maxsize=1)
def get_analytics_config() -> AnalyticsConfig:
    return AnalyticsConfig(risk_free_rate=settings.risk_free_rate)


# =============================================================================
# SERVICE FACTORIES
# =============================================================================

def get_historical_rates_service(
        archive: RateArchive = Depends(get_rate_archive),
        executor: ThreadPoolExecutor = Depends(get_executor),
) -> HistoricalRatesService:
    return HistoricalRatesService(
        archive,
        executor,
        timeout=settings.analytics_timeout_seconds,
        max_range_days=settings.max_range_days,
    )


def get_analytics_service(
        archive: RateArchive = Depends(get_rate_archive),
        executor: ThreadPoolExecutor = Depends(get_executor),
        config: AnalyticsConfig = Depends(get_analytics_config),
) -> FinancialAnalyticsService:
    return FinancialAnalyticsService(
        archive,
        executor,
        config=config,
        timeout=settings.analytics_timeout_seconds,
        max_range_days=settings.max_range_days,
    )


def get_conversion_service(
        archive: RateArchive = Depends(get_rate_archive),
) -> CurrencyConversionService:
    return CurrencyConversionService(archive)


# =============================================================================
# LIFECYCLE
# =============================================================================

def shutdown_executor() -> None:
    """Shut the worker pool down, cancelling anything still queued."""
    if get_executor.cache_info().currsize == 0:
        return
    get_executor().shutdown(wait=True, cancel_futures=True)
    get_executor.cache_clear()
    logger.info("Analytics pool shut down")


def clear_service_caches() -> None:
    """
    Clear all singleton caches.

    Useful for testing or to reload the archive from disk.
    """
    shutdown_executor()
    get_rate_archive.cache_clear()
    get_analytics_config.cache_clear()
    logger.info("Cleared all service singleton caches")
