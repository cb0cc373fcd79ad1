# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- A small in-memory rate archive (one business week plus the next Monday)
- A worker pool, shut down after each test
- Services wired to both
- A TestClient with the archive and pool injected through
  dependency overrides

Archive layout (EUR-quoted):

    date        USD    GBP    JPY
    2024-01-02  1.10   0.85   160.0
    2024-01-03  1.12   0.86   161.0
    2024-01-04  1.11   0.855  159.5
    2024-01-05  1.15   0.87   162.0
    (weekend 2024-01-06 / 2024-01-07 absent)
    2024-01-08  1.14   0.865  -        <- JPY missing
"""

import os

# Set required environment variables BEFORE importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOAD_ARCHIVE_ON_STARTUP", "false")
os.environ.setdefault("APP_NAME", "Test App")

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from currency_archive.dependencies import get_executor, get_rate_archive
from currency_archive.main import app
from currency_archive.services.analytics.service import FinancialAnalyticsService
from currency_archive.services.conversion_service import CurrencyConversionService
from currency_archive.services.historical_rates_service import HistoricalRatesService
from currency_archive.services.rate_archive import RateArchive


# =============================================================================
# SAMPLE DATA
# =============================================================================

TUE = date(2024, 1, 2)
WED = date(2024, 1, 3)
THU = date(2024, 1, 4)
FRI = date(2024, 1, 5)
SAT = date(2024, 1, 6)
SUN = date(2024, 1, 7)
MON = date(2024, 1, 8)

SAMPLE_RATES = {
    TUE: {"USD": Decimal("1.10"), "GBP": Decimal("0.85"), "JPY": Decimal("160.0")},
    WED: {"USD": Decimal("1.12"), "GBP": Decimal("0.86"), "JPY": Decimal("161.0")},
    THU: {"USD": Decimal("1.11"), "GBP": Decimal("0.855"), "JPY": Decimal("159.5")},
    FRI: {"USD": Decimal("1.15"), "GBP": Decimal("0.87"), "JPY": Decimal("162.0")},
    MON: {"USD": Decimal("1.14"), "GBP": Decimal("0.865")},
}


# =============================================================================
# ARCHIVE AND POOL FIXTURES
# =============================================================================

@pytest.fixture
def archive() -> RateArchive:
    """In-memory archive with the sample week."""
    return RateArchive.from_mapping(SAMPLE_RATES)


@pytest.fixture
def empty_archive() -> RateArchive:
    return RateArchive({})


@pytest.fixture
def executor() -> Iterator[ThreadPoolExecutor]:
    """Small worker pool, shut down after the test."""
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-analytics")
    yield pool
    pool.shutdown(wait=True, cancel_futures=True)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def historical_service(archive, executor) -> HistoricalRatesService:
    return HistoricalRatesService(archive, executor, timeout=10)


@pytest.fixture
def analytics_service(archive, executor) -> FinancialAnalyticsService:
    return FinancialAnalyticsService(archive, executor, timeout=10)


@pytest.fixture
def conversion_service(archive) -> CurrencyConversionService:
    return CurrencyConversionService(archive)


# =============================================================================
# API FIXTURES
# =============================================================================

def _make_client(archive: RateArchive, executor: ThreadPoolExecutor) -> Iterator[TestClient]:
    app.dependency_overrides[get_rate_archive] = lambda: archive
    app.dependency_overrides[get_executor] = lambda: executor

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def client(archive, executor) -> Iterator[TestClient]:
    """TestClient serving the sample archive."""
    yield from _make_client(archive, executor)


@pytest.fixture
def empty_client(empty_archive, executor) -> Iterator[TestClient]:
    """TestClient serving an empty archive."""
    yield from _make_client(empty_archive, executor)
