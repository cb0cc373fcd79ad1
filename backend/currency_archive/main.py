# backend/currency_archive/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application with a lifespan that loads the rate
  archive and shuts the analytics pool down
- Registers global exception handlers (domain exceptions -> HTTP)
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from currency_archive.config import settings
from currency_archive.dependencies import get_rate_archive, shutdown_executor
from currency_archive.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from currency_archive.routers import analytics_router, conversion_router, rates_router
from currency_archive.schemas.errors import ErrorDetail, ValidationErrorDetail
from currency_archive.schemas.rates import HealthResponse
from currency_archive.services.exceptions import (
    AnalyticsTimeoutError,
    ArchiveNotReadyError,
    InsufficientDataError,
    NotFoundError,
    RateNotFoundError,
    ServiceError,
    ValidationError,
)
from currency_archive.services.rate_archive import RateArchive
from currency_archive.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the archive before serving; release the worker pool on exit."""
    if settings.load_archive_on_startup:
        archive = get_rate_archive()
        date_range = archive.get_date_range()
        if date_range is None:
            logger.warning(f"Rate archive at {settings.data_path} is empty")
        else:
            logger.info(
                f"Rate archive ready: {archive.total_dates} dates "
                f"({date_range[0]} to {date_range[1]})"
            )
    yield
    shutdown_executor()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Historical EUR reference rates, conversion and currency analytics API",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Starlette dispatches to the handler of the closest class in the
# exception's MRO, so ServiceError only receives what the specific
# handlers below do not claim.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _error_response(
        status_code: int,
        exc: Exception,
        details: dict | None = None,
        error: str | None = None,
) -> JSONResponse:
    body = ErrorDetail(error=error or type(exc).__name__, message=str(exc), details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(RateNotFoundError)
async def rate_not_found_handler(request: Request, exc: RateNotFoundError) -> JSONResponse:
    """404: date absent from the archive, or currency absent on that date."""
    logger.info(f"{request.url.path}: {exc}")
    return _error_response(
        404, exc, {"date": exc.rate_date.isoformat(), "currency": exc.currency}
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"{request.url.path}: {exc}")
    details = None
    if exc.resource_type:
        details = {"resource_type": exc.resource_type, "resource_id": exc.resource_id}
    return _error_response(404, exc, details)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """400: bad range, negative amount, malformed currency code."""
    logger.info(f"Rejected {request.url.path}: {exc}")
    return _error_response(400, exc, {"field": exc.field} if exc.field else None)


@app.exception_handler(InsufficientDataError)
async def insufficient_data_handler(
    request: Request, exc: InsufficientDataError
) -> JSONResponse:
    """422: fewer dates with data than the window needs."""
    logger.info(f"{request.url.path}: {exc}")
    return _error_response(422, exc, {"found": exc.found, "required": exc.required})


@app.exception_handler(AnalyticsTimeoutError)
async def analytics_timeout_handler(
    request: Request, exc: AnalyticsTimeoutError
) -> JSONResponse:
    logger.error(f"{request.url.path}: {exc}")
    return _error_response(
        503, exc, {"stage": exc.stage, "timeout_seconds": exc.timeout_seconds}
    )


@app.exception_handler(ArchiveNotReadyError)
async def archive_not_ready_handler(
    request: Request, exc: ArchiveNotReadyError
) -> JSONResponse:
    logger.warning(f"{request.url.path}: {exc}")
    return _error_response(503, exc)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error(f"Unhandled service error on {request.url.path}: {exc}")
    return _error_response(500, exc, error="ServiceError")


# Names for framework-raised HTTP errors (unknown route, wrong method, ...)
HTTP_ERROR_NAMES = {
    400: "BadRequestError",
    404: "NotFoundError",
    405: "MethodNotAllowedError",
    429: "RateLimitError",
    500: "InternalServerError",
    503: "ServiceUnavailableError",
}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the ErrorDetail shape instead of {"detail": ...}."""
    body = ErrorDetail(
        error=HTTP_ERROR_NAMES.get(exc.status_code, "HTTPError"),
        message=str(exc.detail) if exc.detail else "An error occurred",
        details=None,
    )
    return JSONResponse(
        status_code=exc.status_code, content=body.model_dump(), headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422: missing or unparseable query/path parameters, one entry per problem."""
    problems = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    body = ValidationErrorDetail(
        error="ValidationError",
        message=f"{len(problems)} invalid request parameter(s)",
        details=problems,
    )
    return JSONResponse(status_code=422, content=body.model_dump())


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(rates_router)  # /api/v1/historical, /timeseries, /fluctuation, /rates/*
app.include_router(analytics_router)  # /api/v1/rolling-metrics, /financial-metrics
app.include_router(conversion_router)  # /api/v1/convert, /currencies, /dataset


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    return {
        "name": settings.app_name,
        "version": app.version,
        "docs": "/docs",
        "api": "/api/v1",
    }


@app.get("/health", tags=["Health"], response_model=HealthResponse)
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request, archive: RateArchive = Depends(get_rate_archive)):
    """
    Readiness probe.

    200 once the archive holds at least one date, 503 while it is empty
    so load balancers keep traffic away.
    """
    date_range = archive.get_date_range()
    start_date, end_date = date_range if date_range else (None, None)

    body = HealthResponse(
        status="healthy" if archive.is_loaded else "unhealthy",
        archive_loaded=archive.is_loaded,
        total_dates=archive.total_dates,
        start_date=start_date,
        end_date=end_date,
    )

    if not archive.is_loaded:
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    return body


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """Liveness probe: the process is up, archive state is irrelevant."""
    return {"status": "alive"}
