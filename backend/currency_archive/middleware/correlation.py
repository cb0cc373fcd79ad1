# backend/currency_archive/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For each request the middleware:
1. Takes the correlation ID from X-Correlation-ID, then X-Request-ID,
   or generates a UUID4 when neither is usable
2. Stores it in context so every log line of the request carries it,
   including lines written by analytics worker threads
3. Echoes it back in the X-Correlation-ID response header

Incoming IDs longer than MAX_CORRELATION_ID_LENGTH or containing
non-printable characters are replaced with a fresh UUID, so clients
cannot inject arbitrary text into the logs.

Client Usage:
    curl -H "X-Correlation-ID: my-trace-123" http://localhost:8000/health
    # X-Correlation-ID: my-trace-123
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from currency_archive.utils.context import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
MAX_CORRELATION_ID_LENGTH = 128


def _is_usable_id(value: str | None) -> bool:
    return bool(value) and len(value) <= MAX_CORRELATION_ID_LENGTH and value.isprintable()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Manages correlation IDs and logs one line per completed request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
            return response

        finally:
            clear_correlation_id()

    def _get_correlation_id(self, request: Request) -> str:
        for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
            value = request.headers.get(header)
            if _is_usable_id(value):
                return value

        return str(uuid.uuid4())
