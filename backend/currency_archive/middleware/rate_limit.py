# backend/currency_archive/middleware/rate_limit.py
"""
Per-client request limits (slowapi).

Analytics endpoints fan out over the shared worker pool, so they get a
tighter limit than plain lookups. Limits live in services/constants.py:

    RATE_LIMIT_DEFAULT    lookups, conversion, catalogue
    RATE_LIMIT_ANALYTICS  rolling and financial metrics
    RATE_LIMIT_HEALTH     probes

RATE_LIMIT_ENABLED=false turns the limiter off (the test suite does).

=============================================================================
CLIENT KEY
=============================================================================

Requests are keyed by client address. Behind proxies the address comes
from X-Forwarded-For, read right to left: every hop appended by a trusted
proxy (TRUSTED_PROXY_IPS, addresses or CIDR networks) is skipped and the
first untrusted hop is the client. A client cannot dodge its limit by
sending its own X-Forwarded-For, because that value sits left of the
hops our proxies append.

    peer 10.0.0.5 (trusted), X-Forwarded-For: 6.6.6.6, 203.0.113.7
    -> key 203.0.113.7

Usage:
    @router.get("/financial-metrics")
    @limiter.limit(RATE_LIMIT_ANALYTICS)
    def get_financial_metrics(request: Request, ...):
        ...
"""

import ipaddress
import logging
from functools import lru_cache

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from currency_archive.config import settings
from currency_archive.services.constants import (
    RATE_LIMIT_ANALYTICS,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_HEALTH,
)

logger = logging.getLogger(__name__)

# Used when the exceeded limit does not say how long its window is
DEFAULT_RETRY_AFTER_SECONDS = 60

IpNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


# =============================================================================
# PROXY TRUST
# =============================================================================

@lru_cache(maxsize=8)
def _parse_networks(entries: tuple[str, ...]) -> tuple[IpNetwork, ...]:
    networks = []
    for entry in entries:
        try:
            networks.append(ipaddress.ip_network(entry.strip(), strict=False))
        except ValueError:
            logger.warning(f"Ignoring invalid trusted proxy entry: {entry!r}")
    return tuple(networks)


def is_trusted_proxy(address: str) -> bool:
    """True if ``address`` belongs to a configured proxy (or all are trusted)."""
    if settings.trust_proxy_headers:
        return True
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False
    return any(ip in network for network in _parse_networks(tuple(settings.trusted_proxy_ips)))


def client_key(request: Request) -> str:
    """Rate limit key: the nearest address not owned by a trusted proxy."""
    peer = get_remote_address(request)
    if not is_trusted_proxy(peer):
        return peer

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        hops = [hop.strip() for hop in forwarded_for.split(",") if hop.strip()]
        for hop in reversed(hops):
            if not is_trusted_proxy(hop):
                return hop
        if hops:
            return hops[0]

    return request.headers.get("X-Real-IP") or peer


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=client_key,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    # slowapi wraps the `limits` item that was hit; its expiry is the window length
    limit_item = getattr(getattr(exc, "limit", None), "limit", None)
    if limit_item is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    return int(limit_item.get_expiry())


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the ErrorDetail shape, with Retry-After set to the limit window."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"
    retry_after = _retry_after_seconds(exc)

    logger.warning(f"Rate limit {limit_info} hit by {client_key(request)} on {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests ({limit_info}), retry in {retry_after}s",
            "details": {"limit": limit_info, "retry_after": retry_after},
        },
        headers={"Retry-After": str(retry_after)},
    )


__all__ = [
    "client_key",
    "is_trusted_proxy",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_ANALYTICS",
    "RATE_LIMIT_HEALTH",
]
