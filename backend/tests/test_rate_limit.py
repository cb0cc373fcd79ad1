# backend/tests/test_rate_limit.py
"""
Tests for the rate limiter's client key and 429 handler.
"""

import asyncio
import json

import pytest
from starlette.requests import Request

from currency_archive.config import settings
from currency_archive.middleware.rate_limit import (
    DEFAULT_RETRY_AFTER_SECONDS,
    client_key,
    is_trusted_proxy,
    rate_limit_exceeded_handler,
)


def _request(peer: str, headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/financial-metrics",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (peer, 52100),
        "query_string": b"",
    }
    return Request(scope)


@pytest.fixture
def proxies(monkeypatch):
    monkeypatch.setattr(settings, "trust_proxy_headers", False)
    monkeypatch.setattr(settings, "trusted_proxy_ips", ["127.0.0.1", "10.0.0.0/8"])


class TestProxyTrust:

    def test_exact_address_and_network(self, proxies):
        assert is_trusted_proxy("127.0.0.1") is True
        assert is_trusted_proxy("10.20.30.40") is True
        assert is_trusted_proxy("203.0.113.7") is False

    def test_garbage_address_untrusted(self, proxies):
        assert is_trusted_proxy("not-an-ip") is False

    def test_invalid_entry_ignored(self, monkeypatch):
        monkeypatch.setattr(settings, "trust_proxy_headers", False)
        monkeypatch.setattr(settings, "trusted_proxy_ips", ["bogus", "192.168.1.1"])

        assert is_trusted_proxy("192.168.1.1") is True


class TestClientKey:

    def test_direct_client_ignores_forwarded_header(self, proxies):
        request = _request("203.0.113.7", {"X-Forwarded-For": "1.2.3.4"})

        assert client_key(request) == "203.0.113.7"

    def test_rightmost_untrusted_hop(self, proxies):
        request = _request(
            "10.0.0.5", {"X-Forwarded-For": "6.6.6.6, 203.0.113.7, 10.0.0.9"}
        )

        assert client_key(request) == "203.0.113.7"

    def test_all_hops_trusted(self, proxies):
        request = _request("10.0.0.5", {"X-Forwarded-For": "10.1.1.1, 10.0.0.9"})

        assert client_key(request) == "10.1.1.1"

    def test_real_ip_fallback(self, proxies):
        request = _request("127.0.0.1", {"X-Real-IP": "198.51.100.2"})

        assert client_key(request) == "198.51.100.2"

    def test_proxy_without_headers(self, proxies):
        assert client_key(_request("127.0.0.1")) == "127.0.0.1"


class TestExceededHandler:

    def test_error_shape(self, proxies):
        class _Exceeded:
            detail = "30 per 1 minute"

        response = asyncio.run(rate_limit_exceeded_handler(_request("203.0.113.7"), _Exceeded()))

        assert response.status_code == 429
        assert response.headers["Retry-After"] == str(DEFAULT_RETRY_AFTER_SECONDS)
        body = json.loads(response.body)
        assert body["error"] == "RateLimitError"
        assert body["details"]["limit"] == "30 per 1 minute"
