# backend/tests/test_correlation_id.py
"""
Tests for correlation ID middleware and context management.
"""

from fastapi.testclient import TestClient

from currency_archive.middleware.correlation import MAX_CORRELATION_ID_LENGTH
from currency_archive.utils.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        """Should return None when correlation ID is not set."""
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        """Should set and retrieve correlation ID."""
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_clear_correlation_id(self):
        """Should clear correlation ID."""
        set_correlation_id("test-correlation-456")
        clear_correlation_id()
        assert get_correlation_id() is None


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_correlation_id_when_not_provided(self, client: TestClient):
        """Should generate correlation ID when not provided in request."""
        response = client.get("/health")

        assert response.status_code == 200
        correlation_id = response.headers["X-Correlation-ID"]
        assert len(correlation_id) == 36  # UUID length
        assert correlation_id.count("-") == 4

    def test_uses_provided_correlation_id(self, client: TestClient):
        """Should use correlation ID from request header."""
        custom_id = "my-custom-trace-id-123"
        response = client.get("/health", headers={"X-Correlation-ID": custom_id})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == custom_id

    def test_uses_request_id_header_as_fallback(self, client: TestClient):
        """Should use X-Request-ID header if X-Correlation-ID not provided."""
        custom_id = "my-request-id-456"
        response = client.get("/health", headers={"X-Request-ID": custom_id})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == custom_id

    def test_correlation_id_takes_precedence(self, client: TestClient):
        response = client.get(
            "/health",
            headers={"X-Correlation-ID": "primary", "X-Request-ID": "secondary"},
        )

        assert response.headers["X-Correlation-ID"] == "primary"

    def test_overlong_id_replaced(self, client: TestClient):
        """Oversized IDs are not echoed into logs or headers."""
        long_id = "x" * (MAX_CORRELATION_ID_LENGTH + 1)
        response = client.get("/health", headers={"X-Correlation-ID": long_id})

        returned = response.headers["X-Correlation-ID"]
        assert returned != long_id
        assert len(returned) == 36

    def test_each_request_gets_own_id(self, client: TestClient):
        first = client.get("/health").headers["X-Correlation-ID"]
        second = client.get("/health").headers["X-Correlation-ID"]

        assert first != second

    def test_context_cleared_after_request(self, client: TestClient):
        client.get("/health", headers={"X-Correlation-ID": "leak-check"})

        assert get_correlation_id() is None
