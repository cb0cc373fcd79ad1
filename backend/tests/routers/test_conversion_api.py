# backend/tests/routers/test_conversion_api.py
"""
Integration tests for conversion and catalogue endpoints.

Endpoints:
- GET /api/v1/convert
- GET /api/v1/currencies
- GET /api/v1/dataset
"""

from fastapi.testclient import TestClient

BASE = "/api/v1"


class TestConvertEndpoint:
    """Tests for GET /api/v1/convert."""

    def test_eur_to_usd(self, client: TestClient):
        response = client.get(
            f"{BASE}/convert",
            params={"from": "EUR", "to": "USD", "amount": "100", "date": "2024-01-02"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["from_currency"] == "EUR"
        assert data["to_currency"] == "USD"
        assert data["rate"] == "1.100000"
        assert data["result"] == "110.000000"

    def test_negative_amount(self, client: TestClient):
        response = client.get(
            f"{BASE}/convert",
            params={"from": "EUR", "to": "USD", "amount": "-5", "date": "2024-01-02"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidAmountError"
        assert data["details"]["field"] == "amount"

    def test_currency_missing_on_date(self, client: TestClient):
        response = client.get(
            f"{BASE}/convert",
            params={"from": "EUR", "to": "JPY", "amount": "1", "date": "2024-01-08"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "RateNotFoundError"

    def test_missing_parameter(self, client: TestClient):
        response = client.get(
            f"{BASE}/convert",
            params={"from": "EUR", "amount": "1", "date": "2024-01-02"},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert isinstance(data["details"], list)
        assert any("to" in d["field"] for d in data["details"])

    def test_non_numeric_amount(self, client: TestClient):
        response = client.get(
            f"{BASE}/convert",
            params={"from": "EUR", "to": "USD", "amount": "ten", "date": "2024-01-02"},
        )

        assert response.status_code == 422


class TestCatalogueEndpoints:
    """Tests for GET /api/v1/currencies and GET /api/v1/dataset."""

    def test_currencies_union(self, client: TestClient):
        response = client.get(f"{BASE}/currencies")

        assert response.status_code == 200
        data = response.json()
        assert data["date"] is None
        assert data["currencies"] == ["EUR", "GBP", "JPY", "USD"]
        assert data["count"] == 4

    def test_currencies_on_date(self, client: TestClient):
        response = client.get(f"{BASE}/currencies", params={"date": "2024-01-08"})

        assert response.status_code == 200
        assert response.json()["currencies"] == ["EUR", "GBP", "USD"]

    def test_dataset(self, client: TestClient):
        response = client.get(f"{BASE}/dataset")

        assert response.status_code == 200
        data = response.json()
        assert data["is_loaded"] is True
        assert data["total_dates"] == 5
        assert data["start_date"] == "2024-01-02"
        assert data["end_date"] == "2024-01-08"
        assert data["currency_count"] == 4

    def test_dataset_empty_archive(self, empty_client: TestClient):
        response = empty_client.get(f"{BASE}/dataset")

        assert response.status_code == 503
        assert response.json()["error"] == "ArchiveNotReadyError"
