"""
API tests for the growth analysis endpoint.

Providers are replaced by the deterministic fakes wired in conftest:
RELIANCE closes flat at 120 and gold at 6000 per gram.
"""

import pytest
from fastapi.testclient import TestClient


WINDOW = {"start": "2024-06-06", "end": "2024-06-15"}


@pytest.fixture
def reliance(client: TestClient) -> dict:
    """10 RELIANCE @ 100, bought well before the window."""
    asset = client.post("/api/assets", json={
        "symbol": "RELIANCE",
        "name": "Reliance Industries",
        "type": "STOCK",
        "quantity": "10",
        "averagePrice": "100",
        "investedValue": "1000",
    }).json()
    client.post("/api/transactions", json={
        "assetId": asset["id"], "type": "BUY", "quantity": "10", "price": "100", "date": "2024-05-07T10:00:00",
    })
    return asset


class TestGrowthAPI:
    """Tests for GET /api/analysis/growth."""

    def test_flat_price_series(self, client: TestClient, reliance: dict):
        """
        GIVEN one stock held through the window at a flat 120
        WHEN I GET the growth series for 10 days
        THEN every day reports value 1200, invested 1000, profit 200
        """
        response = client.get("/api/analysis/growth", params=WINDOW)

        assert response.status_code == 200
        body = response.json()
        assert body["start"] == "2024-06-06"
        assert body["end"] == "2024-06-15"
        assert len(body["data"]) == 10
        for point in body["data"]:
            assert point["totalValue"] == pytest.approx(1200.0)
            assert point["investedValue"] == pytest.approx(1000.0)
            assert point["profit"] == pytest.approx(200.0)

    def test_breakdown_shape(self, client: TestClient, reliance: dict):
        point = client.get("/api/analysis/growth", params=WINDOW).json()["data"][0]

        assert point["date"] == "2024-06-06"
        assert point["assetsBreakdown"] == [{
            "name": "Reliance Industries",
            "symbol": "RELIANCE",
            "type": "STOCK",
            "quantity": 10.0,
            "price": 120.0,
            "avgPrice": 100.0,
            "value": 1200.0,
            "invested": 1000.0,
        }]

    def test_gold_joins_the_series(self, client: TestClient, reliance: dict):
        client.post("/api/gold", json={"totalGrams": 2, "pricePerGram": 5500})

        point = client.get("/api/analysis/growth", params=WINDOW).json()["data"][-1]

        assert point["totalValue"] == pytest.approx(1200.0 + 12000.0)
        assert point["investedValue"] == pytest.approx(1000.0 + 11000.0)

    def test_empty_portfolio_returns_empty_series(self, client: TestClient):
        response = client.get("/api/analysis/growth")

        assert response.status_code == 200
        assert response.json() == {"data": [], "start": None, "end": None}

    def test_start_after_end_returns_400(self, client: TestClient, reliance: dict):
        response = client.get("/api/analysis/growth", params={"start": "2024-06-15", "end": "2024-06-01"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_repeat_requests_are_identical(self, client: TestClient, reliance: dict):
        first = client.get("/api/analysis/growth", params=WINDOW).json()
        second = client.get("/api/analysis/growth", params=WINDOW).json()

        assert first == second
