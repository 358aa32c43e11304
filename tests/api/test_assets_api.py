"""
API tests for asset endpoints.

Tests cover:
- List active assets
- Quote for known, unknown and store-failing tickers
- Price history with range filter
- Error body shape
- Health and root endpoints
"""

from decimal import Decimal
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from fincore.api.deps import get_asset_repo
from fincore.main import app


# =============================================================================
# ASSET LIST TESTS
# =============================================================================


class TestListAssetsAPI:
    """Tests for GET /api/assets."""

    def test_lists_active_assets(self, client: TestClient, asset_factory):
        """
        GIVEN two active assets and one inactive
        WHEN I GET /api/assets
        THEN only the active ones are returned, sorted by ticker
        """
        asset_factory("VALE3", price=Decimal("65.80"))
        asset_factory("PETR4")
        asset_factory("ITUB4", price=Decimal("22.30"), active=False)

        response = client.get("/api/assets")

        assert response.status_code == 200
        data = response.json()
        assert [a["ticker"] for a in data] == ["PETR4", "VALE3"]
        assert Decimal(data[0]["current_price"]) == Decimal("25.50")
        assert data[0]["active"] is True

    def test_empty_store(self, client: TestClient):
        response = client.get("/api/assets")

        assert response.status_code == 200
        assert response.json() == []


# =============================================================================
# QUOTE TESTS
# =============================================================================


class TestQuoteAPI:
    """Tests for GET /api/assets/{ticker}/quote."""

    def test_quote_for_known_ticker(self, client: TestClient, sample_asset):
        response = client.get("/api/assets/petr4/quote")

        assert response.status_code == 200
        data = response.json()
        assert data["ticker"] == "PETR4"
        assert data["name"] == "PETR4 Test Asset"
        assert data["source"] == "STORE"
        assert Decimal(data["current_price"]) > 0
        assert Decimal(data["previous_close"]) == Decimal("25.50")

    def test_quote_for_unknown_ticker_is_404(self, client: TestClient):
        """
        GIVEN no asset XXXX
        WHEN I GET its quote
        THEN the response is 404 with the error body
        """
        response = client.get("/api/assets/XXXX/quote")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "NOT_FOUND"
        assert "XXXX" in body["message"]

    def test_quote_falls_back_when_store_fails(self, client: TestClient):
        """
        GIVEN the asset store raises on every lookup
        WHEN I GET a quote
        THEN the response is 200 with a FALLBACK quote at 100.00
        """
        failing_repo = MagicMock()
        failing_repo.find_by_ticker.side_effect = ConnectionError("db down")
        app.dependency_overrides[get_asset_repo] = lambda: failing_repo

        response = client.get("/api/assets/PETR4/quote")

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "FALLBACK"
        assert Decimal(data["current_price"]) == Decimal("100.00")
        assert data["name"] == "Unknown Asset"


# =============================================================================
# HISTORY TESTS
# =============================================================================


class TestHistoryAPI:
    """Tests for GET /api/assets/{ticker}/history."""

    def test_history_with_range(self, client: TestClient, history_factory):
        history_factory("PETR4", [str(20 + i) for i in range(40)])

        response = client.get("/api/assets/PETR4/history", params={"range": "10y"})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 40
        assert Decimal(data[0]["close"]) == Decimal("59")
        assert data[0]["timestamp"] > data[-1]["timestamp"]

    def test_history_for_unknown_ticker_is_empty(self, client: TestClient):
        response = client.get("/api/assets/XXXX/history")

        assert response.status_code == 200
        assert response.json() == []


# =============================================================================
# SERVICE ENDPOINT TESTS
# =============================================================================


class TestServiceEndpoints:
    """Tests for /health and /."""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client: TestClient):
        data = client.get("/").json()

        assert data["app"] == "Financial Analytics Core"
        assert data["docs"] == "/docs"
