"""Integration tests for the protocols API."""

from datetime import timedelta

from config import settings
from utils.dates import utc_today


class TestListProtocols:
    """Tests for GET /api/v1/protocols."""

    def test_returns_all_protocols_sorted(self, client):
        response = client.get("/api/v1/protocols")
        assert response.status_code == 200

        data = response.json()
        assert [p["id"] for p in data] == ["alpha", "beta"]
        assert data[0] == {"id": "alpha", "name": "Alpha", "category": "dex", "blockchain": "Ethereum"}


class TestGetProtocol:
    """Tests for GET /api/v1/protocols/{id}."""

    def test_metadata_and_picker(self, client):
        response = client.get("/api/v1/protocols/alpha")
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == "alpha"
        assert data["metadata"]["name"] == "Alpha"
        assert data["metadata"]["website"] is None
        assert data["protocols"] == {"alpha": "Alpha", "beta": "Beta"}

    def test_fee_cache_covers_default_window(self, client, primary_adapter):
        response = client.get("/api/v1/protocols/alpha")
        data = response.json()

        today = utc_today()
        yesterday = (today - timedelta(days=1)).isoformat()
        first = (today - timedelta(days=settings.DEFAULT_WINDOW_DAYS)).isoformat()

        fee_cache = data["fee_cache"]
        assert list(fee_cache) == ["alpha"]
        assert len(fee_cache["alpha"]) == settings.DEFAULT_WINDOW_DAYS
        assert data["window"] == {"start": first, "end": yesterday}
        assert first in fee_cache["alpha"]
        assert yesterday in fee_cache["alpha"]
        assert all(set(values) == {"fee"} for values in fee_cache["alpha"].values())
        assert len(primary_adapter.calls) == settings.DEFAULT_WINDOW_DAYS

    def test_unknown_protocol_404(self, client):
        response = client.get("/api/v1/protocols/gamma")
        assert response.status_code == 404

    def test_upstream_failure_502(self, client_with_failing_upstream):
        response = client_with_failing_upstream.get("/api/v1/protocols/broken")
        assert response.status_code == 502
