"""Integration tests for the fees API."""


class TestFeesByDay:
    """Tests for GET /api/v1/feesByDay."""

    def test_returns_requested_days_per_protocol(self, client):
        response = client.get(
            "/api/v1/feesByDay",
            params={"alpha": "2024-01-01,2024-01-02", "beta": "2024-01-03"},
        )
        assert response.status_code == 200

        body = response.json()
        assert body["success"] is True
        assert body["data"] == [
            {"id": "alpha", "data": [{"date": "2024-01-01", "fee": 100.0}, {"date": "2024-01-02", "fee": 110.0}]},
            {"id": "beta", "data": [{"date": "2024-01-03", "fee": 7.0}]},
        ]

    def test_empty_value_yields_empty_list(self, client):
        response = client.get("/api/v1/feesByDay?alpha=&beta=2024-01-01")
        assert response.status_code == 200
        data = {p["id"]: p["data"] for p in response.json()["data"]}
        assert data["alpha"] == []
        assert len(data["beta"]) == 1

    def test_unknown_protocol_404(self, client, primary_adapter):
        response = client.get("/api/v1/feesByDay", params={"alpha": "2024-01-01", "gamma": "2024-01-01"})
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert "gamma" in response.json()["error"]
        assert primary_adapter.calls == []

    def test_bad_date_400(self, client):
        response = client.get("/api/v1/feesByDay", params={"alpha": "yesterday"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_no_protocols_400(self, client):
        response = client.get("/api/v1/feesByDay")
        assert response.status_code == 400

    def test_upstream_failure_502(self, client_with_failing_upstream):
        response = client_with_failing_upstream.get("/api/v1/feesByDay", params={"broken": "2024-01-01"})
        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["data"] == []
        assert body["error"]

    def test_non_json_upstream_is_502_not_400(self, client_with_busy_price_api):
        response = client_with_busy_price_api.get("/api/v1/feesByDay", params={"eth": "2024-01-01"})
        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert "invalid JSON" in body["error"]


class TestDateRangeFees:
    """Tests for GET /api/v1/fees/{protocol_id}."""

    def test_one_record_per_day(self, client):
        response = client.get("/api/v1/fees/beta", params={"start": "2024-01-30", "end": "2024-02-01"})
        assert response.status_code == 200
        assert response.json() == [
            {"date": "2024-01-30", "fee": 34.0},
            {"date": "2024-01-31", "fee": 35.0},
            {"date": "2024-02-01", "fee": 5.0},
        ]

    def test_start_after_end_400(self, client):
        response = client.get("/api/v1/fees/beta", params={"start": "2024-02-01", "end": "2024-01-01"})
        assert response.status_code == 400

    def test_unknown_protocol_404(self, client):
        response = client.get("/api/v1/fees/gamma", params={"start": "2024-01-01", "end": "2024-01-01"})
        assert response.status_code == 404

    def test_missing_dates_422(self, client):
        response = client.get("/api/v1/fees/beta")
        assert response.status_code == 422

    def test_upstream_failure_502(self, client_with_failing_upstream):
        response = client_with_failing_upstream.get(
            "/api/v1/fees/broken", params={"start": "2024-01-01", "end": "2024-01-01"}
        )
        assert response.status_code == 502
