"""Unit tests for CoinGeckoClient (mocked httpx)."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from integrations.coingecko_client import CoinGeckoClient
from integrations.exceptions import UpstreamDataError, UpstreamFetchError


@pytest.fixture
def client():
    return CoinGeckoClient()


def _history_response(price) -> MagicMock:
    """Build a mocked /coins/{id}/history response."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = {"market_data": {"current_price": {"usd": price}}}
    mock_response.raise_for_status = MagicMock()
    return mock_response


class TestGetDailyPrice:
    def test_returns_usd_price(self, client):
        with patch.object(client._client, "request", return_value=_history_response(2000.5)) as mock_req:
            price = client.get_daily_price("ethereum", "2021-06-01")

        assert price == 2000.5
        args, kwargs = mock_req.call_args
        assert args == ("GET", "/coins/ethereum/history")
        assert kwargs["params"]["date"] == "01-06-2021"

    def test_price_cached_per_coin_and_day(self, client):
        with patch.object(client._client, "request", return_value=_history_response(10.0)) as mock_req:
            client.get_daily_price("ethereum", "2021-06-01")
            client.get_daily_price("ethereum", "2021-06-01")
            client.get_daily_price("ethereum", "2021-06-02")

        assert mock_req.call_count == 2

    def test_missing_price_raises_data_error(self, client):
        mock_response = _history_response(None)
        mock_response.json.return_value = {"id": "ethereum"}

        with patch.object(client._client, "request", return_value=mock_response):
            with pytest.raises(UpstreamDataError):
                client.get_daily_price("ethereum", "2021-06-01")

    def test_invalid_json_raises_data_error(self, client):
        mock_response = _history_response(None)
        mock_response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>busy</html>", 0)

        with patch.object(client._client, "request", return_value=mock_response):
            with pytest.raises(UpstreamDataError, match="invalid JSON"):
                client.get_daily_price("ethereum", "2021-06-01")

    def test_http_error_raises_fetch_error(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Server Error", request=MagicMock(), response=mock_response
        )

        with patch.object(client._client, "request", return_value=mock_response):
            with pytest.raises(UpstreamFetchError) as exc_info:
                client.get_daily_price("ethereum", "2021-06-01")

        assert exc_info.value.status_code == 500

    def test_failure_not_cached(self, client):
        failing = MagicMock()
        failing.status_code = 503
        failing.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Unavailable", request=MagicMock(), response=failing
        )

        with patch.object(client._client, "request", side_effect=[failing, _history_response(5.0)]):
            with pytest.raises(UpstreamFetchError):
                client.get_daily_price("ethereum", "2021-06-01")
            assert client.get_daily_price("ethereum", "2021-06-01") == 5.0


class TestRateLimiting:
    def test_retries_on_429(self, client):
        rate_limit_response = MagicMock()
        rate_limit_response.status_code = 429

        with patch.object(
            client._client, "request",
            side_effect=[rate_limit_response, _history_response(42.0)],
        ):
            with patch("integrations.coingecko_client.time_module.sleep"):
                price = client.get_daily_price("ethereum", "2021-06-01")

        assert price == 42.0


class TestApiKey:
    def test_api_key_in_headers(self):
        """API key is sent as x-cg-demo-api-key header."""
        client = CoinGeckoClient(api_key="my-key")
        assert client._client.headers.get("x-cg-demo-api-key") == "my-key"

    def test_no_api_key_no_header(self):
        """No API key means no auth header."""
        client = CoinGeckoClient()
        assert "x-cg-demo-api-key" not in client._client.headers
