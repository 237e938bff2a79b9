"""CoinGecko price client for converting native-token fees to USD."""

import logging
import time as time_module
from typing import Optional

import httpx

from integrations.exceptions import UpstreamDataError, UpstreamFetchError
from utils.dates import parse_date_key

logger = logging.getLogger(__name__)

# Max retries for rate-limited requests
_MAX_RETRIES = 3
_BASE_DELAY_SECONDS = 1.0


class CoinGeckoClient:
    """Daily USD prices from the CoinGecko API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize with optional API key.

        Args:
            api_key: CoinGecko demo API key. If provided, uses the
                     x-cg-demo-api-key header for higher rate limits.
                     If None, uses the keyless public API.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        headers: dict[str, str] = {}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._client = httpx.Client(
            base_url="https://api.coingecko.com/api/v3",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        # Historical daily prices never change, so they are kept for the
        # lifetime of the client.
        self._prices: dict[tuple[str, str], float] = {}

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _request_with_retry(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Make an HTTP request with retry on 429 rate limit responses."""
        for attempt in range(_MAX_RETRIES):
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.RequestError as e:
                raise UpstreamFetchError(f"CoinGecko unreachable: {e}") from e

            if response.status_code == 429 and attempt < _MAX_RETRIES - 1:
                delay = _BASE_DELAY_SECONDS * (2 ** attempt)
                logger.warning(
                    "CoinGecko: rate limited, retrying in %.1fs (attempt %d/%d)",
                    delay, attempt + 1, _MAX_RETRIES,
                )
                time_module.sleep(delay)
                continue

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise UpstreamFetchError(
                    f"CoinGecko returned HTTP {response.status_code} for {path}",
                    status_code=response.status_code,
                ) from e
            return response

        raise UpstreamFetchError("CoinGecko: max retries exceeded", status_code=429)

    def get_daily_price(self, coin_id: str, date_key: str) -> float:
        """Fetch the USD price of a coin on a UTC calendar day.

        Args:
            coin_id: CoinGecko coin id (e.g., "ethereum").
            date_key: Day as ``YYYY-MM-DD``.

        Returns:
            USD price as reported by CoinGecko's daily snapshot.

        Raises:
            UpstreamFetchError: If the request fails.
            UpstreamDataError: If the response carries no USD price.
        """
        cache_key = (coin_id, date_key)
        if cache_key in self._prices:
            return self._prices[cache_key]

        day = parse_date_key(date_key)
        response = self._request_with_retry(
            "GET",
            f"/coins/{coin_id}/history",
            params={"date": day.strftime("%d-%m-%Y"), "localization": "false"},
        )
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamDataError(f"CoinGecko returned invalid JSON for {coin_id}") from e

        try:
            price = float(data["market_data"]["current_price"]["usd"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamDataError(
                f"CoinGecko: no USD price for {coin_id} on {date_key}"
            ) from e

        logger.debug("CoinGecko: %s on %s = %.2f USD", coin_id, date_key, price)
        self._prices[cache_key] = price
        return price
