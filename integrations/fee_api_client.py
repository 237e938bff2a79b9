"""HTTP client for the fee backend's v1 API."""

import logging
from typing import Any, Optional

import httpx

from integrations.adapter_protocol import FeeRecord, ProtocolFees
from integrations.exceptions import FeeApiError, ProtocolNotFoundError

logger = logging.getLogger(__name__)


class FeeApiClient:
    """Async client for ``/api/v1``; usable as the fee cache's fetcher."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "FeeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[dict[str, str]] = None) -> dict[str, Any]:
        response = await self._client.get(path, params=params)
        try:
            body = response.json()
        except ValueError as e:
            raise FeeApiError(
                f"Invalid JSON from {path} (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e
        if not isinstance(body, dict):
            raise FeeApiError(
                f"Unexpected response from {path} (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        if response.status_code == 404:
            raise ProtocolNotFoundError(body.get("error") or body.get("detail") or "Not found")
        if response.is_error or body.get("success") is False:
            message = body.get("error") or body.get("detail") or f"HTTP {response.status_code}"
            raise FeeApiError(message, status_code=response.status_code)
        return body

    async def fetch(self, missing_by_protocol: dict[str, list[str]]) -> list[ProtocolFees]:
        """Fetch missing days for several protocols via ``/api/v1/feesByDay``.

        Raises:
            ProtocolNotFoundError: If the backend doesn't know a protocol.
            FeeApiError: If the backend reports a failure or the response
                is malformed.
            httpx.HTTPError: On transport failure.
        """
        params = {pid: ",".join(dates) for pid, dates in missing_by_protocol.items()}
        body = await self._get("/api/v1/feesByDay", params=params)
        try:
            return [
                ProtocolFees(
                    id=protocol["id"],
                    data=[FeeRecord.from_dict(record) for record in protocol["data"]],
                )
                for protocol in body["data"]
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FeeApiError("Malformed feesByDay response") from e

    async def get_protocol(self, protocol_id: str) -> dict[str, Any]:
        """Fetch a protocol's metadata and initial fee snapshot.

        Raises:
            ProtocolNotFoundError: If the backend doesn't know the protocol.
            FeeApiError: If the backend fails or returns no ``fee_cache``.
        """
        body = await self._get(f"/api/v1/protocols/{protocol_id}")
        if not isinstance(body.get("fee_cache"), dict):
            raise FeeApiError(f"Protocol {protocol_id} response has no fee_cache")
        return body
