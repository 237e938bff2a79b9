"""GraphQL client for The Graph subgraphs."""

import logging
import time as time_module
from typing import Any, Optional

import httpx

from integrations.exceptions import UpstreamDataError, UpstreamFetchError

logger = logging.getLogger(__name__)

# Max retries for rate-limited requests
_MAX_RETRIES = 3
_BASE_DELAY_SECONDS = 1.0


class GraphClient:
    """Posts GraphQL queries to named subgraphs.

    Subgraph names (e.g., "uniswap/uniswap-v2") are resolved relative to
    the configured base URL. Every failure surfaces as UpstreamFetchError;
    nothing is defaulted here.
    """

    def __init__(
        self,
        base_url: str = "https://api.thegraph.com/subgraphs/name",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Root URL subgraph names are appended to.
            api_key: Optional gateway API key, sent as a bearer token.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        headers: dict[str, str] = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def _post_with_retry(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        """POST with retry on 429 rate limit responses."""
        for attempt in range(_MAX_RETRIES):
            try:
                response = self._client.post(path, json=payload)
            except httpx.RequestError as e:
                raise UpstreamFetchError(f"Subgraph {path} unreachable: {e}") from e

            if response.status_code == 429 and attempt < _MAX_RETRIES - 1:
                delay = _BASE_DELAY_SECONDS * (2 ** attempt)
                logger.warning(
                    "Subgraph %s: rate limited, retrying in %.1fs (attempt %d/%d)",
                    path, delay, attempt + 1, _MAX_RETRIES,
                )
                time_module.sleep(delay)
                continue

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise UpstreamFetchError(
                    f"Subgraph {path} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                ) from e
            return response

        raise UpstreamFetchError(f"Subgraph {path}: max retries exceeded", status_code=429)

    def query(
        self,
        subgraph: str,
        query: str,
        variables: Optional[dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Run a GraphQL query against a subgraph.

        Args:
            subgraph: Subgraph name, e.g. "uniswap/uniswap-v2".
            query: GraphQL document.
            variables: Query variables.
            operation_name: Operation to execute when the document has several.

        Returns:
            The ``data`` object of the GraphQL response.

        Raises:
            UpstreamFetchError: Transport or HTTP failure.
            UpstreamDataError: GraphQL errors or a response without data.
        """
        payload: dict[str, Any] = {"query": query, "variables": variables or {}}
        if operation_name:
            payload["operationName"] = operation_name

        logger.debug("Subgraph %s: query %s %s", subgraph, operation_name, variables)
        response = self._post_with_retry(subgraph, payload)

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamDataError(f"Subgraph {subgraph} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise UpstreamDataError(f"Subgraph {subgraph} returned a non-object response")

        if body.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in body["errors"])
            raise UpstreamDataError(f"Subgraph {subgraph} query failed: {messages}")

        data = body.get("data")
        if data is None:
            raise UpstreamDataError(f"Subgraph {subgraph} returned no data")
        return data
