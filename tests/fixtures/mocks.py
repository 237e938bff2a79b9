"""Mock implementations for external services."""

import asyncio
from typing import Callable

import httpx

from integrations.adapter_protocol import FEE_ATTRIBUTE, ProtocolFees, ProtocolMetadata
from integrations.adapter_registry import AdapterRegistry
from integrations.adapters import ethereum
from integrations.coingecko_client import CoinGeckoClient
from integrations.exceptions import (
    UnsupportedAttributeError,
    UpstreamFetchError,
)
from services.fee_query_service import FeeQueryService


class MockFeeAdapter:
    """Mock fee adapter for testing.

    Implements the FeeAdapter protocol from an in-memory dict of
    DateKey -> fee, or a function of the DateKey. Records every day queried.
    """

    def __init__(
        self,
        fees: dict[str, float] | Callable[[str], float] | None = None,
        protocol_id: str = "mock",
        should_fail: bool = False,
        failure_message: str = "Mock upstream error",
    ):
        self._fees = fees if fees is not None else {}
        self._protocol_id = protocol_id
        self._should_fail = should_fail
        self._failure_message = failure_message
        self.calls: list[str] = []

    def query(self, attribute: str, date_key: str) -> float:
        if attribute != FEE_ATTRIBUTE:
            raise UnsupportedAttributeError(attribute, self._protocol_id)
        self.calls.append(date_key)
        if self._should_fail:
            raise UpstreamFetchError(self._failure_message, self._protocol_id, status_code=503)
        if callable(self._fees):
            return self._fees(date_key)
        return self._fees.get(date_key, 0.0)


class MockGraphClient:
    """Mock GraphClient returning canned ``data`` objects per subgraph.

    Records each (subgraph, variables) pair queried.
    """

    def __init__(
        self,
        responses: dict[str, dict] | None = None,
        should_fail: bool = False,
    ):
        self._responses = responses or {}
        self._should_fail = should_fail
        self.queries: list[tuple[str, dict]] = []

    def close(self) -> None:
        pass

    def query(self, subgraph, query, variables=None, operation_name=None) -> dict:
        self.queries.append((subgraph, variables or {}))
        if self._should_fail:
            raise UpstreamFetchError(f"Subgraph {subgraph} unreachable")
        return self._responses[subgraph]


class MockPriceClient:
    """Mock CoinGeckoClient with fixed prices per coin id."""

    def __init__(self, prices: dict[str, float] | None = None):
        self._prices = prices or {}
        self.calls: list[tuple[str, str]] = []

    def close(self) -> None:
        pass

    def get_daily_price(self, coin_id: str, date_key: str) -> float:
        self.calls.append((coin_id, date_key))
        return self._prices[coin_id]


def make_metadata(name: str, category: str = "dex") -> ProtocolMetadata:
    return ProtocolMetadata(name=name, category=category, blockchain="Ethereum")


def build_mock_registry(adapters: dict[str, MockFeeAdapter]) -> AdapterRegistry:
    """Registry with one mock adapter per protocol id."""
    registry = AdapterRegistry()
    for protocol_id, adapter in adapters.items():
        registry.register(protocol_id, adapter, make_metadata(protocol_id.title()))
    return registry


class MockFeeFetcher:
    """Mock FeeFetcher for IncrementalFeeCache tests.

    Resolves requests through a FeeQueryService over mock adapters and
    records every batch requested. When ``gated`` is set, each fetch waits
    for release() so tests can interleave overlapping requests.
    """

    def __init__(
        self,
        service: FeeQueryService,
        should_fail: bool = False,
        gated: bool = False,
    ):
        self._service = service
        self.should_fail = should_fail
        self._gated = gated
        self._gates: list[asyncio.Event] = []
        self.calls: list[dict[str, list[str]]] = []

    async def fetch(self, missing_by_protocol: dict[str, list[str]]) -> list[ProtocolFees]:
        self.calls.append({pid: list(dates) for pid, dates in missing_by_protocol.items()})
        if self._gated:
            gate = asyncio.Event()
            self._gates.append(gate)
            await gate.wait()
        if self.should_fail:
            raise UpstreamFetchError("Mock fetch failure")
        return self._service.get_fees_by_day(missing_by_protocol)

    def release(self, index: int) -> None:
        """Let the ``index``-th gated fetch complete."""
        self._gates[index].set()


def build_busy_price_registry(day: str = "2024-01-01") -> AdapterRegistry:
    """Registry with the real ``eth`` adapter whose price API serves an HTML page.

    The subgraph is mocked with one day of fees; every CoinGecko call gets a
    200 response that is not JSON, as when the API sits behind a busy page.
    """
    graph = MockGraphClient({ethereum.SUBGRAPH: {"days": [{"date": day, "fees": "10"}]}})
    prices = CoinGeckoClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>busy</html>"))
    )
    registry = AdapterRegistry()
    ethereum.register(registry.register, graph, prices)
    return registry
