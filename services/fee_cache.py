"""Incremental fee cache: fetch only missing days, derive chart series.

The cache owns a FeeStore and remembers the last requested view (window,
primary/secondary protocol, smoothing). recompute() works out which days
the view needs that the store lacks, fetches just those in one batch,
merges them and derives the chart series.

Requests are last-requested-wins: every recompute() bumps a generation
counter, and a fetch that completes after a newer recompute() started is
discarded without touching the store or the series.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from integrations.adapter_protocol import ProtocolFees
from integrations.exceptions import FeeApiError, UpstreamFetchError
from services.fee_query_service import FeeQueryService
from services.fee_series import SeriesPoint, Window, derive_series
from services.fee_store import FeeStore

logger = logging.getLogger(__name__)

# Fetch failures the cache degrades on (keeps the last good series).
# Anything else, e.g. an unknown protocol id, propagates.
FETCH_ERRORS = (UpstreamFetchError, FeeApiError, httpx.HTTPError)


class FeeFetcher(Protocol):
    """Resolves missing days for one or more protocols in a single round trip."""

    async def fetch(self, missing_by_protocol: dict[str, list[str]]) -> list[ProtocolFees]:
        ...


class LocalFeeFetcher:
    """FeeFetcher calling the query service in-process, off the event loop."""

    def __init__(self, service: FeeQueryService):
        self._service = service

    async def fetch(self, missing_by_protocol: dict[str, list[str]]) -> list[ProtocolFees]:
        return await asyncio.to_thread(self._service.get_fees_by_day, missing_by_protocol)


@dataclass(frozen=True)
class SeriesRequest:
    """The view a recompute() was asked for."""

    window: Window
    primary: str
    secondary: Optional[str] = None
    smoothing: int = 0


class IncrementalFeeCache:
    """Client-side fee cache with minimal fetching and stale-response discard.

    State machine: idle -> loading -> idle, where a failed fetch returns to
    idle with the previous series kept.
    """

    def __init__(self, fetcher: FeeFetcher, store: Optional[FeeStore] = None):
        self._fetcher = fetcher
        self._store = store if store is not None else FeeStore()
        self._series: list[SeriesPoint] = []
        self._loading = False
        self._generation = 0
        self._request: Optional[SeriesRequest] = None

    @property
    def store(self) -> FeeStore:
        return self._store

    @property
    def series(self) -> list[SeriesPoint]:
        return self._series

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def request(self) -> Optional[SeriesRequest]:
        """The most recently requested view."""
        return self._request

    def missing_dates(self, request: SeriesRequest) -> dict[str, list[str]]:
        """Days each protocol of the view lacks, including smoothing context.

        Cached fees are raw daily values, independent of the smoothing
        factor, so days fetched for an earlier factor are reused.
        """
        fetch_window = request.window.extended(request.smoothing)
        missing: dict[str, list[str]] = {}
        for protocol_id in (request.primary, request.secondary):
            if not protocol_id or protocol_id in missing:
                continue
            dates = self._store.missing_dates(protocol_id, fetch_window.start, fetch_window.end)
            if dates:
                missing[protocol_id] = dates
        return missing

    async def recompute(
        self,
        window: Window,
        primary: str,
        secondary: Optional[str] = None,
        smoothing: int = 0,
    ) -> list[SeriesPoint]:
        """Bring the series up to date for a view.

        Args:
            window: Days to chart.
            primary: Protocol id of the main series.
            secondary: Optional protocol id to compare against.
            smoothing: Trailing days averaged into each point.

        Returns:
            The current series. After a failed or superseded fetch this is
            the previous series, unchanged.

        Raises:
            ValueError: If smoothing is negative.
            MissingCellError: If the fetch did not fill every requested day.
        """
        if smoothing < 0:
            raise ValueError(f"smoothing must be >= 0, got {smoothing}")

        request = SeriesRequest(window, primary, secondary, smoothing)
        self._generation += 1
        generation = self._generation
        self._request = request

        missing = self.missing_dates(request)
        if not missing:
            self._loading = False
            self._series = self._derive(request)
            return self._series

        self._loading = True
        logger.info(
            "Fetching missing days: %s",
            ", ".join(f"{pid}={len(dates)}" for pid, dates in missing.items()),
        )
        try:
            response = await self._fetcher.fetch(missing)
        except FETCH_ERRORS:
            if generation == self._generation:
                logger.error("Fee fetch failed, keeping previous series", exc_info=True)
                self._loading = False
            else:
                logger.warning("Superseded fee fetch failed", exc_info=True)
            return self._series
        except Exception:
            if generation == self._generation:
                self._loading = False
            raise

        if generation != self._generation:
            logger.info(
                "Discarding stale fee response (generation %d, current %d)",
                generation, self._generation,
            )
            return self._series

        self._store.merge(response)
        self._loading = False
        self._series = self._derive(request)
        return self._series

    def _derive(self, request: SeriesRequest) -> list[SeriesPoint]:
        return derive_series(
            self._store, request.window, request.primary, request.secondary, request.smoothing
        )
