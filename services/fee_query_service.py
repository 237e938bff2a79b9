"""Fee query service: resolves protocol/day requests through the registry.

Stateless. Every call goes to the adapters; caching belongs to the
client-side IncrementalFeeCache.
"""

import logging
from datetime import date
from typing import Optional

from config import settings
from integrations.adapter_protocol import FEE_ATTRIBUTE, FeeRecord, ProtocolFees
from integrations.adapter_registry import AdapterRegistry
from utils.dates import day_sequence, format_date, parse_date_key, shift_days, utc_today

logger = logging.getLogger(__name__)


class FeeQueryService:
    """Resolves per-day fee records for registered protocols."""

    def __init__(self, registry: AdapterRegistry):
        self._registry = registry

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def get_dates_data(self, protocol_id: str, date_keys: list[str]) -> list[FeeRecord]:
        """Query one fee record per DateKey, in the order given.

        Raises:
            ProtocolNotFoundError: If the protocol is not registered.
            UpstreamFetchError: If an adapter's upstream call fails.
        """
        adapter = self._registry.lookup(protocol_id).adapter
        return [
            FeeRecord(date=date_key, fee=adapter.query(FEE_ATTRIBUTE, date_key))
            for date_key in date_keys
        ]

    def get_date_range_data(self, protocol_id: str, start: date, end: date) -> list[FeeRecord]:
        """Query one fee record per calendar day in [start, end], ascending.

        Raises:
            ProtocolNotFoundError: If the protocol is not registered.
            UpstreamFetchError: If an adapter's upstream call fails.
        """
        days = day_sequence(start, end)
        logger.info("Fetching %s fees for %d days (%s to %s)", protocol_id, len(days), start, end)
        return self.get_dates_data(protocol_id, list(days.keys()))

    def validate_fees_by_day(self, missing_by_protocol: dict[str, list[str]]) -> None:
        """Check a batch request without calling any adapter.

        Raises:
            ProtocolNotFoundError: If any protocol is not registered.
            ValueError: If a date is not a canonical DateKey.
        """
        for protocol_id, date_keys in missing_by_protocol.items():
            self._registry.lookup(protocol_id)
            for date_key in date_keys:
                parse_date_key(date_key)

    def get_fees_by_day(self, missing_by_protocol: dict[str, list[str]]) -> list[ProtocolFees]:
        """Resolve several protocols' missing days in one batch.

        The whole batch is validated before any adapter is called, so an
        unknown id or a bad date fails it without upstream traffic.

        Args:
            missing_by_protocol: Protocol id -> ordered DateKeys to fetch.

        Returns:
            One ProtocolFees per protocol, in the order given.

        Raises:
            ProtocolNotFoundError: If any protocol is not registered.
            ValueError: If a date is not a canonical DateKey.
            UpstreamFetchError: If an adapter's upstream call fails.
        """
        self.validate_fees_by_day(missing_by_protocol)

        result = []
        for protocol_id, date_keys in missing_by_protocol.items():
            logger.info("Fetching %d missing days for %s", len(date_keys), protocol_id)
            result.append(
                ProtocolFees(id=protocol_id, data=self.get_dates_data(protocol_id, date_keys))
            )
        return result

    def get_initial_snapshot(
        self, protocol_id: str, days: Optional[int] = None, today: Optional[date] = None
    ) -> dict[str, dict[str, dict]]:
        """Seed data for a protocol page: the ``days`` days ending yesterday.

        ``days`` defaults to ``settings.DEFAULT_WINDOW_DAYS``.

        Returns:
            ``{protocol_id: {date_key: record_dict}}``, the shape the
            FeeStore is seeded with.
        """
        if days is None:
            days = settings.DEFAULT_WINDOW_DAYS
        today = today or utc_today()
        end = shift_days(today, -1)
        start = shift_days(today, -days)
        records = self.get_date_range_data(protocol_id, start, end)
        return {protocol_id: {r.date: r.values() for r in records}}


def default_window(days: int, today: Optional[date] = None) -> tuple[str, str]:
    """DateKeys bounding the default chart window: ``days`` days ending yesterday."""
    today = today or utc_today()
    return format_date(shift_days(today, -days)), format_date(shift_days(today, -1))
