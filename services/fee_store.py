"""In-memory store of fetched fee records, keyed by protocol and day."""

import logging
from datetime import date
from typing import Iterable, Optional

from integrations.adapter_protocol import FeeRecord, ProtocolFees
from utils.dates import day_sequence

logger = logging.getLogger(__name__)


class FeeStore:
    """Protocol id -> DateKey -> FeeRecord.

    Grows monotonically: merge() adds or overwrites records and never
    removes any. Each merge bumps ``version``.
    """

    def __init__(self, seed: Optional[dict[str, dict[str, dict]]] = None):
        """Initialize, optionally from a snapshot.

        Args:
            seed: ``{protocol_id: {date_key: {"fee": ..., ...}}}``, as
                returned by FeeQueryService.get_initial_snapshot(). The
                ``date`` field of each record is optional.
        """
        self._data: dict[str, dict[str, FeeRecord]] = {}
        self._version = 0
        for protocol_id, by_date in (seed or {}).items():
            records = self._data.setdefault(protocol_id, {})
            for date_key, values in by_date.items():
                records[date_key] = FeeRecord.from_dict({**values, "date": date_key})

    @property
    def version(self) -> int:
        return self._version

    def protocols(self) -> list[str]:
        return sorted(self._data)

    def has(self, protocol_id: str, date_key: str) -> bool:
        return date_key in self._data.get(protocol_id, {})

    def get(self, protocol_id: str, date_key: str) -> Optional[FeeRecord]:
        return self._data.get(protocol_id, {}).get(date_key)

    def missing_dates(self, protocol_id: str, start: date, end: date) -> list[str]:
        """DateKeys in [start, end] with no record for the protocol, ascending."""
        known = self._data.get(protocol_id, {})
        return [key for key in day_sequence(start, end).keys() if key not in known]

    def merge(self, response: Iterable[ProtocolFees]) -> int:
        """Merge fetched records, keyed by owning protocol and date.

        Overwriting an existing record is safe: a day's fee never changes
        once it has been computed correctly.

        Returns:
            The new store version.
        """
        merged = 0
        for protocol in response:
            records = self._data.setdefault(protocol.id, {})
            for record in protocol.data:
                records[record.date] = record
                merged += 1
        self._version += 1
        logger.debug("Merged %d fee records (store version %d)", merged, self._version)
        return self._version

    def snapshot(self) -> dict[str, dict[str, dict]]:
        """Plain-dict copy of the store, in the seed format."""
        return {
            protocol_id: {date_key: record.values() for date_key, record in sorted(records.items())}
            for protocol_id, records in sorted(self._data.items())
        }

    def __len__(self) -> int:
        return sum(len(records) for records in self._data.values())
