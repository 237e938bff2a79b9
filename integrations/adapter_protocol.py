"""Fee adapter protocol definitions.

This module defines the interface every protocol adapter implements and the
records that flow between adapters, the query service and the fee cache.
"""

from dataclasses import dataclass, field
from typing import Callable, Protocol

FEE_ATTRIBUTE = "fee"


class FeeAdapter(Protocol):
    """Protocol that all fee adapters must implement.

    An adapter turns one upstream data source into a single USD number per
    calendar day. Implementations must raise UnsupportedAttributeError for
    any attribute other than ``"fee"`` without touching the network.
    """

    def query(self, attribute: str, date_key: str) -> float:
        """Return the USD value of ``attribute`` for the day ``date_key``.

        Args:
            attribute: The metric to compute. Only ``"fee"`` is supported.
            date_key: UTC calendar day as ``YYYY-MM-DD``.

        Returns:
            Non-negative USD fee for that day.

        Raises:
            UnsupportedAttributeError: For attributes other than ``"fee"``.
            UpstreamFetchError: If the upstream source fails.
        """
        ...


@dataclass(frozen=True)
class ProtocolMetadata:
    """Descriptive metadata shown next to a protocol's chart."""

    name: str
    category: str
    description: str | None = None
    fee_description: str | None = None
    website: str | None = None
    blockchain: str | None = None
    source: str | None = None  # e.g., "The Graph Protocol"
    adapter: str | None = None  # Adapter module that registered the protocol
    token_ticker: str | None = None
    token_coingecko: str | None = None
    protocol_launch: str | None = None  # DateKey
    token_launch: str | None = None  # DateKey


@dataclass(frozen=True)
class ProtocolRegistration:
    """A registered protocol: its id, query capability and metadata."""

    id: str
    adapter: FeeAdapter
    metadata: ProtocolMetadata


@dataclass(frozen=True)
class FeeRecord:
    """USD fee for one protocol on one calendar day."""

    date: str  # DateKey
    fee: float
    extra: dict[str, float] = field(default_factory=dict)  # Other numeric attributes

    def values(self) -> dict[str, float]:
        """Numeric attributes without the date."""
        return {"fee": self.fee, **self.extra}

    def to_dict(self) -> dict:
        return {"date": self.date, **self.values()}

    @classmethod
    def from_dict(cls, data: dict) -> "FeeRecord":
        values = dict(data)
        date_key = values.pop("date")
        fee = float(values.pop("fee"))
        return cls(date=date_key, fee=fee, extra={k: float(v) for k, v in values.items()})


@dataclass
class ProtocolFees:
    """Fee records for one protocol, as returned by a batch fetch."""

    id: str
    data: list[FeeRecord] = field(default_factory=list)


RegisterFunction = Callable[[str, FeeAdapter, ProtocolMetadata], None]
