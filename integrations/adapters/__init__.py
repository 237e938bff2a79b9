"""Per-protocol fee adapters.

Each module in this package exposes ``register(register_fn, graph_client,
price_client)`` and is listed in ``integrations.adapter_registry.ADAPTER_MODULES``.
"""

import logging
from typing import Callable

from integrations.adapter_protocol import FEE_ATTRIBUTE
from integrations.exceptions import UnsupportedAttributeError, UpstreamDataError

logger = logging.getLogger(__name__)


class DailyFeeAdapter:
    """FeeAdapter backed by a function computing one day's USD fee.

    Rejects attributes other than ``"fee"`` before calling the function, so
    an unsupported attribute never reaches the network.
    """

    def __init__(self, protocol_id: str, daily_fee: Callable[[str], float]):
        self.protocol_id = protocol_id
        self._daily_fee = daily_fee

    def query(self, attribute: str, date_key: str) -> float:
        if attribute != FEE_ATTRIBUTE:
            raise UnsupportedAttributeError(attribute, self.protocol_id)
        fee = self._daily_fee(date_key)
        logger.debug("%s: fee on %s = %.2f", self.protocol_id, date_key, fee)
        return fee

    def __repr__(self) -> str:
        return f"DailyFeeAdapter({self.protocol_id!r})"


def parse_amount(row: dict, field: str, source: str) -> float:
    """Read a numeric string field from a subgraph row.

    Raises:
        UpstreamDataError: If the field is missing or not numeric.
    """
    try:
        return float(row[field])
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamDataError(f"{source}: bad or missing {field} in {row!r}") from e


def last_row(rows: list[dict], entity: str, date_key: str) -> dict:
    """Return the last row of a day query, failing when the day has no data."""
    if not rows:
        raise UpstreamDataError(f"No {entity} rows for {date_key}")
    return rows[-1]


def entity_rows(data: dict, entity: str, source: str) -> list[dict]:
    """Return the row list for an entity of a subgraph ``data`` object.

    Raises:
        UpstreamDataError: If the entity is missing or not a list.
    """
    rows = data.get(entity) if isinstance(data, dict) else None
    if not isinstance(rows, list):
        raise UpstreamDataError(f"{source}: response has no {entity} list")
    return rows
