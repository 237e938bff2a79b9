"""Chart series derivation from the fee store."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from integrations.exceptions import MissingCellError
from services.fee_store import FeeStore
from utils.dates import date_to_timestamp, day_sequence, format_date, shift_days


@dataclass(frozen=True)
class Window:
    """Inclusive range of calendar days shown on the chart."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    def days(self):
        return day_sequence(self.start, self.end)

    def extended(self, smoothing: int) -> "Window":
        """The window widened backward by ``smoothing`` days of trailing context."""
        return Window(shift_days(self.start, -smoothing), self.end)


@dataclass(frozen=True)
class SeriesPoint:
    """One chart point. ``timestamp`` is epoch seconds at UTC midnight."""

    timestamp: int
    primary: float
    secondary: float

    def to_dict(self) -> dict:
        return {"date": self.timestamp, "primary": self.primary, "secondary": self.secondary}


def _fee(store: FeeStore, protocol_id: str, day: date) -> float:
    date_key = format_date(day)
    record = store.get(protocol_id, date_key)
    if record is None:
        raise MissingCellError(protocol_id, date_key)
    return record.fee


def smoothed_fee(store: FeeStore, protocol_id: str, day: date, smoothing: int) -> float:
    """Mean fee over ``day`` and the ``smoothing`` days before it.

    Raises:
        MissingCellError: If any of those days is absent from the store.
    """
    total = sum(_fee(store, protocol_id, shift_days(day, -i)) for i in range(smoothing + 1))
    return total / (smoothing + 1)


def derive_series(
    store: FeeStore,
    window: Window,
    primary: str,
    secondary: Optional[str],
    smoothing: int,
) -> list[SeriesPoint]:
    """Build one SeriesPoint per day of the window, ascending.

    Secondary values are 0 when no secondary protocol is selected.

    Raises:
        ValueError: If smoothing is negative.
        MissingCellError: If a required (protocol, day) cell is missing.
    """
    if smoothing < 0:
        raise ValueError(f"smoothing must be >= 0, got {smoothing}")

    return [
        SeriesPoint(
            timestamp=date_to_timestamp(day),
            primary=smoothed_fee(store, primary, day, smoothing),
            secondary=smoothed_fee(store, secondary, day, smoothing) if secondary else 0.0,
        )
        for day in window.days()
    ]
