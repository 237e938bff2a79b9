"""Calendar-day helpers shared by adapters, the query service and the cache.

Every date in the system is a UTC calendar day. DateKeys are ``YYYY-MM-DD``
strings; arithmetic is done on ``datetime.date`` so it never touches
timezones, DST or month lengths.
"""

from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone

DATE_KEY_FORMAT = "%Y-%m-%d"


def format_date(d: date | datetime) -> str:
    """Format a date (or datetime, floored to its UTC day) as a DateKey."""
    if isinstance(d, datetime):
        d = floor_to_utc_day(d)
    return d.strftime(DATE_KEY_FORMAT)


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` DateKey.

    Raises:
        ValueError: If the string is not a canonical DateKey.
    """
    parsed = datetime.strptime(value, DATE_KEY_FORMAT).date()
    # strptime accepts "2024-1-5"; only the zero-padded form is canonical
    if parsed.strftime(DATE_KEY_FORMAT) != value:
        raise ValueError(f"Not a canonical date key: {value!r}")
    return parsed


def floor_to_utc_day(dt: datetime) -> date:
    """Return the UTC calendar day of a datetime (naive values are UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date()


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def date_to_timestamp(d: date | str) -> int:
    """Epoch seconds at UTC midnight of a date or DateKey."""
    if isinstance(d, str):
        d = parse_date_key(d)
    return int(datetime(d.year, d.month, d.day, tzinfo=timezone.utc).timestamp())


def shift_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


class DaySequence:
    """Inclusive, lazy sequence of calendar days from ``start`` to ``end``.

    Restartable: each iteration walks the range from the beginning. Empty
    when ``start`` is after ``end``.
    """

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        for offset in range(len(self)):
            yield self.start + timedelta(days=offset)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def keys(self) -> Iterator[str]:
        """Iterate the range as DateKeys."""
        return (format_date(d) for d in self)

    def __repr__(self) -> str:
        return f"DaySequence({self.start.isoformat()}, {self.end.isoformat()})"


def day_sequence(start: date, end: date) -> DaySequence:
    """Days from ``start`` to ``end`` inclusive."""
    return DaySequence(start, end)
