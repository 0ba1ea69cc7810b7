"""
Availability Calendar

Canonical date keys and the per-unit availability index:
- canonical_date_key: the one normalisation routine used for every lookup
- AvailabilityIndex: immutable set of blocked dates for a single unit

Keys are built from the local calendar fields (year, month, day) of the
value. Aware datetimes are never converted to UTC first, otherwise a late
evening booking would land on the next day.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import FrozenSet, Iterable, Tuple, Union

from apps.availability.domain.errors import MalformedDateError

DateLike = Union[date, datetime, str]

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$")


def to_calendar_date(value: DateLike) -> date:
    """
    Normalise a date-like value to a plain calendar date

    Accepts date, datetime (time-of-day ignored) and ISO strings such as
    "2025-06-10" or "2025-06-10T23:30:00+02:00".

    Raises:
        MalformedDateError: If the value is not a valid calendar date
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        match = _ISO_DATE_RE.match(value.strip())
        if not match:
            raise MalformedDateError(value)
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as exc:
            raise MalformedDateError(value, f"Invalid calendar date {value!r}: {exc}") from exc
    raise MalformedDateError(value)


def canonical_date_key(value: DateLike) -> str:
    """Return the timezone-independent YYYY-MM-DD key for a date-like value"""
    return to_calendar_date(value).isoformat()


@dataclass(frozen=True)
class AvailabilityIndex:
    """
    Blocked dates of one bookable unit

    The index is immutable. When the unit's unavailable dates change,
    build a new index instead of patching the old one.

    Usage:
        index = AvailabilityIndex.build(["2025-06-10", "2025-06-15"])
        index.is_blocked(date(2025, 6, 10))            # True
        index.has_blocked_between(date(2025, 6, 11),
                                  date(2025, 6, 16))   # True
    """

    keys: FrozenSet[str] = field(default_factory=frozenset)
    unit_id: str | None = None

    @classmethod
    def build(cls, unavailable_dates: Iterable[DateLike], unit_id: str | None = None) -> 'AvailabilityIndex':
        """
        Build an index from raw unavailable-date rows

        Duplicates are tolerated; order does not matter.

        Raises:
            MalformedDateError: If any row cannot be normalised
        """
        keys = frozenset(canonical_date_key(value) for value in unavailable_dates)
        return cls(keys=keys, unit_id=unit_id)

    def is_blocked(self, value: DateLike) -> bool:
        """Check if the unit is unavailable on the given calendar date"""
        return canonical_date_key(value) in self.keys

    def has_blocked_between(self, start: DateLike, end: DateLike) -> bool:
        """
        Check if any date d with start < d <= end is blocked

        The check-in day itself is never inspected, the check-out day is.
        Returns False when end <= start.
        """
        start_date = to_calendar_date(start)
        end_date = to_calendar_date(end)
        if end_date <= start_date or not self.keys:
            return False

        span = (end_date - start_date).days
        if len(self.keys) < span:
            # Fewer blocked dates than days to walk: scan the blocked dates instead
            return any(start_date < day <= end_date for day in self.blocked_dates())

        for offset in range(1, span + 1):
            if self.is_blocked(start_date + timedelta(days=offset)):
                return True
        return False

    def blocked_dates(self) -> Tuple[date, ...]:
        """All blocked dates, sorted ascending"""
        return tuple(sorted(date.fromisoformat(key) for key in self.keys))

    def __contains__(self, value: DateLike) -> bool:
        return self.is_blocked(value)

    def __len__(self) -> int:
        return len(self.keys)

    def __repr__(self):
        return f"AvailabilityIndex(unit_id={self.unit_id!r}, blocked={len(self.keys)})"
