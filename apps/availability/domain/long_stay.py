"""
Long Stay Selection

Monthly bookings are selected by whole calendar months: the start is
normalised to the first day of its month and the end to the last day of its
month. A long stay is bookable only if every day of every month it touches
is available, and its month count lies within the unit's bounds.
"""

import calendar
from datetime import date
from typing import Tuple

from apps.availability.domain.booking_window import InvalidReason, ValidationResult
from apps.availability.domain.calendar import AvailabilityIndex, DateLike, to_calendar_date

DEFAULT_MIN_MONTHS = 1
DEFAULT_MAX_MONTHS = 12


def first_day_of_month(value: date) -> date:
    return value.replace(day=1)


def last_day_of_month(value: date) -> date:
    return value.replace(day=calendar.monthrange(value.year, value.month)[1])


def normalize_monthly_selection(start: DateLike, end: DateLike | None = None) -> Tuple[date, date]:
    """Snap a selection to whole months; a missing end means the start's month"""
    start_date = to_calendar_date(start)
    end_date = to_calendar_date(end) if end else start_date
    return first_day_of_month(start_date), last_day_of_month(end_date)


def months_between_inclusive(start: DateLike, end: DateLike) -> int:
    """Number of calendar months touched by [start, end]; 0 or less if reversed"""
    start_date = to_calendar_date(start)
    end_date = to_calendar_date(end)
    return (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month) + 1


def is_month_fully_available(index: AvailabilityIndex, year: int, month: int) -> bool:
    first = date(year, month, 1)
    return is_range_months_fully_available(index, first, first)


def is_range_months_fully_available(index: AvailabilityIndex, start: DateLike, end: DateLike) -> bool:
    """Check every day of every month touched by [start, end]"""
    first = first_day_of_month(to_calendar_date(start))
    last = last_day_of_month(to_calendar_date(end))
    if last < first:
        return True
    return not (index.is_blocked(first) or index.has_blocked_between(first, last))


def is_month_disabled(index: AvailabilityIndex, year: int, month: int, today: DateLike) -> bool:
    """Month picker policy: months before the current one, or partially blocked"""
    if date(year, month, 1) < first_day_of_month(to_calendar_date(today)):
        return True
    return not is_month_fully_available(index, year, month)


class LongStayValidator:
    """
    Validates monthly selections against an index and month bounds

    Rules, checked in order:
    1. start and end are both present
    2. end month is not before start month
    3. months >= min_months
    4. months <= max_months
    5. every touched month is fully available
    """

    def __init__(self, index: AvailabilityIndex, min_months: int | None = None, max_months: int | None = None):
        self.index = index
        self.min_months = max(1, min_months or DEFAULT_MIN_MONTHS)
        self.max_months = max(self.min_months, max_months or DEFAULT_MAX_MONTHS)

    def validate(self, start: DateLike | None, end: DateLike | None) -> ValidationResult:
        if not start:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_IN)
        if not end:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_OUT)

        start_date, end_date = normalize_monthly_selection(start, end)
        if end_date <= start_date:
            return ValidationResult.invalid(InvalidReason.CHECK_OUT_NOT_AFTER_CHECK_IN)

        months = months_between_inclusive(start_date, end_date)
        if months < self.min_months:
            return ValidationResult.invalid(InvalidReason.BELOW_MIN_MONTHS)
        if months > self.max_months:
            return ValidationResult.invalid(InvalidReason.ABOVE_MAX_MONTHS)

        if not is_range_months_fully_available(self.index, start_date, end_date):
            return ValidationResult.invalid(InvalidReason.MONTH_PARTIALLY_BLOCKED)

        return ValidationResult.valid(months=months)
