"""
Booking Window Validation

Decides whether a proposed (check_in, check_out) pair is bookable:
- BookingWindow: a check-in/check-out pair with its occupied nights
- ValidationResult: Valid(nights) or Invalid(reason), never an exception
- BookingWindowValidator: validation rules and the calendar disabled-date policy
- BookingSelection: per-attempt selection state machine with the
  check-out auto-clear rule
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange
from apps.availability.domain.calendar import AvailabilityIndex, DateLike, to_calendar_date

logger = logging.getLogger(__name__)


class InvalidReason(Enum):
    """Why a selection cannot be booked (first failing rule wins)"""
    NO_CHECK_IN = 'no_check_in'
    NO_CHECK_OUT = 'no_check_out'
    CHECK_OUT_NOT_AFTER_CHECK_IN = 'check_out_not_after_check_in'
    CHECK_OUT_BLOCKED = 'check_out_blocked'
    INTERIOR_NIGHT_BLOCKED = 'interior_night_blocked'
    # Long-stay (monthly) selections
    BELOW_MIN_MONTHS = 'below_min_months'
    ABOVE_MAX_MONTHS = 'above_max_months'
    MONTH_PARTIALLY_BLOCKED = 'month_partially_blocked'
    # Vehicle (daily) rentals
    RETURN_BEFORE_PICKUP = 'return_before_pickup'
    RENTAL_DAY_BLOCKED = 'rental_day_blocked'


REASON_MESSAGES = {
    InvalidReason.NO_CHECK_IN: "Veuillez sélectionner votre date d'arrivée.",
    InvalidReason.NO_CHECK_OUT: "Veuillez sélectionner votre date de départ.",
    InvalidReason.CHECK_OUT_NOT_AFTER_CHECK_IN: "La date de départ doit être après la date d'arrivée.",
    InvalidReason.CHECK_OUT_BLOCKED: "La date de départ n'est pas disponible.",
    InvalidReason.INTERIOR_NIGHT_BLOCKED: "Une ou plusieurs nuits de la période sont indisponibles.",
    InvalidReason.BELOW_MIN_MONTHS: "La durée est inférieure à la durée minimale.",
    InvalidReason.ABOVE_MAX_MONTHS: "La durée dépasse la durée maximale.",
    InvalidReason.MONTH_PARTIALLY_BLOCKED: "Un ou plusieurs mois de la période sont partiellement indisponibles.",
    InvalidReason.RETURN_BEFORE_PICKUP: "La date de retour ne peut pas précéder la date de prise en charge.",
    InvalidReason.RENTAL_DAY_BLOCKED: "Le véhicule n'est pas disponible sur une ou plusieurs dates.",
}


@dataclass(frozen=True)
class ValidationResult(ValueObject):
    """
    Outcome of validating a selection

    reason is None for a valid selection; nights (nightly stays) or
    months (long stays) then carry the derived duration.
    """
    reason: InvalidReason | None = None
    nights: int = 0
    months: int = 0

    @classmethod
    def valid(cls, nights: int = 0, months: int = 0) -> 'ValidationResult':
        return cls(reason=None, nights=nights, months=months)

    @classmethod
    def invalid(cls, reason: InvalidReason) -> 'ValidationResult':
        return cls(reason=reason)

    @property
    def is_valid(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str:
        """User-facing message for an invalid result"""
        if self.reason is None:
            return ''
        return REASON_MESSAGES[self.reason]

    def __bool__(self):
        return self.is_valid


@dataclass(frozen=True)
class BookingWindow(DateRange):
    """
    Check-in / check-out pair

    start_date is the check-in day, end_date the check-out day.
    Construction fails with ValueError unless check-out is after check-in.
    """

    @property
    def check_in(self) -> date:
        return self.start_date

    @property
    def check_out(self) -> date:
        return self.end_date

    @property
    def nights(self) -> int:
        return len(self)

    def interior_nights(self) -> Iterator[date]:
        """Dates occupied by the stay: after check-in, up to and including check-out"""
        for offset in range(1, len(self) + 1):
            yield self.start_date + timedelta(days=offset)


class BookingWindowValidator:
    """
    Validates booking windows against one unit's AvailabilityIndex

    Rules, checked in order:
    1. check-in and check-out are both present
    2. check-out is strictly after check-in
    3. check-out is not itself blocked
    4. no interior night is blocked

    The same index drives the disabled-date policy exposed to calendars,
    so the calendar and the validator never disagree.
    """

    def __init__(self, index: AvailabilityIndex):
        self.index = index

    def validate(self, check_in: DateLike | None, check_out: DateLike | None) -> ValidationResult:
        """
        Validate a (check_in, check_out) pair

        Returns an Invalid result for any user-level problem.

        Raises:
            MalformedDateError: Only for values that are not dates at all
        """
        if not check_in:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_IN)
        if not check_out:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_OUT)

        check_in = to_calendar_date(check_in)
        check_out = to_calendar_date(check_out)

        if check_out <= check_in:
            return ValidationResult.invalid(InvalidReason.CHECK_OUT_NOT_AFTER_CHECK_IN)

        if self.index.is_blocked(check_out):
            return ValidationResult.invalid(InvalidReason.CHECK_OUT_BLOCKED)

        if self.index.has_blocked_between(check_in, check_out):
            return ValidationResult.invalid(InvalidReason.INTERIOR_NIGHT_BLOCKED)

        window = BookingWindow(check_in, check_out)
        return ValidationResult.valid(nights=window.nights)

    def validate_rental(self, pickup: DateLike | None, return_date: DateLike | None) -> ValidationResult:
        """
        Validate a vehicle rental (pickup, return) pair

        A same-day return is allowed. Every day from pickup to return,
        both included, must be available.
        """
        if not pickup:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_IN)
        if not return_date:
            return ValidationResult.invalid(InvalidReason.NO_CHECK_OUT)

        pickup = to_calendar_date(pickup)
        return_date = to_calendar_date(return_date)

        if return_date < pickup:
            return ValidationResult.invalid(InvalidReason.RETURN_BEFORE_PICKUP)
        if self.index.is_blocked(pickup) or self.index.has_blocked_between(pickup, return_date):
            return ValidationResult.invalid(InvalidReason.RENTAL_DAY_BLOCKED)
        return ValidationResult.valid()

    # ===== Disabled-date policy =====

    def is_check_in_disabled(self, candidate: DateLike, today: DateLike) -> bool:
        """A check-in date is disabled if it is in the past or blocked"""
        candidate = to_calendar_date(candidate)
        if candidate < to_calendar_date(today):
            return True
        return self.index.is_blocked(candidate)

    def is_check_out_disabled(
        self,
        candidate: DateLike,
        check_in: DateLike | None,
        today: DateLike,
    ) -> bool:
        """
        A check-out date is disabled if it is in the past, not strictly after
        the chosen check-in, or if the stay would cover a blocked night.

        Without a chosen check-in only the past-date rule applies.
        """
        candidate = to_calendar_date(candidate)
        if candidate < to_calendar_date(today):
            return True
        if not check_in:
            return False
        check_in = to_calendar_date(check_in)
        if candidate <= check_in:
            return True
        return self.index.has_blocked_between(check_in, candidate)


class SelectionState(Enum):
    """
    Booking selection states

    State transitions:
    - EMPTY/any -> CHECK_IN_CHOSEN (check-in picked, stale check-out cleared)
    - CHECK_IN_CHOSEN -> WINDOW_COMPLETE (check-out picked)
    - WINDOW_COMPLETE -> VALID | INVALID (validated)
    """
    EMPTY = 'empty'
    CHECK_IN_CHOSEN = 'check_in_chosen'
    WINDOW_COMPLETE = 'window_complete'
    VALID = 'valid'
    INVALID = 'invalid'


class BookingSelection:
    """
    Selection state holder for one booking attempt

    Picking a new check-in re-validates an already chosen check-out and
    silently clears it when the pair no longer holds. No error is surfaced
    for that case.

    Usage:
        selection = BookingSelection(BookingWindowValidator(index))
        selection.select_check_in(date(2025, 6, 1))
        result = selection.select_check_out(date(2025, 6, 9))
    """

    def __init__(self, validator: BookingWindowValidator):
        self.validator = validator
        self.check_in: date | None = None
        self.check_out: date | None = None
        self.state = SelectionState.EMPTY
        self.result: ValidationResult | None = None

    def select_check_in(self, value: DateLike) -> SelectionState:
        """Pick (or move) the check-in date"""
        self.check_in = to_calendar_date(value)
        self.result = None
        self.state = SelectionState.CHECK_IN_CHOSEN

        if self.check_out is not None:
            self._revalidate_check_out()
        return self.state

    def select_check_out(self, value: DateLike) -> ValidationResult:
        """Pick the check-out date and validate the completed window"""
        self.check_out = to_calendar_date(value)
        self.state = SelectionState.WINDOW_COMPLETE
        return self._finish(self.validator.validate(self.check_in, self.check_out))

    def refresh_index(self, index: AvailabilityIndex) -> SelectionState:
        """
        Swap in a freshly built index (e.g. after a new booking)

        The current check-out is re-validated the same way as on a
        check-in change.
        """
        self.validator = BookingWindowValidator(index)
        if self.check_in is not None and self.check_out is not None:
            self._revalidate_check_out()
        return self.state

    def reset(self):
        self.check_in = None
        self.check_out = None
        self.result = None
        self.state = SelectionState.EMPTY

    @property
    def is_bookable(self) -> bool:
        return self.state == SelectionState.VALID

    def _revalidate_check_out(self):
        result = self.validator.validate(self.check_in, self.check_out)
        if result.is_valid:
            self._finish(result)
            return

        logger.info(
            f"Clearing check-out {self.check_out} for unit {self.validator.index.unit_id}: "
            f"incompatible with check-in {self.check_in} ({result.reason.value})"
        )
        self.check_out = None
        self.result = None
        self.state = SelectionState.CHECK_IN_CHOSEN

    def _finish(self, result: ValidationResult) -> ValidationResult:
        self.result = result
        self.state = SelectionState.VALID if result.is_valid else SelectionState.INVALID
        return result
