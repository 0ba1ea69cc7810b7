"""Tests for booking-window validation, calendar policy and selection state."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from apps.availability.domain.booking_window import (
    BookingSelection,
    BookingWindow,
    BookingWindowValidator,
    InvalidReason,
    SelectionState,
    ValidationResult,
)
from apps.availability.domain.calendar import AvailabilityIndex
from apps.availability.domain.errors import MalformedDateError


@pytest.fixture
def validator():
    index = AvailabilityIndex.build(["2025-06-10", "2025-06-15"], unit_id="villa-42")
    return BookingWindowValidator(index)


class RecordingValidator(BookingWindowValidator):
    """Validator that remembers every pair it was asked about."""

    def __init__(self, index):
        super().__init__(index)
        self.calls = []

    def validate(self, check_in, check_out):
        self.calls.append((check_in, check_out))
        return super().validate(check_in, check_out)


# ===== BookingWindow =====

def test_window_requires_check_out_after_check_in():
    with pytest.raises(ValueError):
        BookingWindow(date(2025, 6, 5), date(2025, 6, 5))


def test_window_interior_nights_include_check_out_not_check_in():
    window = BookingWindow(date(2025, 6, 1), date(2025, 6, 4))

    assert window.nights == 3
    assert list(window.interior_nights()) == [date(2025, 6, 2), date(2025, 6, 3), date(2025, 6, 4)]


# ===== Validation rules =====

def test_missing_dates(validator):
    assert validator.validate(None, date(2025, 6, 9)).reason == InvalidReason.NO_CHECK_IN
    assert validator.validate(date(2025, 6, 1), None).reason == InvalidReason.NO_CHECK_OUT
    assert validator.validate(None, None).reason == InvalidReason.NO_CHECK_IN


@pytest.mark.parametrize(
    "check_in, check_out",
    [
        (date(2025, 6, 9), date(2025, 6, 9)),
        (date(2025, 6, 9), date(2025, 6, 1)),
        # Blocked dates do not change the answer
        (date(2025, 6, 15), date(2025, 6, 10)),
    ],
)
def test_check_out_not_after_check_in(validator, check_in, check_out):
    result = validator.validate(check_in, check_out)

    assert not result.is_valid
    assert result.reason == InvalidReason.CHECK_OUT_NOT_AFTER_CHECK_IN


def test_check_out_blocked_takes_priority_over_interior(validator):
    # 2025-06-10 is interior and 2025-06-15 is the check-out; check-out rule wins
    assert validator.validate(date(2025, 6, 1), date(2025, 6, 15)).reason == InvalidReason.CHECK_OUT_BLOCKED


def test_round_trip_scenario(validator):
    assert validator.validate(date(2025, 6, 1), date(2025, 6, 10)) == ValidationResult.invalid(
        InvalidReason.CHECK_OUT_BLOCKED
    )
    assert validator.validate(date(2025, 6, 1), date(2025, 6, 9)) == ValidationResult.valid(nights=8)
    assert validator.validate(date(2025, 6, 11), date(2025, 6, 16)) == ValidationResult.invalid(
        InvalidReason.INTERIOR_NIGHT_BLOCKED
    )
    assert validator.validate(date(2025, 6, 11), date(2025, 6, 14)) == ValidationResult.valid(nights=3)


def test_check_in_on_blocked_day_is_allowed_by_window_rules(validator):
    # The guest does not occupy the check-in night of the previous stay
    result = validator.validate(date(2025, 6, 10), date(2025, 6, 12))

    assert result.is_valid
    assert result.nights == 2


def test_accepts_strings_and_datetimes(validator):
    result = validator.validate("2025-06-11", datetime(2025, 6, 14, 11, 0))

    assert result == ValidationResult.valid(nights=3)


def test_malformed_date_propagates(validator):
    with pytest.raises(MalformedDateError):
        validator.validate("2025-06-01", "2025-06-32")


def test_result_message_and_truthiness(validator):
    invalid = validator.validate(date(2025, 6, 9), date(2025, 6, 1))
    valid = validator.validate(date(2025, 6, 1), date(2025, 6, 2))

    assert not invalid
    assert invalid.message == "La date de départ doit être après la date d'arrivée."
    assert valid
    assert valid.message == ""


# ===== Disabled-date policy =====

def test_check_in_disabled_for_past_and_blocked(validator):
    today = date(2025, 6, 5)

    assert validator.is_check_in_disabled(date(2025, 6, 4), today)
    assert validator.is_check_in_disabled(date(2025, 6, 10), today)
    assert not validator.is_check_in_disabled(date(2025, 6, 5), today)
    assert not validator.is_check_in_disabled(date(2025, 6, 11), today)


def test_check_out_disabled_rules(validator):
    today = date(2025, 6, 5)
    check_in = date(2025, 6, 11)

    assert validator.is_check_out_disabled(date(2025, 6, 4), check_in, today)
    assert validator.is_check_out_disabled(date(2025, 6, 11), check_in, today)
    assert validator.is_check_out_disabled(date(2025, 6, 15), check_in, today)
    assert validator.is_check_out_disabled(date(2025, 6, 20), check_in, today)
    assert not validator.is_check_out_disabled(date(2025, 6, 14), check_in, today)


def test_check_out_without_check_in_only_checks_the_past(validator):
    today = date(2025, 6, 5)

    assert validator.is_check_out_disabled(date(2025, 6, 1), None, today)
    assert not validator.is_check_out_disabled(date(2025, 6, 20), None, today)


def test_calendar_policy_agrees_with_validator(validator):
    today = date(2025, 5, 1)
    check_in = date(2025, 6, 1)
    candidate = date(2025, 6, 2)
    while candidate <= date(2025, 6, 30):
        disabled = validator.is_check_out_disabled(candidate, check_in, today)
        assert disabled == (not validator.validate(check_in, candidate).is_valid)
        candidate += timedelta(days=1)


# ===== Selection state machine =====

def test_selection_happy_path(validator):
    selection = BookingSelection(validator)
    assert selection.state == SelectionState.EMPTY

    assert selection.select_check_in(date(2025, 6, 1)) == SelectionState.CHECK_IN_CHOSEN
    result = selection.select_check_out(date(2025, 6, 9))

    assert result == ValidationResult.valid(nights=8)
    assert selection.state == SelectionState.VALID
    assert selection.is_bookable


def test_selection_invalid_check_out(validator):
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 11))

    result = selection.select_check_out(date(2025, 6, 16))

    assert result.reason == InvalidReason.INTERIOR_NIGHT_BLOCKED
    assert selection.state == SelectionState.INVALID
    assert not selection.is_bookable


def test_check_in_change_clears_incompatible_check_out():
    validator = RecordingValidator(AvailabilityIndex.build(["2025-06-10", "2025-06-15"]))
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 11))
    selection.select_check_out(date(2025, 6, 14))
    assert selection.state == SelectionState.VALID

    # Moving check-in before 2025-06-10 makes the stay cover a blocked night
    state = selection.select_check_in(date(2025, 6, 8))

    assert state == SelectionState.CHECK_IN_CHOSEN
    assert selection.check_out is None
    assert selection.result is None

    # Picking a new check-out validates only the fresh pair
    validator.calls.clear()
    selection.select_check_out(date(2025, 6, 9))
    assert validator.calls == [(date(2025, 6, 8), date(2025, 6, 9))]
    assert selection.state == SelectionState.VALID


def test_check_in_moved_past_check_out_clears_it(validator):
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 1))
    selection.select_check_out(date(2025, 6, 5))

    selection.select_check_in(date(2025, 6, 7))

    assert selection.check_out is None
    assert selection.state == SelectionState.CHECK_IN_CHOSEN


def test_check_in_change_keeps_compatible_check_out(validator):
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 1))
    selection.select_check_out(date(2025, 6, 9))

    selection.select_check_in(date(2025, 6, 3))

    assert selection.check_out == date(2025, 6, 9)
    assert selection.state == SelectionState.VALID
    assert selection.result == ValidationResult.valid(nights=6)


def test_refresh_index_clears_check_out_after_new_booking(validator):
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 1))
    selection.select_check_out(date(2025, 6, 5))

    selection.refresh_index(AvailabilityIndex.build(["2025-06-03", "2025-06-10", "2025-06-15"]))

    assert selection.check_in == date(2025, 6, 1)
    assert selection.check_out is None
    assert selection.state == SelectionState.CHECK_IN_CHOSEN


def test_reset(validator):
    selection = BookingSelection(validator)
    selection.select_check_in(date(2025, 6, 1))
    selection.select_check_out(date(2025, 6, 5))

    selection.reset()

    assert selection.state == SelectionState.EMPTY
    assert selection.check_in is None
    assert selection.check_out is None


# ===== Calendar edges =====

def test_window_ending_on_the_last_representable_day(validator):
    assert validator.validate(date(9999, 12, 30), date.max) == ValidationResult.valid(nights=1)
    assert list(BookingWindow(date(9999, 12, 29), date.max).interior_nights()) == [date(9999, 12, 30), date.max]


def test_window_check_out_blocked_on_the_last_representable_day():
    validator = BookingWindowValidator(AvailabilityIndex.build([date.max]))

    assert validator.validate(date(9999, 12, 1), date.max).reason == InvalidReason.CHECK_OUT_BLOCKED
    assert validator.is_check_out_disabled(date.max, date(9999, 12, 1), date(2025, 6, 1))


# ===== Vehicle rentals =====

def test_rental_same_day_return_is_valid(validator):
    assert validator.validate_rental(date(2025, 6, 11), date(2025, 6, 11)).is_valid


def test_rental_rules(validator):
    assert validator.validate_rental(None, date(2025, 6, 12)).reason == InvalidReason.NO_CHECK_IN
    assert validator.validate_rental(date(2025, 6, 12), None).reason == InvalidReason.NO_CHECK_OUT
    assert (
        validator.validate_rental(date(2025, 6, 12), date(2025, 6, 11)).reason
        == InvalidReason.RETURN_BEFORE_PICKUP
    )
    # Pickup day and return day are both occupied by a vehicle rental
    assert validator.validate_rental(date(2025, 6, 10), date(2025, 6, 12)).reason == InvalidReason.RENTAL_DAY_BLOCKED
    assert validator.validate_rental(date(2025, 6, 11), date(2025, 6, 15)).reason == InvalidReason.RENTAL_DAY_BLOCKED
    assert validator.validate_rental(date(2025, 6, 11), date(2025, 6, 14)).is_valid
