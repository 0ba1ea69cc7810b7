"""Tests for canonical date keys and the availability index."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from apps.availability.domain.calendar import AvailabilityIndex, canonical_date_key, to_calendar_date
from apps.availability.domain.errors import MalformedDateError


BLOCKED = [date(2025, 6, 10), date(2025, 6, 15)]


@pytest.fixture
def index():
    return AvailabilityIndex.build(BLOCKED, unit_id="villa-42")


@pytest.mark.parametrize(
    "value",
    [
        date(2025, 6, 10),
        datetime(2025, 6, 10, 0, 0),
        datetime(2025, 6, 10, 23, 59, 59),
        "2025-06-10",
        " 2025-06-10 ",
        "2025-06-10T18:30:00",
        "2025-06-10 08:00:00",
    ],
)
def test_canonical_key_ignores_time_of_day(value):
    assert canonical_date_key(value) == "2025-06-10"


def test_aware_datetime_keeps_local_calendar_day():
    # 23:30 at UTC+2 is already the next day in UTC; the local day must win
    late_evening = datetime(2025, 6, 9, 23, 30, tzinfo=timezone(timedelta(hours=2)))

    assert canonical_date_key(late_evening) == "2025-06-09"
    assert canonical_date_key("2025-06-09T23:30:00+02:00") == "2025-06-09"


@pytest.mark.parametrize("value", ["2025-02-30", "2025-13-01", "10/06/2025", "", "tomorrow", 20250610, None])
def test_malformed_values_raise(value):
    with pytest.raises(MalformedDateError):
        to_calendar_date(value)


def test_malformed_date_error_is_a_value_error():
    with pytest.raises(ValueError):
        canonical_date_key("not-a-date")


def test_build_fails_on_any_malformed_row():
    with pytest.raises(MalformedDateError) as excinfo:
        AvailabilityIndex.build(["2025-06-10", "2025-06-31"])

    assert excinfo.value.value == "2025-06-31"


def test_build_deduplicates_mixed_inputs():
    index = AvailabilityIndex.build(
        ["2025-06-10", date(2025, 6, 10), datetime(2025, 6, 10, 14, 0), "2025-06-15"]
    )

    assert len(index) == 2
    assert index.blocked_dates() == (date(2025, 6, 10), date(2025, 6, 15))


def test_blocked_membership_matches_source(index):
    for blocked in BLOCKED:
        assert index.is_blocked(blocked)
        assert blocked in index

    day = date(2025, 6, 1)
    while day <= date(2025, 6, 30):
        assert index.is_blocked(day) == (day in BLOCKED)
        day += timedelta(days=1)


def test_is_blocked_uses_same_normalisation_as_build(index):
    assert index.is_blocked("2025-06-10")
    assert index.is_blocked(datetime(2025, 6, 10, 23, 59))
    assert index.is_blocked("2025-06-15T00:00:00Z")
    assert not index.is_blocked("2025-06-11")


def test_empty_index_blocks_nothing():
    index = AvailabilityIndex.build([])

    assert len(index) == 0
    assert not index.is_blocked(date(2025, 6, 10))
    assert not index.has_blocked_between(date(2025, 1, 1), date(2025, 12, 31))


def test_has_blocked_between_excludes_start_and_includes_end(index):
    # Check-in on a blocked day is not part of the walk
    assert not index.has_blocked_between(date(2025, 6, 10), date(2025, 6, 14))
    # Check-out on a blocked day is
    assert index.has_blocked_between(date(2025, 6, 8), date(2025, 6, 10))
    assert index.has_blocked_between(date(2025, 6, 11), date(2025, 6, 16))
    assert not index.has_blocked_between(date(2025, 6, 11), date(2025, 6, 14))


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2025, 6, 9), date(2025, 6, 9)),
        (date(2025, 6, 16), date(2025, 6, 9)),
        (date(2025, 6, 11), date(2025, 6, 1)),
    ],
)
def test_has_blocked_between_is_false_for_reversed_ranges(index, start, end):
    assert index.has_blocked_between(start, end) is False


def test_index_is_immutable(index):
    with pytest.raises(AttributeError):
        index.keys = frozenset()


def test_has_blocked_between_reaches_the_last_representable_day(index):
    assert not index.has_blocked_between(date(9999, 12, 30), date.max)
    assert AvailabilityIndex.build([date.max]).has_blocked_between(date(9999, 12, 1), date.max)


def test_has_blocked_between_over_a_span_wider_than_the_index(index):
    # A handful of blocked dates across an eight-thousand-year span
    assert index.has_blocked_between(date(1, 1, 2), date(9999, 12, 30))
    assert not index.has_blocked_between(date(2025, 6, 15), date(9999, 12, 30))
    assert not index.has_blocked_between(date(1, 1, 1), date(2025, 6, 9))
