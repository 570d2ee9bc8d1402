"""
Operating schedule grouping and form conversion tests.
"""

import pytest
from pydantic import ValidationError

from fieldhouse.schemas.schedule import DayHours, OperatingSchedule
from fieldhouse.utils.schedule import (
    form_state_from_schedule,
    format_time_12h,
    group_schedule,
    schedule_from_form_state,
)

NINE_TO_FIVE = {"startTime": "09:00", "endTime": "17:00"}


def weekday_schedule(weekend=None):
    schedule = {day: dict(NINE_TO_FIVE) for day in ("monday", "tuesday", "wednesday", "thursday", "friday")}
    schedule["saturday"] = weekend
    schedule["sunday"] = weekend
    return schedule


# ---------------------------------------------------------------------------
# 12-hour formatting
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("09:00", "9:00 AM"),
        ("17:30", "5:30 PM"),
        ("00:15", "12:15 AM"),
        ("12:00", "12:00 PM"),
        ("", ""),
    ],
)
def test_format_time_12h(value, expected):
    assert format_time_12h(value) == expected


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def test_weekdays_and_closed_weekend():
    groups = group_schedule(weekday_schedule())

    assert len(groups) == 2
    assert groups[0].day_labels == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert groups[0].time_range == "9:00 AM – 5:00 PM"
    assert groups[1].day_labels == ["Sat", "Sun"]
    assert groups[1].time_range == "Closed"


def test_empty_or_missing_schedule_has_no_groups():
    assert group_schedule(None) == []
    assert group_schedule({}) == []


def test_days_with_same_hours_merge_even_when_not_adjacent():
    schedule = {
        "monday": NINE_TO_FIVE,
        "tuesday": {"startTime": "10:00", "endTime": "14:00"},
        "wednesday": NINE_TO_FIVE,
    }
    groups = group_schedule(schedule)

    assert [g.day_labels for g in groups] == [
        ["Mon", "Wed"],
        ["Tue"],
        ["Thu", "Fri", "Sat", "Sun"],
    ]
    assert groups[2].time_range == "Closed"


def test_groups_compare_times_as_minutes():
    schedule = {
        "monday": {"startTime": "09:00", "endTime": "17:00"},
        "tuesday": {"startTime": "9:00", "endTime": "17:00"},
    }
    groups = group_schedule(schedule)

    assert groups[0].day_labels == ["Mon", "Tue"]
    assert groups[0].time_range == "9:00 AM – 5:00 PM"


def test_every_day_lands_in_exactly_one_group():
    groups = group_schedule(weekday_schedule(weekend={"startTime": "08:00", "endTime": "12:00"}))

    labels = [label for g in groups for label in g.day_labels]
    assert sorted(labels) == sorted(["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"])
    assert groups[1].time_range == "8:00 AM – 12:00 PM"


def test_malformed_day_does_not_merge_with_valid_hours():
    schedule = {
        "monday": NINE_TO_FIVE,
        "tuesday": {"startTime": "nine", "endTime": "17:00"},
    }
    groups = group_schedule(schedule)

    assert groups[0].day_labels == ["Mon"]
    assert groups[1].day_labels == ["Tue"]


# ---------------------------------------------------------------------------
# Form state
# ---------------------------------------------------------------------------

def test_form_state_fills_closed_days_with_blanks():
    state = form_state_from_schedule({"monday": NINE_TO_FIVE})

    assert len(state) == 7
    assert state["monday"] == {"startTime": "09:00", "endTime": "17:00"}
    assert state["sunday"] == {"startTime": "", "endTime": ""}


def test_blank_field_closes_the_day():
    state = form_state_from_schedule(weekday_schedule())
    state["friday"]["endTime"] = "  "

    schedule = schedule_from_form_state(state)

    assert schedule["thursday"] == {"startTime": "09:00", "endTime": "17:00"}
    assert schedule["friday"] is None
    assert schedule["saturday"] is None


def test_form_state_round_trip_preserves_schedule():
    original = weekday_schedule(weekend={"startTime": "10:00", "endTime": "16:00"})

    assert schedule_from_form_state(form_state_from_schedule(original)) == original


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

def test_operating_schedule_rejects_bad_time():
    with pytest.raises(ValidationError):
        DayHours(startTime="25:00", endTime="17:00")


def test_operating_schedule_rejects_unknown_day():
    with pytest.raises(ValidationError):
        OperatingSchedule.model_validate({"funday": NINE_TO_FIVE})


def test_operating_schedule_storage_uses_camel_case_keys():
    stored = OperatingSchedule.model_validate({"monday": NINE_TO_FIVE}).to_storage()

    assert stored["monday"] == {"startTime": "09:00", "endTime": "17:00"}
    assert stored["tuesday"] is None
    assert set(stored) == {
        "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    }
