"""
Weekly operating schedules.

A schedule maps each lowercase weekday key to ``None`` (closed) or
``{"startTime": "HH:mm", "endTime": "HH:mm"}``. Stored as JSON on leagues
and facilities; these helpers are pure and never touch the database.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

DAY_KEYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DAY_LABELS: dict[str, str] = {
    "monday": "Mon",
    "tuesday": "Tue",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
    "saturday": "Sat",
    "sunday": "Sun",
}

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

CLOSED_LABEL = "Closed"

_CLOSED_KEY = "closed"


@dataclass
class ScheduleGroup:
    """Consecutive display group: day chips plus a single time range."""

    day_labels: list[str] = field(default_factory=list)
    time_range: str = CLOSED_LABEL


def day_label(day: str) -> str:
    return DAY_LABELS.get(day, day)


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value))


def to_minutes(value: str) -> int | None:
    """Minutes since midnight for an ``HH:mm`` string, or None if malformed."""
    if not is_valid_time(value):
        return None
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time_12h(value: str) -> str:
    """
    Render ``HH:mm`` in 12-hour form.

    "09:00" -> "9:00 AM", "17:30" -> "5:30 PM", "00:15" -> "12:15 AM".
    Blank input gives "", unparseable input is returned unchanged.
    """
    value = (value or "").strip()
    if not value:
        return ""
    hour_part, _, minute_part = value.partition(":")
    try:
        hour = int(hour_part)
    except ValueError:
        return value
    try:
        minute = int(minute_part)
    except ValueError:
        minute = 0
    display_hour = hour % 12 or 12
    suffix = "AM" if hour < 12 else "PM"
    return f"{display_hour}:{minute:02d} {suffix}"


def format_time_range_12h(start: str, end: str) -> str:
    start_12 = format_time_12h(start)
    end_12 = format_time_12h(end)
    if start_12 and end_12:
        return f"{start_12} – {end_12}"
    return start_12 or end_12


def _day_hours(schedule: Mapping[str, Any], day: str) -> tuple[str, str] | None:
    hours = schedule.get(day)
    if not isinstance(hours, Mapping):
        return None
    start = hours.get("startTime")
    end = hours.get("endTime")
    if start is None or end is None:
        return None
    return str(start), str(end)


def _group_key(hours: tuple[str, str] | None) -> str:
    if hours is None:
        return _CLOSED_KEY
    start, end = hours
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)
    # Malformed values fall back to raw text so they never merge with valid ones.
    start_key = str(start_minutes) if start_minutes is not None else f"raw:{start}"
    end_key = str(end_minutes) if end_minutes is not None else f"raw:{end}"
    return f"{start_key}|{end_key}"


def group_schedule(schedule: Mapping[str, Any] | None) -> list[ScheduleGroup]:
    """
    Group days that share the same hours.

    Days are visited Monday to Sunday. Days with equal start/end times
    (compared as minutes since midnight) share a group, and every closed
    day shares the "Closed" group. Groups are ordered by their first day.
    Display times come from the first day that opened the group.
    """
    if not schedule or not isinstance(schedule, Mapping):
        return []

    groups: dict[str, ScheduleGroup] = {}
    for day in DAY_KEYS:
        hours = _day_hours(schedule, day)
        key = _group_key(hours)
        group = groups.get(key)
        if group is None:
            time_range = (
                CLOSED_LABEL if hours is None else format_time_range_12h(*hours)
            )
            group = ScheduleGroup(day_labels=[], time_range=time_range)
            groups[key] = group
        group.day_labels.append(day_label(day))

    # dict preserves insertion order, which is first-day order
    return list(groups.values())


def form_state_from_schedule(
    schedule: Mapping[str, Any] | None,
) -> dict[str, dict[str, str]]:
    """Editable form state: all seven days present, blanks for closed days."""
    state: dict[str, dict[str, str]] = {}
    for day in DAY_KEYS:
        hours = _day_hours(schedule or {}, day)
        if hours is None:
            state[day] = {"startTime": "", "endTime": ""}
        else:
            state[day] = {"startTime": hours[0], "endTime": hours[1]}
    return state


def schedule_from_form_state(
    state: Mapping[str, Mapping[str, str | None]],
) -> dict[str, dict[str, str] | None]:
    """Canonical schedule from form state. A day is closed if either field is blank."""
    schedule: dict[str, dict[str, str] | None] = {}
    for day in DAY_KEYS:
        row = state.get(day) or {}
        start = (row.get("startTime") or "").strip()
        end = (row.get("endTime") or "").strip()
        schedule[day] = {"startTime": start, "endTime": end} if start and end else None
    return schedule
