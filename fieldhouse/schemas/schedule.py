"""
Operating schedule schemas.

The persisted JSON keeps camelCase ``startTime``/``endTime`` keys, so the
models accept and emit those aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fieldhouse.utils.schedule import TIME_PATTERN, ScheduleGroup


class DayHours(BaseModel):
    """Open/close times for one day, 24-hour ``HH:mm``."""

    model_config = ConfigDict(populate_by_name=True)

    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @field_validator("start_time", "end_time")
    @classmethod
    def time_must_be_hh_mm(cls, v: str) -> str:
        v = v.strip()
        if not TIME_PATTERN.match(v):
            raise ValueError("Time must be in 24-hour HH:mm format")
        return v


class OperatingSchedule(BaseModel):
    """Per-day hours. A missing or null day is closed."""

    model_config = ConfigDict(extra="forbid")

    monday: DayHours | None = None
    tuesday: DayHours | None = None
    wednesday: DayHours | None = None
    thursday: DayHours | None = None
    friday: DayHours | None = None
    saturday: DayHours | None = None
    sunday: DayHours | None = None

    def to_storage(self) -> dict[str, Any]:
        """JSON blob as stored on leagues and facilities (all seven keys)."""
        return self.model_dump(by_alias=True)


class ScheduleGroupResponse(BaseModel):
    day_labels: list[str]
    time_range: str

    @classmethod
    def from_group(cls, group: ScheduleGroup) -> ScheduleGroupResponse:
        return cls(day_labels=list(group.day_labels), time_range=group.time_range)


class ScheduleGroupRequest(BaseModel):
    """Request body for POST /schedules/groups."""

    schedule: OperatingSchedule | None = None


class ScheduleGroupListResponse(BaseModel):
    groups: list[ScheduleGroupResponse]
