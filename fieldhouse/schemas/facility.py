from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from fieldhouse.models.facility import SurfaceType
from fieldhouse.schemas.schedule import OperatingSchedule, ScheduleGroupResponse
from fieldhouse.utils.slugs import is_valid_slug


def _required_name(v: str | None, label: str) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError(f"{label} name is required")
    return v


# ---------------------------------------------------------------------------
# Facility
# ---------------------------------------------------------------------------

class FacilityCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    address: str | None = None
    slug: str | None = Field(default=None, min_length=1, max_length=120)
    operating_schedule: OperatingSchedule | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return _required_name(v, "Facility")

    @field_validator("slug")
    @classmethod
    def slug_must_be_valid(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_slug(v):
            raise ValueError(
                "Slug must be lowercase alphanumeric and hyphens only, "
                "and cannot start or end with a hyphen"
            )
        return v


class FacilityUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    address: str | None = None
    operating_schedule: OperatingSchedule | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        return _required_name(v, "Facility")


class SurfaceResponse(BaseModel):
    id: UUID
    facility_id: UUID
    name: str
    type: SurfaceType
    sort_order: int

    model_config = {"from_attributes": True}


class FacilityResponse(BaseModel):
    id: UUID
    org_id: UUID
    name: str
    slug: str
    address: str | None
    operating_schedule: dict | None
    schedule_groups: list[ScheduleGroupResponse] = []
    created_at: datetime
    updated_at: datetime


class FacilityDetailResponse(FacilityResponse):
    surfaces: list[SurfaceResponse] = []


class FacilityListResponse(BaseModel):
    facilities: list[FacilityResponse]
    total: int


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------

class SurfaceCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: SurfaceType = SurfaceType.other

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return _required_name(v, "Surface")


class SurfaceUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: SurfaceType | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        return _required_name(v, "Surface")
