from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from fieldhouse.models.team import TeamStatus


class TeamCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    admin_user_id: UUID

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Team name is required")
        return v


class TeamUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    status: TeamStatus | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Team name is required")
        return v


class TeamResponse(BaseModel):
    id: UUID
    org_id: UUID
    name: str
    slug: str
    status: TeamStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TeamSummary(BaseModel):
    """Compact team shape used by league participation lists."""

    id: UUID
    name: str
    slug: str
    status: TeamStatus

    model_config = {"from_attributes": True}


class TeamListResponse(BaseModel):
    teams: list[TeamResponse]
    total: int
