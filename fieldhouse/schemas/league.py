"""
League schemas.

Request/response models for league CRUD and league/team participation.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from fieldhouse.models.league import LeagueAgeGroup
from fieldhouse.schemas.schedule import OperatingSchedule, ScheduleGroupResponse
from fieldhouse.schemas.team import TeamSummary


# ---------------------------------------------------------------------------
# League
# ---------------------------------------------------------------------------

class LeagueCreateRequest(BaseModel):
    """Request body for POST /organizations/{org_id}/leagues."""

    name: str = Field(min_length=1, max_length=100)
    image: str | None = Field(default=None, max_length=500)
    age_group: LeagueAgeGroup | None = None
    operating_schedule: OperatingSchedule | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("League name is required")
        return v

    @model_validator(mode="after")
    def dates_in_order(self) -> LeagueCreateRequest:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeagueUpdateRequest(BaseModel):
    """
    Request body for PATCH /organizations/{org_id}/leagues/{league_id}.

    Fields left out are untouched; explicit nulls clear optional fields.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    image: str | None = Field(default=None, max_length=500)
    age_group: LeagueAgeGroup | None = None
    operating_schedule: OperatingSchedule | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("League name is required")
        return v


class LeagueResponse(BaseModel):
    id: UUID
    org_id: UUID
    name: str
    slug: str
    image: str | None
    age_group: LeagueAgeGroup | None
    age_group_label: str | None = None
    operating_schedule: dict | None
    schedule_groups: list[ScheduleGroupResponse] = []
    start_date: date | None
    end_date: date | None
    team_count: int = 0
    created_at: datetime
    updated_at: datetime


class LeagueDetailResponse(LeagueResponse):
    teams: list[TeamSummary] = []


class LeagueListResponse(BaseModel):
    leagues: list[LeagueResponse]
    total: int


class LeagueStatsResponse(BaseModel):
    total_leagues: int
    participating_teams: int
    teams_not_in_league: int
    new_this_month: int


# ---------------------------------------------------------------------------
# Participation
# ---------------------------------------------------------------------------

class AddTeamToLeagueRequest(BaseModel):
    team_id: UUID


class SetLeagueTeamsRequest(BaseModel):
    """Desired participant set for PUT /organizations/{org_id}/leagues/{league_id}/teams."""

    team_ids: list[UUID]


class LeagueTeamResponse(BaseModel):
    id: UUID
    league_id: UUID
    team_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class TeamSummaryListResponse(BaseModel):
    teams: list[TeamSummary]
    total: int


class LeagueTeamsReconcileResponse(BaseModel):
    added: list[UUID]
    removed: list[UUID]
    teams: list[TeamSummary]
