"""
Roster schemas.

Request/response models for the organization player roster and team
membership endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from fieldhouse.models.player import PlayerStatus
from fieldhouse.models.team import TeamMemberRole


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

class RosterRow(BaseModel):
    """One roster entry. ``team_id`` is None for free agents."""

    roster_id: UUID
    user_id: UUID
    team_id: UUID | None = None
    team_name: str | None = None
    team_slug: str | None = None
    status: PlayerStatus
    user_name: str
    user_email: str


class RosterListResponse(BaseModel):
    players: list[RosterRow]
    total: int


class RosterEntryResponse(BaseModel):
    id: UUID
    org_id: UUID
    user_id: UUID
    status: PlayerStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PlayerStatusUpdateRequest(BaseModel):
    """Request body for PATCH /organizations/{org_id}/players/{roster_id}."""

    status: PlayerStatus


class PlayerStatsResponse(BaseModel):
    total_players: int
    free_agents: int
    assigned_players: int
    new_this_month: int
    by_status: dict[str, int]


# ---------------------------------------------------------------------------
# Team membership
# ---------------------------------------------------------------------------

class AddPlayerRequest(BaseModel):
    """Request body for POST /organizations/{org_id}/teams/{team_id}/players."""

    email: str = Field(min_length=3, max_length=255)
    status: PlayerStatus | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class SetTeamPlayersRequest(BaseModel):
    """Desired member set for PUT /organizations/{org_id}/teams/{team_id}/players."""

    user_ids: list[UUID]


class TeamMemberResponse(BaseModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    role: TeamMemberRole
    joined_at: datetime

    model_config = {"from_attributes": True}


class TeamMemberDetail(BaseModel):
    """Team member with user info, for the team players screen."""

    id: UUID
    user_id: UUID
    role: TeamMemberRole
    user_name: str
    user_email: str
    joined_at: datetime


class TeamMembersListResponse(BaseModel):
    members: list[TeamMemberDetail]
    total: int


class TeamPlayersReconcileResponse(BaseModel):
    added: list[UUID]
    removed: list[UUID]
    members: list[TeamMemberDetail]
