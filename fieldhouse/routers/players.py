"""
Roster and team membership endpoints.

All routes under /organizations/{org_id}/... and scoped to that org.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_org_member, require_role
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.schemas.player import (
    AddPlayerRequest,
    PlayerStatsResponse,
    PlayerStatusUpdateRequest,
    RosterEntryResponse,
    RosterListResponse,
    SetTeamPlayersRequest,
    TeamMemberResponse,
    TeamMembersListResponse,
    TeamPlayersReconcileResponse,
)
from fieldhouse.services.roster_service import RosterService

router = APIRouter()

OrgContext = tuple[Organization, StaffMember]


def get_roster_service(db: AsyncSession = Depends(get_db)) -> RosterService:
    return RosterService(db=db)


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

@router.get(
    "/organizations/{org_id}/players",
    response_model=RosterListResponse,
    summary="List the organization roster",
)
async def list_roster(
    team_id: UUID | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    org_and_member: OrgContext = Depends(get_org_member),
    service: RosterService = Depends(get_roster_service),
) -> RosterListResponse:
    """
    List roster entries with their team assignment.

    - team_id narrows to one team of this organization
    - search matches player name or email
    """
    org, _ = org_and_member
    return await service.list_roster(org.id, team_id=team_id, search=search)


@router.get(
    "/organizations/{org_id}/players/stats",
    response_model=PlayerStatsResponse,
    summary="Roster statistics",
)
async def get_player_stats(
    org_and_member: OrgContext = Depends(get_org_member),
    service: RosterService = Depends(get_roster_service),
) -> PlayerStatsResponse:
    org, _ = org_and_member
    return await service.get_player_stats(org.id)


@router.patch(
    "/organizations/{org_id}/players/{roster_id}",
    response_model=RosterEntryResponse,
    summary="Update a player's status",
)
async def update_player_status(
    roster_id: UUID,
    data: PlayerStatusUpdateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: RosterService = Depends(get_roster_service),
) -> RosterEntryResponse:
    org, _ = org_and_member
    return await service.update_player_status(org.id, roster_id, data.status)


@router.delete(
    "/organizations/{org_id}/players/{roster_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a player from the roster",
)
async def remove_player_from_roster(
    roster_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: RosterService = Depends(get_roster_service),
) -> dict:
    """
    Delete the roster entry.

    The player's memberships on this organization's teams are removed too;
    an admin leaving hands the role to the longest-standing member.
    """
    org, _ = org_and_member
    await service.remove_player_from_roster(org.id, roster_id)
    return {"success": True}


# ---------------------------------------------------------------------------
# Team players
# ---------------------------------------------------------------------------

@router.get(
    "/organizations/{org_id}/teams/{team_id}/players",
    response_model=TeamMembersListResponse,
    summary="List team members",
)
async def list_team_members(
    team_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: RosterService = Depends(get_roster_service),
) -> TeamMembersListResponse:
    org, _ = org_and_member
    return await service.list_team_members(org.id, team_id)


@router.post(
    "/organizations/{org_id}/teams/{team_id}/players",
    response_model=TeamMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a player to a team",
)
async def add_player_to_team(
    team_id: UUID,
    data: AddPlayerRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: RosterService = Depends(get_roster_service),
) -> TeamMemberResponse:
    """
    Add the user with the given email to the team.

    - The user account must already exist
    - A user can be on only one team at a time
    - A roster entry is created if missing
    """
    org, _ = org_and_member
    return await service.add_player_to_team(org.id, team_id, data)


@router.put(
    "/organizations/{org_id}/teams/{team_id}/players",
    response_model=TeamPlayersReconcileResponse,
    summary="Replace the team's member set",
)
async def set_team_players(
    team_id: UUID,
    data: SetTeamPlayersRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: RosterService = Depends(get_roster_service),
) -> TeamPlayersReconcileResponse:
    """Adds and removes members so the team matches user_ids, in one transaction."""
    org, _ = org_and_member
    return await service.set_team_players(org.id, team_id, data.user_ids)


@router.delete(
    "/organizations/{org_id}/teams/{team_id}/players/{user_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a player from a team",
)
async def remove_player_from_team(
    team_id: UUID,
    user_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: RosterService = Depends(get_roster_service),
) -> dict:
    org, _ = org_and_member
    await service.remove_player_from_team(org.id, team_id, user_id)
    return {"success": True}
