"""
League endpoints.

League CRUD, stats and league/team participation. All routes under
/organizations/{org_id}/leagues and scoped to that org.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_org_member, require_role
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.schemas.league import (
    AddTeamToLeagueRequest,
    LeagueCreateRequest,
    LeagueDetailResponse,
    LeagueListResponse,
    LeagueResponse,
    LeagueStatsResponse,
    LeagueTeamResponse,
    LeagueTeamsReconcileResponse,
    LeagueUpdateRequest,
    SetLeagueTeamsRequest,
    TeamSummaryListResponse,
)
from fieldhouse.services.league_service import LeagueService

router = APIRouter()

OrgContext = tuple[Organization, StaffMember]


def get_league_service(db: AsyncSession = Depends(get_db)) -> LeagueService:
    return LeagueService(db=db)


# ---------------------------------------------------------------------------
# League CRUD
# ---------------------------------------------------------------------------

@router.get(
    "/organizations/{org_id}/leagues",
    response_model=LeagueListResponse,
    summary="List leagues",
)
async def list_leagues(
    search: str | None = Query(default=None, max_length=100),
    org_and_member: OrgContext = Depends(get_org_member),
    service: LeagueService = Depends(get_league_service),
) -> LeagueListResponse:
    org, _ = org_and_member
    return await service.list_leagues(org.id, search)


@router.get(
    "/organizations/{org_id}/leagues/stats",
    response_model=LeagueStatsResponse,
    summary="League statistics",
)
async def get_league_stats(
    org_and_member: OrgContext = Depends(get_org_member),
    service: LeagueService = Depends(get_league_service),
) -> LeagueStatsResponse:
    org, _ = org_and_member
    return await service.get_league_stats(org.id)


@router.post(
    "/organizations/{org_id}/leagues",
    response_model=LeagueResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the organization's league",
)
async def create_league(
    data: LeagueCreateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> LeagueResponse:
    """
    Create a league.

    - An organization has at most one league
    - The slug is derived from the name
    """
    org, _ = org_and_member
    return await service.create_league(org.id, data)


@router.get(
    "/organizations/{org_id}/leagues/{league_id}",
    response_model=LeagueDetailResponse,
    summary="Get league with participating teams",
)
async def get_league(
    league_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: LeagueService = Depends(get_league_service),
) -> LeagueDetailResponse:
    org, _ = org_and_member
    return await service.get_league(org.id, league_id)


@router.patch(
    "/organizations/{org_id}/leagues/{league_id}",
    response_model=LeagueResponse,
    summary="Update league",
)
async def update_league(
    league_id: UUID,
    data: LeagueUpdateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> LeagueResponse:
    org, _ = org_and_member
    return await service.update_league(org.id, league_id, data)


@router.delete(
    "/organizations/{org_id}/leagues/{league_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete league",
)
async def delete_league(
    league_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> dict:
    """Delete the league. Teams are kept; only participation rows go."""
    org, _ = org_and_member
    await service.delete_league(org.id, league_id)
    return {"success": True}


# ---------------------------------------------------------------------------
# Participation
# ---------------------------------------------------------------------------

@router.get(
    "/organizations/{org_id}/leagues/{league_id}/teams",
    response_model=TeamSummaryListResponse,
    summary="List teams in the league",
)
async def list_participants(
    league_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: LeagueService = Depends(get_league_service),
) -> TeamSummaryListResponse:
    org, _ = org_and_member
    return await service.list_participants(org.id, league_id)


@router.get(
    "/organizations/{org_id}/leagues/{league_id}/available-teams",
    response_model=TeamSummaryListResponse,
    summary="List organization teams not yet in the league",
)
async def list_available(
    league_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: LeagueService = Depends(get_league_service),
) -> TeamSummaryListResponse:
    org, _ = org_and_member
    return await service.list_available(org.id, league_id)


@router.post(
    "/organizations/{org_id}/leagues/{league_id}/teams",
    response_model=LeagueTeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a team to the league",
)
async def add_team_to_league(
    league_id: UUID,
    data: AddTeamToLeagueRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> LeagueTeamResponse:
    org, _ = org_and_member
    return await service.add_team_to_league(org.id, league_id, data.team_id)


@router.put(
    "/organizations/{org_id}/leagues/{league_id}/teams",
    response_model=LeagueTeamsReconcileResponse,
    summary="Replace the league's participating teams",
)
async def set_league_teams(
    league_id: UUID,
    data: SetLeagueTeamsRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> LeagueTeamsReconcileResponse:
    """
    Make the participant set equal team_ids.

    Adds are applied before removes; a failure on any team leaves the
    league unchanged.
    """
    org, _ = org_and_member
    return await service.set_league_teams(org.id, league_id, data.team_ids)


@router.delete(
    "/organizations/{org_id}/leagues/{league_id}/teams/{team_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a team from the league",
)
async def remove_team_from_league(
    league_id: UUID,
    team_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: LeagueService = Depends(get_league_service),
) -> dict:
    org, _ = org_and_member
    await service.remove_team_from_league(org.id, league_id, team_id)
    return {"success": True}
