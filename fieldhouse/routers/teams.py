"""
Team endpoints.

All routes under /organizations/{org_id}/teams and scoped to that org.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_org_member, require_role
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.schemas.team import (
    TeamCreateRequest,
    TeamListResponse,
    TeamResponse,
    TeamUpdateRequest,
)
from fieldhouse.services.team_service import TeamService

router = APIRouter()

OrgContext = tuple[Organization, StaffMember]


def get_team_service(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(db=db)


@router.get(
    "/organizations/{org_id}/teams",
    response_model=TeamListResponse,
    summary="List teams",
)
async def list_teams(
    search: str | None = Query(default=None, max_length=100),
    org_and_member: OrgContext = Depends(get_org_member),
    service: TeamService = Depends(get_team_service),
) -> TeamListResponse:
    org, _ = org_and_member
    return await service.list_teams(org.id, search)


@router.post(
    "/organizations/{org_id}/teams",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a team with its admin",
)
async def create_team(
    data: TeamCreateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    """
    Create a team and assign admin_user_id as its admin.

    - The admin must not already be on a team
    - The admin gets an inactive roster entry if they have none
    - The team slug is a random 7-character code
    """
    org, _ = org_and_member
    return await service.create_team_with_admin(org.id, data)


# Declared before /{team_id} so "by-slug" is not parsed as a UUID
@router.get(
    "/organizations/{org_id}/teams/by-slug/{slug}",
    response_model=TeamResponse,
    summary="Get team by slug",
)
async def get_team_by_slug(
    slug: str,
    org_and_member: OrgContext = Depends(get_org_member),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    org, _ = org_and_member
    return await service.get_team_by_slug(org.id, slug)


@router.get(
    "/organizations/{org_id}/teams/{team_id}",
    response_model=TeamResponse,
    summary="Get team",
)
async def get_team(
    team_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    org, _ = org_and_member
    return await service.get_team(org.id, team_id)


@router.patch(
    "/organizations/{org_id}/teams/{team_id}",
    response_model=TeamResponse,
    summary="Update team name or status",
)
async def update_team(
    team_id: UUID,
    data: TeamUpdateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    org, _ = org_and_member
    return await service.update_team(org.id, team_id, data)


@router.delete(
    "/organizations/{org_id}/teams/{team_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete a team",
)
async def delete_team(
    team_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: TeamService = Depends(get_team_service),
) -> dict:
    """Delete the team with its memberships and league participation."""
    org, _ = org_and_member
    await service.delete_team(org.id, team_id)
    return {"success": True}
