"""
Organization management endpoints.

Create, list, get, staff management and invitations.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_current_user, get_org_member, require_role
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.models.user import User
from fieldhouse.schemas.organization import (
    InvitationListResponse,
    OrganizationCreateRequest,
    OrganizationListResponse,
    OrganizationResponse,
    StaffAddRequest,
    StaffAddResponse,
    StaffListResponse,
    StaffResponse,
    StaffRoleUpdateRequest,
)
from fieldhouse.services.organization_service import OrganizationService
from fieldhouse.services.staff_service import StaffService

router = APIRouter()


def get_org_service(db: AsyncSession = Depends(get_db)) -> OrganizationService:
    """Dependency that constructs OrganizationService."""
    return OrganizationService(db=db)


def get_staff_service(db: AsyncSession = Depends(get_db)) -> StaffService:
    return StaffService(db=db)


# ---------------------------------------------------------------------------
# Create Organization
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new organization",
)
async def create_organization(
    data: OrganizationCreateRequest,
    current_user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_org_service),
) -> OrganizationResponse:
    """
    Create a new organization.

    - Slug is optional; a random code is generated when omitted
    - Creator is automatically assigned the admin staff role
    """
    return await service.create_organization(data, current_user)


# ---------------------------------------------------------------------------
# List / Get Organization
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=OrganizationListResponse,
    summary="List organizations the current user is staff of",
)
async def list_my_organizations(
    current_user: User = Depends(get_current_user),
    service: OrganizationService = Depends(get_org_service),
) -> OrganizationListResponse:
    return await service.list_my_organizations(current_user)


@router.get(
    "/{org_id}",
    response_model=OrganizationResponse,
    summary="Get organization",
)
async def get_organization(
    org_and_member: tuple[Organization, StaffMember] = Depends(get_org_member),
    service: OrganizationService = Depends(get_org_service),
) -> OrganizationResponse:
    """Get organization details. Must be staff."""
    org, _ = org_and_member
    return await service.get_organization(org)


# ---------------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------------

@router.get(
    "/{org_id}/staff",
    response_model=StaffListResponse,
    summary="List organization staff",
)
async def list_staff(
    search: str | None = Query(default=None, max_length=100),
    org_and_member: tuple[Organization, StaffMember] = Depends(get_org_member),
    service: StaffService = Depends(get_staff_service),
) -> StaffListResponse:
    org, _ = org_and_member
    return await service.list_staff(org.id, search)


@router.post(
    "/{org_id}/staff",
    response_model=StaffAddResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add staff or invite by email",
)
async def add_staff(
    data: StaffAddRequest,
    org_and_member: tuple[Organization, StaffMember] = Depends(require_role(StaffRole.admin)),
    current_user: User = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
) -> StaffAddResponse:
    """
    Add staff by email. Requires admin role.

    - An existing account is added immediately (member is set)
    - An unknown email gets a pending invitation (invitation is set)
    - A user can be staff of an organization only once
    """
    org, _ = org_and_member
    return await service.add_staff(org.id, data, current_user)


@router.patch(
    "/{org_id}/staff/{member_id}",
    response_model=StaffResponse,
    summary="Change a staff member's role",
)
async def update_staff_role(
    member_id: UUID,
    data: StaffRoleUpdateRequest,
    org_and_member: tuple[Organization, StaffMember] = Depends(require_role(StaffRole.admin)),
    service: StaffService = Depends(get_staff_service),
) -> StaffResponse:
    org, _ = org_and_member
    return await service.update_staff_role(org.id, member_id, data.role)


@router.delete(
    "/{org_id}/staff/{member_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a staff member",
)
async def remove_staff(
    member_id: UUID,
    org_and_member: tuple[Organization, StaffMember] = Depends(require_role(StaffRole.admin)),
    current_user: User = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
) -> dict:
    """Remove a staff member. Requires admin role; cannot remove yourself."""
    org, _ = org_and_member
    await service.remove_staff(org.id, member_id, current_user)
    return {"success": True}


# ---------------------------------------------------------------------------
# Invitations
# ---------------------------------------------------------------------------

@router.get(
    "/{org_id}/invitations",
    response_model=InvitationListResponse,
    summary="List pending staff invitations",
)
async def list_invitations(
    org_and_member: tuple[Organization, StaffMember] = Depends(require_role(StaffRole.admin)),
    service: StaffService = Depends(get_staff_service),
) -> InvitationListResponse:
    org, _ = org_and_member
    return await service.list_invitations(org.id)


@router.delete(
    "/{org_id}/invitations/{invitation_id}",
    status_code=status.HTTP_200_OK,
    summary="Revoke a pending invitation",
)
async def revoke_invitation(
    invitation_id: UUID,
    org_and_member: tuple[Organization, StaffMember] = Depends(require_role(StaffRole.admin)),
    service: StaffService = Depends(get_staff_service),
) -> dict:
    org, _ = org_and_member
    await service.revoke_invitation(org.id, invitation_id)
    return {"success": True}
