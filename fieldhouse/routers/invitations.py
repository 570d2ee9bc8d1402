"""
Invitation acceptance endpoint.

Not org-scoped: the invitee is not staff yet, so the token alone
identifies the organization.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_current_user
from fieldhouse.models.user import User
from fieldhouse.schemas.organization import OrganizationResponse
from fieldhouse.services.staff_service import StaffService

router = APIRouter()


def get_staff_service(db: AsyncSession = Depends(get_db)) -> StaffService:
    return StaffService(db=db)


@router.post(
    "/invitations/{token}/accept",
    response_model=OrganizationResponse,
    summary="Accept a staff invitation",
)
async def accept_invitation(
    token: str,
    current_user: User = Depends(get_current_user),
    service: StaffService = Depends(get_staff_service),
) -> OrganizationResponse:
    """
    Join the inviting organization as staff.

    - The signed-in user's email must match the invitation
    - Each invitation can be accepted once, before it expires
    """
    return await service.accept_invitation(token, current_user)
