"""
Staff business logic.

Staff are the users allowed to manage an organization, with an admin,
editor or viewer role. Existing accounts are added directly; anyone else
gets a pending invitation that they accept once signed in. All queries
scoped by org_id.
"""

from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.config import settings
from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from fieldhouse.models.invitation import StaffInvitation
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.models.user import User
from fieldhouse.schemas.organization import (
    InvitationListResponse,
    InvitationResponse,
    OrganizationResponse,
    StaffAddRequest,
    StaffAddResponse,
    StaffListResponse,
    StaffResponse,
)

logger = logging.getLogger(__name__)


class StaffService:
    """Handles staff listing, adding, invitations, roles and removal."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # List Staff
    # -----------------------------------------------------------------------

    async def list_staff(self, org_id: UUID, search: str | None = None) -> StaffListResponse:
        """List staff with user details, oldest first."""
        stmt = (
            select(StaffMember, User)
            .join(User, StaffMember.user_id == User.id)
            .where(StaffMember.org_id == org_id)
            .order_by(StaffMember.created_at, StaffMember.id)
        )
        term = (search or "").strip()
        if term:
            stmt = stmt.where(
                User.display_name.icontains(term, autoescape=True)
                | User.email.icontains(term, autoescape=True)
            )
        result = await self.db.execute(stmt)
        staff = [self._to_response(member, user) for member, user in result.all()]
        return StaffListResponse(staff=staff, total=len(staff))

    # -----------------------------------------------------------------------
    # Add Staff
    # -----------------------------------------------------------------------

    async def add_staff(
        self, org_id: UUID, data: StaffAddRequest, inviter: User
    ) -> StaffAddResponse:
        """
        Add staff by email.

        - An existing account becomes staff immediately
        - An unknown email gets a pending invitation instead
        """
        result = await self.db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()
        if user is None:
            invitation = await self.invite_staff(org_id, data, inviter)
            return StaffAddResponse(invitation=invitation)

        return StaffAddResponse(member=await self._add_existing_user(org_id, user, data.role))

    async def _add_existing_user(
        self, org_id: UUID, user: User, role: StaffRole
    ) -> StaffResponse:
        existing = await self.db.execute(
            select(StaffMember.id).where(
                StaffMember.org_id == org_id,
                StaffMember.user_id == user.id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("ALREADY_STAFF", "User is already staff of this organization")

        member = StaffMember(org_id=org_id, user_id=user.id, role=role)
        self.db.add(member)
        await flush_or_conflict(
            self.db, "ALREADY_STAFF", "User is already staff of this organization"
        )
        await self.db.refresh(member)

        logger.info("Added staff user_id=%s org_id=%s role=%s", user.id, org_id, role.value)
        return self._to_response(member, user)

    # -----------------------------------------------------------------------
    # Invitations
    # -----------------------------------------------------------------------

    async def invite_staff(
        self, org_id: UUID, data: StaffAddRequest, inviter: User
    ) -> InvitationResponse:
        """
        Create a pending invitation for an email with no account yet.

        Delivering the token to the invitee is left to the caller.
        """
        pending = await self._pending_invitation(org_id, data.email)
        if pending is not None:
            raise ConflictError(
                "INVITE_EXISTS", "A pending invitation already exists for this email"
            )

        now = datetime.now(UTC)
        invitation = StaffInvitation(
            org_id=org_id,
            email=data.email,
            role=data.role,
            token=secrets.token_urlsafe(32),
            expires_at=now + timedelta(hours=settings.INVITATION_EXPIRE_HOURS),
            created_by=inviter.id,
            created_at=now,
        )
        self.db.add(invitation)
        await flush_or_conflict(
            self.db, "INVITE_EXISTS", "A pending invitation already exists for this email"
        )

        logger.info("Invited %s to org_id=%s as %s", data.email, org_id, data.role.value)
        return self._invitation_response(invitation)

    async def list_invitations(self, org_id: UUID) -> InvitationListResponse:
        """Invitations not yet accepted, expired ones included and flagged."""
        result = await self.db.execute(
            select(StaffInvitation)
            .where(
                StaffInvitation.org_id == org_id,
                StaffInvitation.accepted_at.is_(None),
            )
            .order_by(StaffInvitation.created_at, StaffInvitation.id)
        )
        invitations = [self._invitation_response(i) for i in result.scalars().all()]
        return InvitationListResponse(invitations=invitations, total=len(invitations))

    async def revoke_invitation(self, org_id: UUID, invitation_id: UUID) -> None:
        result = await self.db.execute(
            select(StaffInvitation).where(
                StaffInvitation.id == invitation_id,
                StaffInvitation.org_id == org_id,
                StaffInvitation.accepted_at.is_(None),
            )
        )
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise NotFoundError("INVITE_NOT_FOUND", "Invitation not found")

        await self.db.delete(invitation)
        await self.db.flush()
        logger.info("Revoked invitation id=%s org_id=%s", invitation_id, org_id)

    async def accept_invitation(self, token: str, current_user: User) -> OrganizationResponse:
        """
        Accept an invitation.

        - Token must exist, be unused and unexpired
        - Signed-in user's email must match the invitation
        - Creates the staff membership and marks the invitation accepted
        """
        result = await self.db.execute(
            select(StaffInvitation).where(StaffInvitation.token == token)
        )
        invitation = result.scalar_one_or_none()

        if invitation is None:
            raise NotFoundError("INVITE_NOT_FOUND", "Invitation not found")
        if invitation.accepted_at is not None:
            raise BadRequestError("INVITE_USED", "Invitation has already been accepted")
        if _is_expired(invitation):
            raise BadRequestError("INVITE_EXPIRED", "Invitation has expired")
        if invitation.email != current_user.email.lower():
            raise ForbiddenError(
                "EMAIL_MISMATCH", "Invitation was sent to a different email address"
            )

        await self._add_existing_user(invitation.org_id, current_user, invitation.role)
        invitation.accepted_at = datetime.now(UTC)
        await self.db.flush()

        org_result = await self.db.execute(
            select(Organization).where(Organization.id == invitation.org_id)
        )
        return OrganizationResponse.model_validate(org_result.scalar_one())

    # -----------------------------------------------------------------------
    # Update Staff Role
    # -----------------------------------------------------------------------

    async def update_staff_role(
        self, org_id: UUID, member_id: UUID, role: StaffRole
    ) -> StaffResponse:
        member, user = await self._get_staff(org_id, member_id)
        member.role = role
        await self.db.flush()
        await self.db.refresh(member)
        return self._to_response(member, user)

    # -----------------------------------------------------------------------
    # Remove Staff
    # -----------------------------------------------------------------------

    async def remove_staff(self, org_id: UUID, member_id: UUID, acting_user: User) -> None:
        """Remove a staff member. Staff cannot remove themselves."""
        member, _ = await self._get_staff(org_id, member_id)
        if member.user_id == acting_user.id:
            raise ForbiddenError("CANNOT_REMOVE_SELF", "You cannot remove yourself from staff")

        await self.db.delete(member)
        await self.db.flush()
        logger.info("Removed staff user_id=%s org_id=%s", member.user_id, org_id)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _get_staff(self, org_id: UUID, member_id: UUID) -> tuple[StaffMember, User]:
        result = await self.db.execute(
            select(StaffMember, User)
            .join(User, StaffMember.user_id == User.id)
            .where(StaffMember.id == member_id, StaffMember.org_id == org_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("MEMBER_NOT_FOUND", "Staff member not found")
        return row[0], row[1]

    async def _pending_invitation(self, org_id: UUID, email: str) -> StaffInvitation | None:
        result = await self.db.execute(
            select(StaffInvitation).where(
                StaffInvitation.org_id == org_id,
                StaffInvitation.email == email,
                StaffInvitation.accepted_at.is_(None),
            )
        )
        for invitation in result.scalars().all():
            if not _is_expired(invitation):
                return invitation
        return None

    @staticmethod
    def _invitation_response(invitation: StaffInvitation) -> InvitationResponse:
        return InvitationResponse(
            id=invitation.id,
            org_id=invitation.org_id,
            email=invitation.email,
            role=invitation.role,
            token=invitation.token,
            expires_at=invitation.expires_at,
            created_at=invitation.created_at,
            is_expired=_is_expired(invitation),
        )

    @staticmethod
    def _to_response(member: StaffMember, user: User) -> StaffResponse:
        return StaffResponse(
            id=member.id,
            user_id=member.user_id,
            email=user.email,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            role=member.role,
            created_at=member.created_at,
        )


def _is_expired(invitation: StaffInvitation) -> bool:
    expires_at = invitation.expires_at
    # SQLite hands back naive datetimes; stored values are UTC
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= datetime.now(UTC)
