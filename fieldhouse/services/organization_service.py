"""
Organization business logic.

Handles org creation and lookup. The creator becomes the first admin
staff member.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import ConflictError
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.models.user import User
from fieldhouse.schemas.organization import (
    OrganizationCreateRequest,
    OrganizationListResponse,
    OrganizationResponse,
)
from fieldhouse.utils.slugs import allocate_code

logger = logging.getLogger(__name__)


class OrganizationService:
    """Handles all organization operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # Create Organization
    # -----------------------------------------------------------------------

    async def create_organization(
        self, data: OrganizationCreateRequest, creator: User
    ) -> OrganizationResponse:
        """
        Create a new organization.

        - Validates slug uniqueness, or generates a random code
        - Creates organization record
        - Assigns creator as admin staff
        """
        if data.slug is not None:
            if await self._slug_exists(data.slug):
                raise ConflictError("SLUG_TAKEN", "Organization slug is already taken")
            slug = data.slug
        else:
            code = await allocate_code(lambda c: self._slug_exists(c.lower()))
            slug = code.lower()

        org = Organization(name=data.name, slug=slug)
        self.db.add(org)
        await flush_or_conflict(self.db, "SLUG_TAKEN", "Organization slug is already taken")

        member = StaffMember(org_id=org.id, user_id=creator.id, role=StaffRole.admin)
        self.db.add(member)
        await self.db.flush()
        await self.db.refresh(org)

        logger.info("Created organization id=%s slug=%s by user_id=%s", org.id, slug, creator.id)
        return OrganizationResponse.model_validate(org)

    # -----------------------------------------------------------------------
    # List / Get Organization
    # -----------------------------------------------------------------------

    async def list_my_organizations(self, user: User) -> OrganizationListResponse:
        """Organizations where the user holds any staff role."""
        result = await self.db.execute(
            select(Organization)
            .join(StaffMember, StaffMember.org_id == Organization.id)
            .where(StaffMember.user_id == user.id)
            .order_by(Organization.name)
        )
        orgs = [OrganizationResponse.model_validate(o) for o in result.scalars().all()]
        return OrganizationListResponse(organizations=orgs, total=len(orgs))

    async def get_organization(self, org: Organization) -> OrganizationResponse:
        return OrganizationResponse.model_validate(org)

    async def _slug_exists(self, slug: str) -> bool:
        count = await self.db.scalar(
            select(func.count()).select_from(Organization).where(Organization.slug == slug)
        )
        return bool(count)
