"""
Team business logic.

Handles team CRUD and team creation with its designated admin.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import NotFoundError
from fieldhouse.models.team import Team, TeamMemberRole
from fieldhouse.models.user import User
from fieldhouse.schemas.team import (
    TeamCreateRequest,
    TeamListResponse,
    TeamResponse,
    TeamUpdateRequest,
)
from fieldhouse.services.roster_service import RosterService
from fieldhouse.utils.slugs import allocate_code

logger = logging.getLogger(__name__)


class TeamService:

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.roster = RosterService(db)

    async def list_teams(self, org_id: UUID, search: str | None = None) -> TeamListResponse:
        stmt = select(Team).where(Team.org_id == org_id).order_by(Team.name)
        term = (search or "").strip()
        if term:
            stmt = stmt.where(Team.name.icontains(term, autoescape=True))
        result = await self.db.execute(stmt)
        teams = list(result.scalars().all())
        return TeamListResponse(
            teams=[TeamResponse.model_validate(t) for t in teams],
            total=len(teams),
        )

    async def create_team_with_admin(
        self, org_id: UUID, data: TeamCreateRequest
    ) -> TeamResponse:
        """
        Create a team and make ``admin_user_id`` its admin.

        The admin must exist and must not already be on a team. Their roster
        entry is created as inactive if missing. Team, roster entry and
        membership are written in the same transaction.
        """
        result = await self.db.execute(select(User).where(User.id == data.admin_user_id))
        admin = result.scalar_one_or_none()
        if admin is None:
            raise NotFoundError("USER_NOT_FOUND", "Admin user not found")

        await self.roster.ensure_not_on_team(admin.id)

        slug = await allocate_code(self._slug_exists)
        team = Team(org_id=org_id, name=data.name, slug=slug)
        self.db.add(team)
        await flush_or_conflict(self.db, "SLUG_TAKEN", "Team code collided, please retry")

        await self.roster.assign_to_team(team, admin.id, TeamMemberRole.admin)
        await self.db.refresh(team)

        logger.info("Created team id=%s slug=%s org_id=%s", team.id, team.slug, org_id)
        return TeamResponse.model_validate(team)

    async def get_team(self, org_id: UUID, team_id: UUID) -> TeamResponse:
        team = await self._get_team(org_id, team_id)
        return TeamResponse.model_validate(team)

    async def get_team_by_slug(self, org_id: UUID, slug: str) -> TeamResponse:
        result = await self.db.execute(
            select(Team).where(Team.slug == slug.strip().upper(), Team.org_id == org_id)
        )
        team = result.scalar_one_or_none()
        if team is None:
            raise NotFoundError("TEAM_NOT_FOUND", "Team not found")
        return TeamResponse.model_validate(team)

    async def update_team(
        self, org_id: UUID, team_id: UUID, data: TeamUpdateRequest
    ) -> TeamResponse:
        team = await self._get_team(org_id, team_id)
        if data.name is not None:
            team.name = data.name
        if data.status is not None:
            team.status = data.status
        await self.db.flush()
        await self.db.refresh(team)
        return TeamResponse.model_validate(team)

    async def delete_team(self, org_id: UUID, team_id: UUID) -> None:
        """Delete a team with its memberships and league participation rows."""
        team = await self._get_team(org_id, team_id)
        await self.db.delete(team)
        await self.db.flush()
        logger.info("Deleted team id=%s org_id=%s", team_id, org_id)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _get_team(self, org_id: UUID, team_id: UUID) -> Team:
        result = await self.db.execute(
            select(Team).where(Team.id == team_id, Team.org_id == org_id)
        )
        team = result.scalar_one_or_none()
        if team is None:
            raise NotFoundError("TEAM_NOT_FOUND", "Team not found")
        return team

    async def _slug_exists(self, slug: str) -> bool:
        count = await self.db.scalar(
            select(func.count()).select_from(Team).where(Team.slug == slug)
        )
        return bool(count)
