"""
League business logic.

Handles the organization's league and its many-to-many participation with
teams. Every league and team reference is checked against org_id before
any mutation.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from fieldhouse.models.league import AGE_GROUP_LABELS, League, LeagueTeam
from fieldhouse.models.team import Team
from fieldhouse.schemas.league import (
    LeagueCreateRequest,
    LeagueDetailResponse,
    LeagueListResponse,
    LeagueResponse,
    LeagueStatsResponse,
    LeagueTeamResponse,
    LeagueTeamsReconcileResponse,
    LeagueUpdateRequest,
    TeamSummaryListResponse,
)
from fieldhouse.schemas.schedule import ScheduleGroupResponse
from fieldhouse.schemas.team import TeamSummary
from fieldhouse.utils.reconcile import plan_reconciliation
from fieldhouse.utils.schedule import group_schedule
from fieldhouse.utils.slugs import allocate_slug

logger = logging.getLogger(__name__)


class LeagueService:
    """Handles league CRUD and league/team participation."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # League CRUD
    # -----------------------------------------------------------------------

    async def list_leagues(self, org_id: UUID, search: str | None = None) -> LeagueListResponse:
        stmt = select(League).where(League.org_id == org_id).order_by(League.name)
        term = (search or "").strip()
        if term:
            stmt = stmt.where(League.name.icontains(term, autoescape=True))
        result = await self.db.execute(stmt)
        leagues = list(result.scalars().all())
        counts = await self._team_counts([league.id for league in leagues])
        items = [self._to_response(league, counts.get(league.id, 0)) for league in leagues]
        return LeagueListResponse(leagues=items, total=len(items))

    async def create_league(self, org_id: UUID, data: LeagueCreateRequest) -> LeagueResponse:
        """
        Create the organization's league.

        - One league per organization
        - Slug derived from the name, unique within the organization
        """
        existing = await self.db.execute(select(League.id).where(League.org_id == org_id))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("LEAGUE_EXISTS", "This organization already has a league")

        name = data.name

        async def slug_taken(candidate: str) -> bool:
            count = await self.db.scalar(
                select(func.count())
                .select_from(League)
                .where(League.org_id == org_id, League.slug == candidate)
            )
            return bool(count)

        slug = await allocate_slug(name, slug_taken, fallback="league")

        league = League(
            org_id=org_id,
            name=name,
            slug=slug,
            image=data.image,
            age_group=data.age_group,
            operating_schedule=(
                data.operating_schedule.to_storage() if data.operating_schedule else None
            ),
            start_date=data.start_date,
            end_date=data.end_date,
        )
        self.db.add(league)
        await flush_or_conflict(self.db, "LEAGUE_EXISTS", "This organization already has a league")
        await self.db.refresh(league)

        logger.info("Created league id=%s slug=%s org_id=%s", league.id, league.slug, org_id)
        return self._to_response(league, 0)

    async def get_league(self, org_id: UUID, league_id: UUID) -> LeagueDetailResponse:
        league = await self._get_league(org_id, league_id)
        teams = await self._participants(league.id)
        base = self._to_response(league, len(teams))
        return LeagueDetailResponse(**base.model_dump(), teams=teams)

    async def update_league(
        self, org_id: UUID, league_id: UUID, data: LeagueUpdateRequest
    ) -> LeagueResponse:
        league = await self._get_league(org_id, league_id)
        fields = data.model_fields_set

        if data.name is not None:
            league.name = data.name
        if "image" in fields:
            league.image = data.image
        if "age_group" in fields:
            league.age_group = data.age_group
        if "operating_schedule" in fields:
            league.operating_schedule = (
                data.operating_schedule.to_storage() if data.operating_schedule else None
            )
        if "start_date" in fields:
            league.start_date = data.start_date
        if "end_date" in fields:
            league.end_date = data.end_date

        if league.start_date and league.end_date and league.end_date < league.start_date:
            raise InvalidInputError("INVALID_DATES", "End date must not be before start date")

        await flush_or_conflict(self.db, "LEAGUE_NAME_TAKEN", "A league with this name already exists")
        await self.db.refresh(league)
        counts = await self._team_counts([league.id])
        return self._to_response(league, counts.get(league.id, 0))

    async def delete_league(self, org_id: UUID, league_id: UUID) -> None:
        """Delete the league and its participation rows; teams survive."""
        league = await self._get_league(org_id, league_id)
        await self.db.delete(league)
        await self.db.flush()
        logger.info("Deleted league id=%s org_id=%s", league_id, org_id)

    async def get_league_stats(self, org_id: UUID) -> LeagueStatsResponse:
        total_leagues = await self.db.scalar(
            select(func.count()).select_from(League).where(League.org_id == org_id)
        )
        participating = await self.db.scalar(
            select(func.count(func.distinct(LeagueTeam.team_id)))
            .select_from(LeagueTeam)
            .join(League, League.id == LeagueTeam.league_id)
            .where(League.org_id == org_id)
        )
        total_teams = await self.db.scalar(
            select(func.count()).select_from(Team).where(Team.org_id == org_id)
        )
        now = datetime.now(UTC)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        new_this_month = await self.db.scalar(
            select(func.count())
            .select_from(League)
            .where(League.org_id == org_id, League.created_at >= month_start)
        )
        return LeagueStatsResponse(
            total_leagues=total_leagues or 0,
            participating_teams=participating or 0,
            teams_not_in_league=(total_teams or 0) - (participating or 0),
            new_this_month=new_this_month or 0,
        )

    # -----------------------------------------------------------------------
    # Participation
    # -----------------------------------------------------------------------

    async def list_participants(self, org_id: UUID, league_id: UUID) -> TeamSummaryListResponse:
        await self._get_league(org_id, league_id)
        teams = await self._participants(league_id)
        return TeamSummaryListResponse(teams=teams, total=len(teams))

    async def list_available(self, org_id: UUID, league_id: UUID) -> TeamSummaryListResponse:
        """Organization teams with no participation row for this league."""
        await self._get_league(org_id, league_id)
        result = await self.db.execute(
            select(Team)
            .outerjoin(
                LeagueTeam,
                and_(LeagueTeam.team_id == Team.id, LeagueTeam.league_id == league_id),
            )
            .where(Team.org_id == org_id, LeagueTeam.id.is_(None))
            .order_by(Team.name)
        )
        teams = [TeamSummary.model_validate(t) for t in result.scalars().all()]
        return TeamSummaryListResponse(teams=teams, total=len(teams))

    async def add_team_to_league(
        self, org_id: UUID, league_id: UUID, team_id: UUID
    ) -> LeagueTeamResponse:
        """Link a team to the league. Both must belong to org_id."""
        await self._get_league(org_id, league_id)
        await self._get_team(org_id, team_id)
        link = await self._link(league_id, team_id)
        return LeagueTeamResponse.model_validate(link)

    async def remove_team_from_league(
        self, org_id: UUID, league_id: UUID, team_id: UUID
    ) -> None:
        await self._get_league(org_id, league_id)
        link = await self._get_link(league_id, team_id)
        if link is None:
            raise NotFoundError("LEAGUE_TEAM_NOT_FOUND", "This team is not in the league")
        await self._unlink(link)

    async def set_league_teams(
        self, org_id: UUID, league_id: UUID, team_ids: list[UUID]
    ) -> LeagueTeamsReconcileResponse:
        """
        Make the league's participants equal ``team_ids``.

        Diffs against the stored rows and applies all adds before any
        removes, inside the request transaction.
        """
        await self._get_league(org_id, league_id)

        result = await self.db.execute(
            select(LeagueTeam.team_id)
            .where(LeagueTeam.league_id == league_id)
            .order_by(LeagueTeam.created_at, LeagueTeam.id)
        )
        plan = plan_reconciliation(list(result.scalars().all()), team_ids)

        for team_id in plan.to_add:
            await self._get_team(org_id, team_id)
            await self._link(league_id, team_id)

        for team_id in plan.to_remove:
            link = await self._get_link(league_id, team_id)
            if link is not None:
                await self._unlink(link)

        teams = await self._participants(league_id)
        logger.info(
            "Reconciled league_id=%s: +%d -%d",
            league_id,
            len(plan.to_add),
            len(plan.to_remove),
        )
        return LeagueTeamsReconcileResponse(
            added=plan.to_add, removed=plan.to_remove, teams=teams
        )

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _link(self, league_id: UUID, team_id: UUID) -> LeagueTeam:
        if await self._get_link(league_id, team_id) is not None:
            raise ConflictError("TEAM_ALREADY_IN_LEAGUE", "This team is already in the league")

        link = LeagueTeam(league_id=league_id, team_id=team_id)
        self.db.add(link)
        await flush_or_conflict(
            self.db, "TEAM_ALREADY_IN_LEAGUE", "This team is already in the league"
        )
        logger.info("Added team_id=%s to league_id=%s", team_id, league_id)
        return link

    async def _unlink(self, link: LeagueTeam) -> None:
        await self.db.delete(link)
        await self.db.flush()
        logger.info("Removed team_id=%s from league_id=%s", link.team_id, link.league_id)

    async def _get_link(self, league_id: UUID, team_id: UUID) -> LeagueTeam | None:
        result = await self.db.execute(
            select(LeagueTeam).where(
                LeagueTeam.league_id == league_id,
                LeagueTeam.team_id == team_id,
            )
        )
        return result.scalar_one_or_none()

    async def _participants(self, league_id: UUID) -> list[TeamSummary]:
        result = await self.db.execute(
            select(Team)
            .join(LeagueTeam, LeagueTeam.team_id == Team.id)
            .where(LeagueTeam.league_id == league_id)
            .order_by(Team.name)
        )
        return [TeamSummary.model_validate(t) for t in result.scalars().all()]

    async def _team_counts(self, league_ids: list[UUID]) -> dict[UUID, int]:
        if not league_ids:
            return {}
        result = await self.db.execute(
            select(LeagueTeam.league_id, func.count())
            .where(LeagueTeam.league_id.in_(league_ids))
            .group_by(LeagueTeam.league_id)
        )
        return {league_id: count for league_id, count in result.all()}

    async def _get_league(self, org_id: UUID, league_id: UUID) -> League:
        result = await self.db.execute(
            select(League).where(League.id == league_id, League.org_id == org_id)
        )
        league = result.scalar_one_or_none()
        if league is None:
            raise NotFoundError("LEAGUE_NOT_FOUND", "League not found")
        return league

    async def _get_team(self, org_id: UUID, team_id: UUID) -> Team:
        result = await self.db.execute(
            select(Team).where(Team.id == team_id, Team.org_id == org_id)
        )
        team = result.scalar_one_or_none()
        if team is None:
            raise NotFoundError("TEAM_NOT_FOUND", "Team not found")
        return team

    @staticmethod
    def _to_response(league: League, team_count: int) -> LeagueResponse:
        schedule: dict[str, Any] | None = league.operating_schedule
        return LeagueResponse(
            id=league.id,
            org_id=league.org_id,
            name=league.name,
            slug=league.slug,
            image=league.image,
            age_group=league.age_group,
            age_group_label=AGE_GROUP_LABELS.get(league.age_group) if league.age_group else None,
            operating_schedule=schedule,
            schedule_groups=[ScheduleGroupResponse.from_group(g) for g in group_schedule(schedule)],
            start_date=league.start_date,
            end_date=league.end_date,
            team_count=team_count,
            created_at=league.created_at,
            updated_at=league.updated_at,
        )
