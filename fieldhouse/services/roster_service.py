"""
Roster and team membership business logic.

Keeps the organization roster and the single-team rule consistent:
a user holds at most one team membership system-wide, roster entries are
organization-scoped, and removing a team admin promotes a successor.
All queries scoped by org_id.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import ConflictError, NotFoundError
from fieldhouse.models.player import OrganizationPlayer, PlayerStatus
from fieldhouse.models.team import Team, TeamMember, TeamMemberRole
from fieldhouse.models.user import User
from fieldhouse.schemas.player import (
    AddPlayerRequest,
    PlayerStatsResponse,
    RosterEntryResponse,
    RosterListResponse,
    RosterRow,
    TeamMemberDetail,
    TeamMemberResponse,
    TeamMembersListResponse,
    TeamPlayersReconcileResponse,
)
from fieldhouse.utils.reconcile import plan_reconciliation

logger = logging.getLogger(__name__)

ALREADY_ON_TEAM_MESSAGE = "This user is already assigned to a team"


class RosterService:
    """Handles roster entries and team memberships."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # List Roster
    # -----------------------------------------------------------------------

    async def list_roster(
        self,
        org_id: UUID,
        team_id: UUID | None = None,
        search: str | None = None,
    ) -> RosterListResponse:
        """
        List roster entries with user identity and team assignment.

        Only teams of this organization count as an assignment; a player
        whose membership is on another organization's team is listed as a
        free agent here.
        """
        stmt = (
            select(OrganizationPlayer, User, Team)
            .join(User, User.id == OrganizationPlayer.user_id)
            .outerjoin(TeamMember, TeamMember.user_id == OrganizationPlayer.user_id)
            .outerjoin(
                Team,
                and_(Team.id == TeamMember.team_id, Team.org_id == OrganizationPlayer.org_id),
            )
            .where(OrganizationPlayer.org_id == org_id)
            .order_by(User.display_name, User.email)
        )
        if team_id is not None:
            stmt = stmt.where(Team.id == team_id)
        term = (search or "").strip()
        if term:
            stmt = stmt.where(
                User.display_name.icontains(term, autoescape=True)
                | User.email.icontains(term, autoescape=True)
            )

        result = await self.db.execute(stmt)
        players = [
            RosterRow(
                roster_id=entry.id,
                user_id=user.id,
                team_id=team.id if team is not None else None,
                team_name=team.name if team is not None else None,
                team_slug=team.slug if team is not None else None,
                status=entry.status,
                user_name=user.display_name,
                user_email=user.email,
            )
            for entry, user, team in result.all()
        ]
        return RosterListResponse(players=players, total=len(players))

    # -----------------------------------------------------------------------
    # Player Stats
    # -----------------------------------------------------------------------

    async def get_player_stats(self, org_id: UUID) -> PlayerStatsResponse:
        status_rows = await self.db.execute(
            select(OrganizationPlayer.status, func.count())
            .where(OrganizationPlayer.org_id == org_id)
            .group_by(OrganizationPlayer.status)
        )
        by_status = {s.value: 0 for s in PlayerStatus}
        for player_status, count in status_rows.all():
            by_status[PlayerStatus(player_status).value] = count
        total = sum(by_status.values())

        assigned = await self.db.scalar(
            select(func.count())
            .select_from(OrganizationPlayer)
            .join(TeamMember, TeamMember.user_id == OrganizationPlayer.user_id)
            .join(Team, and_(Team.id == TeamMember.team_id, Team.org_id == OrganizationPlayer.org_id))
            .where(OrganizationPlayer.org_id == org_id)
        )

        now = datetime.now(UTC)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        new_this_month = await self.db.scalar(
            select(func.count())
            .select_from(OrganizationPlayer)
            .where(
                OrganizationPlayer.org_id == org_id,
                OrganizationPlayer.created_at >= month_start,
            )
        )

        return PlayerStatsResponse(
            total_players=total,
            free_agents=total - (assigned or 0),
            assigned_players=assigned or 0,
            new_this_month=new_this_month or 0,
            by_status=by_status,
        )

    # -----------------------------------------------------------------------
    # Add Player To Team
    # -----------------------------------------------------------------------

    async def add_player_to_team(
        self, org_id: UUID, team_id: UUID, data: AddPlayerRequest
    ) -> TeamMemberResponse:
        """
        Add the user with the given email to a team.

        - Team must belong to the organization
        - User account must already exist
        - User must not be on any team (any organization)
        - Roster entry is created if missing; an explicit status is applied
        """
        team = await self._get_team(org_id, team_id)
        user = await self._get_user_by_email(data.email)
        membership = await self.assign_to_team(
            team, user.id, TeamMemberRole.member, status=data.status
        )
        return TeamMemberResponse.model_validate(membership)

    async def assign_to_team(
        self,
        team: Team,
        user_id: UUID,
        role: TeamMemberRole,
        status: PlayerStatus | None = None,
    ) -> TeamMember:
        """Insert a membership after the exclusivity pre-check; ensures a roster entry."""
        await self.ensure_not_on_team(user_id)
        await self.ensure_roster_entry(team.org_id, user_id, status)

        membership = TeamMember(team_id=team.id, user_id=user_id, role=role)
        self.db.add(membership)
        await flush_or_conflict(self.db, "ALREADY_ON_TEAM", ALREADY_ON_TEAM_MESSAGE)

        logger.info(
            "Assigned user_id=%s to team_id=%s as %s", user_id, team.id, role.value
        )
        return membership

    async def ensure_not_on_team(self, user_id: UUID) -> None:
        """Advisory exclusivity check; the unique index on team_members.user_id is the authority."""
        result = await self.db.execute(
            select(TeamMember.id).where(TeamMember.user_id == user_id)
        )
        if result.scalar_one_or_none() is not None:
            raise ConflictError("ALREADY_ON_TEAM", ALREADY_ON_TEAM_MESSAGE)

    async def ensure_roster_entry(
        self,
        org_id: UUID,
        user_id: UUID,
        status: PlayerStatus | None = None,
    ) -> OrganizationPlayer:
        """Create the roster entry if absent; otherwise only apply an explicit status."""
        result = await self.db.execute(
            select(OrganizationPlayer).where(
                OrganizationPlayer.org_id == org_id,
                OrganizationPlayer.user_id == user_id,
            )
        )
        entry = result.scalar_one_or_none()

        if entry is None:
            entry = OrganizationPlayer(
                org_id=org_id,
                user_id=user_id,
                status=status or PlayerStatus.inactive,
            )
            self.db.add(entry)
            await flush_or_conflict(
                self.db, "ROSTER_ENTRY_EXISTS", "This user is already on the roster"
            )
        elif status is not None and entry.status != status:
            entry.status = status
            await self.db.flush()

        return entry

    # -----------------------------------------------------------------------
    # Remove Player From Team
    # -----------------------------------------------------------------------

    async def remove_player_from_team(
        self, org_id: UUID, team_id: UUID, user_id: UUID
    ) -> None:
        """Remove a membership; an admin's removal promotes a successor first."""
        await self._get_team(org_id, team_id)

        result = await self.db.execute(
            select(TeamMember).where(
                TeamMember.team_id == team_id,
                TeamMember.user_id == user_id,
            )
        )
        membership = result.scalar_one_or_none()
        if membership is None:
            raise NotFoundError("MEMBERSHIP_NOT_FOUND", "This player is not on the team")

        await self._remove_membership(membership)

    async def _remove_membership(self, membership: TeamMember) -> None:
        """
        Delete a membership with admin succession.

        When the admin leaves, the remaining member who joined earliest (ties
        broken by id) becomes admin before the row is deleted. A team left
        with no other members stays adminless.
        """
        if membership.role == TeamMemberRole.admin:
            result = await self.db.execute(
                select(TeamMember)
                .where(
                    TeamMember.team_id == membership.team_id,
                    TeamMember.id != membership.id,
                )
                .order_by(TeamMember.joined_at, TeamMember.id)
                .limit(1)
            )
            successor = result.scalar_one_or_none()
            if successor is not None:
                successor.role = TeamMemberRole.admin
                await self.db.flush()
                logger.info(
                    "Promoted user_id=%s to admin of team_id=%s",
                    successor.user_id,
                    membership.team_id,
                )

        await self.db.delete(membership)
        await self.db.flush()
        logger.info(
            "Removed user_id=%s from team_id=%s", membership.user_id, membership.team_id
        )

    # -----------------------------------------------------------------------
    # Remove Player From Roster
    # -----------------------------------------------------------------------

    async def remove_player_from_roster(self, org_id: UUID, roster_id: UUID) -> None:
        """
        Delete a roster entry and the user's memberships on this org's teams.

        Memberships on other organizations' teams are left alone.
        """
        entry = await self._get_roster_entry(org_id, roster_id)

        result = await self.db.execute(
            select(TeamMember)
            .join(Team, Team.id == TeamMember.team_id)
            .where(TeamMember.user_id == entry.user_id, Team.org_id == org_id)
        )
        for membership in result.scalars().all():
            await self._remove_membership(membership)

        await self.db.delete(entry)
        await self.db.flush()
        logger.info("Removed user_id=%s from roster of org_id=%s", entry.user_id, org_id)

    # -----------------------------------------------------------------------
    # Update Player Status
    # -----------------------------------------------------------------------

    async def update_player_status(
        self, org_id: UUID, roster_id: UUID, status: PlayerStatus
    ) -> RosterEntryResponse:
        entry = await self._get_roster_entry(org_id, roster_id)
        entry.status = status
        await self.db.flush()
        await self.db.refresh(entry)
        return RosterEntryResponse.model_validate(entry)

    # -----------------------------------------------------------------------
    # Team Members
    # -----------------------------------------------------------------------

    async def list_team_members(self, org_id: UUID, team_id: UUID) -> TeamMembersListResponse:
        await self._get_team(org_id, team_id)
        members = await self._team_member_details(team_id)
        return TeamMembersListResponse(members=members, total=len(members))

    async def set_team_players(
        self, org_id: UUID, team_id: UUID, user_ids: list[UUID]
    ) -> TeamPlayersReconcileResponse:
        """
        Make the team's member set equal ``user_ids``.

        Applies adds before removes with the same rules as the single
        operations. Runs inside the request transaction, so a failure on any
        step leaves the team unchanged.
        """
        team = await self._get_team(org_id, team_id)

        result = await self.db.execute(
            select(TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at, TeamMember.id)
        )
        plan = plan_reconciliation(list(result.scalars().all()), user_ids)

        for user_id in plan.to_add:
            user = await self._get_user(user_id)
            await self.assign_to_team(team, user.id, TeamMemberRole.member)

        for user_id in plan.to_remove:
            membership_result = await self.db.execute(
                select(TeamMember).where(
                    TeamMember.team_id == team_id,
                    TeamMember.user_id == user_id,
                )
            )
            await self._remove_membership(membership_result.scalar_one())

        members = await self._team_member_details(team_id)
        return TeamPlayersReconcileResponse(
            added=plan.to_add, removed=plan.to_remove, members=members
        )

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _team_member_details(self, team_id: UUID) -> list[TeamMemberDetail]:
        result = await self.db.execute(
            select(TeamMember, User)
            .join(User, User.id == TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at, TeamMember.id)
        )
        return [
            TeamMemberDetail(
                id=membership.id,
                user_id=user.id,
                role=membership.role,
                user_name=user.display_name,
                user_email=user.email,
                joined_at=membership.joined_at,
            )
            for membership, user in result.all()
        ]

    async def _get_team(self, org_id: UUID, team_id: UUID) -> Team:
        result = await self.db.execute(
            select(Team).where(Team.id == team_id, Team.org_id == org_id)
        )
        team = result.scalar_one_or_none()
        if team is None:
            raise NotFoundError("TEAM_NOT_FOUND", "Team not found")
        return team

    async def _get_user(self, user_id: UUID) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("USER_NOT_FOUND", "User not found")
        return user

    async def _get_user_by_email(self, email: str) -> User:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("USER_NOT_FOUND", "No user account exists with this email")
        return user

    async def _get_roster_entry(self, org_id: UUID, roster_id: UUID) -> OrganizationPlayer:
        result = await self.db.execute(
            select(OrganizationPlayer).where(
                OrganizationPlayer.id == roster_id,
                OrganizationPlayer.org_id == org_id,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("PLAYER_NOT_FOUND", "Player not found")
        return entry
