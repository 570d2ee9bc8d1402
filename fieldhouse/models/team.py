"""
Team and TeamMember ORM models.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from fieldhouse.models.league import LeagueTeam
    from fieldhouse.models.organization import Organization
    from fieldhouse.models.user import User


class TeamStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    banned = "banned"
    suspended = "suspended"


class TeamMemberRole(str, enum.Enum):
    """One admin per team, everyone else is a member."""

    admin = "admin"
    member = "member"


class Team(Base, UUIDMixin, TimestampMixin):
    """A team inside one organization, addressed by a short random code."""

    __tablename__ = "teams"

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    status: Mapped[TeamStatus] = mapped_column(
        Enum(TeamStatus, name="team_status"), nullable=False, default=TeamStatus.inactive
    )

    # Relationships
    organization: Mapped[Organization] = relationship("Organization", back_populates="teams")
    members: Mapped[list[TeamMember]] = relationship(
        "TeamMember", back_populates="team", cascade="all, delete-orphan"
    )
    league_links: Mapped[list[LeagueTeam]] = relationship(
        "LeagueTeam", back_populates="team", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Team id={self.id} slug={self.slug!r} org_id={self.org_id}>"


class TeamMember(Base, UUIDMixin):
    """
    A user's single team assignment.

    ``user_id`` is unique across the whole table: a user is on at most one
    team system-wide, not just per organization.
    """

    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="team_member_team_user_unique"),
    )

    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    role: Mapped[TeamMemberRole] = mapped_column(
        Enum(TeamMemberRole, name="team_member_role"),
        nullable=False,
        default=TeamMemberRole.member,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    team: Mapped[Team] = relationship("Team", back_populates="members")
    user: Mapped[User] = relationship("User", back_populates="team_membership")

    def __repr__(self) -> str:
        return f"<TeamMember team_id={self.team_id} user_id={self.user_id} role={self.role}>"
