"""
League and LeagueTeam ORM models.
"""

from __future__ import annotations

import enum
from datetime import date
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import Date, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fieldhouse.models.organization import Organization
    from fieldhouse.models.team import Team


class LeagueAgeGroup(str, enum.Enum):
    toddlers = "toddlers"
    u6 = "u6"
    u7 = "u7"
    u8 = "u8"
    u9 = "u9"
    u10 = "u10"
    u11 = "u11"
    u12 = "u12"
    u13 = "u13"
    u14 = "u14"
    u15 = "u15"
    u16 = "u16"
    u17 = "u17"
    u18 = "u18"
    adult = "adult"
    o30 = "o30"
    o50 = "o50"
    o60 = "o60"


AGE_GROUP_LABELS: dict[LeagueAgeGroup, str] = {
    group: group.value.upper() for group in LeagueAgeGroup if group.value.startswith("u")
}
AGE_GROUP_LABELS.update(
    {
        LeagueAgeGroup.toddlers: "Toddlers",
        LeagueAgeGroup.adult: "Adult",
        LeagueAgeGroup.o30: "Over 30",
        LeagueAgeGroup.o50: "Over 50",
        LeagueAgeGroup.o60: "Over 60",
    }
)


class League(Base, UUIDMixin, TimestampMixin):
    """
    The organization's league.

    ``org_id`` is unique: one league per organization.
    """

    __tablename__ = "leagues"
    __table_args__ = (
        UniqueConstraint("org_id", "name", name="league_org_name_unique"),
        UniqueConstraint("org_id", "slug", name="league_org_slug_unique"),
    )

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    age_group: Mapped[LeagueAgeGroup | None] = mapped_column(
        Enum(LeagueAgeGroup, name="league_age_group"), nullable=True
    )
    operating_schedule: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType, nullable=True, default=None
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    organization: Mapped[Organization] = relationship(
        "Organization", back_populates="league"
    )
    team_links: Mapped[list[LeagueTeam]] = relationship(
        "LeagueTeam", back_populates="league", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<League id={self.id} slug={self.slug!r} org_id={self.org_id}>"


class LeagueTeam(Base, UUIDMixin, TimestampMixin):
    """League/team participation. Deleting either side removes the link."""

    __tablename__ = "league_teams"
    __table_args__ = (
        UniqueConstraint("league_id", "team_id", name="league_team_league_team_unique"),
    )

    league_id: Mapped[UUID] = mapped_column(
        ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    team_id: Mapped[UUID] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )

    league: Mapped[League] = relationship("League", back_populates="team_links")
    team: Mapped[Team] = relationship("Team", back_populates="league_links")

    def __repr__(self) -> str:
        return f"<LeagueTeam league_id={self.league_id} team_id={self.team_id}>"
