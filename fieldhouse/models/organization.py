"""
Organization ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fieldhouse.models.facility import Facility
    from fieldhouse.models.invitation import StaffInvitation
    from fieldhouse.models.league import League
    from fieldhouse.models.member import StaffMember
    from fieldhouse.models.player import OrganizationPlayer
    from fieldhouse.models.team import Team


class Organization(Base, UUIDMixin, TimestampMixin):
    """Tenant root. Deleting it removes everything beneath it."""

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)

    # Relationships
    staff: Mapped[list[StaffMember]] = relationship(
        "StaffMember", back_populates="organization", cascade="all, delete-orphan"
    )
    players: Mapped[list[OrganizationPlayer]] = relationship(
        "OrganizationPlayer", back_populates="organization", cascade="all, delete-orphan"
    )
    teams: Mapped[list[Team]] = relationship(
        "Team", back_populates="organization", cascade="all, delete-orphan"
    )
    league: Mapped[League | None] = relationship(
        "League", back_populates="organization", cascade="all, delete-orphan", uselist=False
    )
    facilities: Mapped[list[Facility]] = relationship(
        "Facility", back_populates="organization", cascade="all, delete-orphan"
    )
    invitations: Mapped[list[StaffInvitation]] = relationship(
        "StaffInvitation", back_populates="organization", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} slug={self.slug!r}>"
