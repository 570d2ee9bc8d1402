"""
User ORM model.

Accounts are created by the identity service; Fieldhouse only reads them
and links them to staff, roster and team rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fieldhouse.models.member import StaffMember
    from fieldhouse.models.player import OrganizationPlayer
    from fieldhouse.models.team import TeamMember


class User(Base, UUIDMixin, TimestampMixin):
    """An account that can be staff, a player, or both."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    staff_memberships: Mapped[list[StaffMember]] = relationship(
        "StaffMember", back_populates="user", cascade="all, delete-orphan"
    )
    roster_entries: Mapped[list[OrganizationPlayer]] = relationship(
        "OrganizationPlayer", back_populates="user", cascade="all, delete-orphan"
    )
    team_membership: Mapped[TeamMember | None] = relationship(
        "TeamMember", back_populates="user", cascade="all, delete-orphan", uselist=False
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
