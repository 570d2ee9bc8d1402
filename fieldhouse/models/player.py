"""
OrganizationPlayer ORM model (roster entry).

A user listed here is a player recognized by the organization. Players
without a membership on one of the organization's teams are free agents.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fieldhouse.models.organization import Organization
    from fieldhouse.models.user import User


class PlayerStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    banned = "banned"
    suspended = "suspended"
    injured = "injured"


class OrganizationPlayer(Base, UUIDMixin, TimestampMixin):
    """Roster entry: (organization, user) with an org-level status."""

    __tablename__ = "organization_players"
    __table_args__ = (
        UniqueConstraint("org_id", "user_id", name="organization_player_org_user_unique"),
    )

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[PlayerStatus] = mapped_column(
        Enum(PlayerStatus, name="player_status"),
        nullable=False,
        default=PlayerStatus.inactive,
    )

    # Relationships
    organization: Mapped[Organization] = relationship(
        "Organization", back_populates="players"
    )
    user: Mapped[User] = relationship("User", back_populates="roster_entries")

    def __repr__(self) -> str:
        return f"<OrganizationPlayer org_id={self.org_id} user_id={self.user_id} status={self.status}>"
