"""
StaffMember ORM model.
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


class StaffRole(str, enum.Enum):
    """Organization staff role enumeration."""

    admin = "admin"
    editor = "editor"
    viewer = "viewer"


class StaffMember(Base, UUIDMixin, TimestampMixin):
    """Links a user account to an organization as staff."""

    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("user_id", "org_id", name="organization_member_user_org_unique"),
    )

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[StaffRole] = mapped_column(
        Enum(StaffRole, name="staff_role"), nullable=False, default=StaffRole.viewer
    )

    # Relationships
    organization: Mapped[Organization] = relationship(
        "Organization", back_populates="staff"
    )
    user: Mapped[User] = relationship(
        "User", back_populates="staff_memberships"
    )

    def __repr__(self) -> str:
        return f"<StaffMember org_id={self.org_id} user_id={self.user_id} role={self.role}>"
