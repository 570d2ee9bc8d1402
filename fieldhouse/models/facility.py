"""
Facility and FacilitySurface ORM models.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldhouse.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fieldhouse.models.organization import Organization


class SurfaceType(str, enum.Enum):
    field = "field"
    court = "court"
    diamond = "diamond"
    rink = "rink"
    other = "other"


class Facility(Base, UUIDMixin, TimestampMixin):
    """A venue owned or used by the organization (e.g. "Riverside Park")."""

    __tablename__ = "facilities"
    __table_args__ = (
        UniqueConstraint("org_id", "slug", name="facility_org_slug_unique"),
    )

    org_id: Mapped[UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    operating_schedule: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType, nullable=True, default=None
    )

    # Relationships
    organization: Mapped[Organization] = relationship(
        "Organization", back_populates="facilities"
    )
    surfaces: Mapped[list[FacilitySurface]] = relationship(
        "FacilitySurface",
        back_populates="facility",
        cascade="all, delete-orphan",
        order_by="FacilitySurface.sort_order",
    )

    def __repr__(self) -> str:
        return f"<Facility id={self.id} slug={self.slug!r} org_id={self.org_id}>"


class FacilitySurface(Base, UUIDMixin, TimestampMixin):
    """A bookable unit within a facility (Field 1, Court A, ...)."""

    __tablename__ = "facility_surfaces"
    __table_args__ = (
        UniqueConstraint("facility_id", "name", name="facility_surface_facility_name_unique"),
    )

    facility_id: Mapped[UUID] = mapped_column(
        ForeignKey("facilities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[SurfaceType] = mapped_column(
        Enum(SurfaceType, name="facility_surface_type"),
        nullable=False,
        default=SurfaceType.other,
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    facility: Mapped[Facility] = relationship("Facility", back_populates="surfaces")

    def __repr__(self) -> str:
        return f"<FacilitySurface id={self.id} name={self.name!r} facility_id={self.facility_id}>"
