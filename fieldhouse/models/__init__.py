"""
SQLAlchemy ORM models.

All models imported here to ensure they are registered with Base.metadata.
Import order matters: base models before dependent models.
"""

from fieldhouse.models.base import Base, TimestampMixin, UUIDMixin
from fieldhouse.models.user import User
from fieldhouse.models.organization import Organization
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.invitation import StaffInvitation
from fieldhouse.models.player import OrganizationPlayer, PlayerStatus
from fieldhouse.models.team import Team, TeamMember, TeamMemberRole, TeamStatus
from fieldhouse.models.league import AGE_GROUP_LABELS, League, LeagueAgeGroup, LeagueTeam
from fieldhouse.models.facility import Facility, FacilitySurface, SurfaceType

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "User",
    "Organization",
    "StaffMember",
    "StaffRole",
    "StaffInvitation",
    "OrganizationPlayer",
    "PlayerStatus",
    "Team",
    "TeamMember",
    "TeamMemberRole",
    "TeamStatus",
    "AGE_GROUP_LABELS",
    "League",
    "LeagueAgeGroup",
    "LeagueTeam",
    "Facility",
    "FacilitySurface",
    "SurfaceType",
]
