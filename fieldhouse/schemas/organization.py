"""
Organization schemas.

Request/response models for organization and staff management endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from fieldhouse.models.member import StaffRole
from fieldhouse.utils.slugs import is_valid_slug


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------

class OrganizationCreateRequest(BaseModel):
    """Request body for POST /organizations."""

    name: str = Field(min_length=2, max_length=100)
    slug: str | None = Field(default=None, min_length=3, max_length=30)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Organization name must be at least 2 characters")
        return v

    @field_validator("slug")
    @classmethod
    def slug_must_be_valid(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not is_valid_slug(v):
            raise ValueError(
                "Slug must be lowercase alphanumeric and hyphens only, "
                "and cannot start or end with a hyphen"
            )
        return v


class OrganizationResponse(BaseModel):
    """Organization detail response."""

    id: UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrganizationListResponse(BaseModel):
    organizations: list[OrganizationResponse]
    total: int


# ---------------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------------

class StaffResponse(BaseModel):
    """Single staff member with user info and role."""

    id: UUID
    user_id: UUID
    email: str
    display_name: str
    avatar_url: str | None
    role: StaffRole
    created_at: datetime


class StaffAddRequest(BaseModel):
    """Request body for POST /organizations/{org_id}/staff."""

    email: str = Field(min_length=3, max_length=255)
    role: StaffRole = StaffRole.viewer

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class StaffRoleUpdateRequest(BaseModel):
    """Request body for PATCH /organizations/{org_id}/staff/{member_id}."""

    role: StaffRole


class StaffListResponse(BaseModel):
    """Response for GET /organizations/{org_id}/staff."""

    staff: list[StaffResponse]
    total: int


# ---------------------------------------------------------------------------
# Invitations
# ---------------------------------------------------------------------------

class InvitationResponse(BaseModel):
    """Invitation detail response."""

    id: UUID
    org_id: UUID
    email: str
    role: StaffRole
    token: str
    expires_at: datetime
    created_at: datetime
    is_expired: bool


class InvitationListResponse(BaseModel):
    """Response for GET /organizations/{org_id}/invitations."""

    invitations: list[InvitationResponse]
    total: int


class StaffAddResponse(BaseModel):
    """
    Result of POST /organizations/{org_id}/staff.

    Exactly one of member/invitation is set: existing accounts are added
    directly, unknown emails get a pending invitation.
    """

    member: StaffResponse | None = None
    invitation: InvitationResponse | None = None
