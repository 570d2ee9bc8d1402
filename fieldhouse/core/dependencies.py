"""
FastAPI dependency injection functions.

Provides current user, Redis connections, organization staff resolution
and role enforcement.
"""

from __future__ import annotations

from uuid import UUID

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.config import settings
from fieldhouse.core.database import get_db
from fieldhouse.core.exceptions import ForbiddenError, NotFoundError
from fieldhouse.core.security import blacklist_redis_key, decode_access_token
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.models.user import User

# ---------------------------------------------------------------------------
# HTTP Bearer scheme (auto_error=False so we can return custom 401)
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)

# ---------------------------------------------------------------------------
# Redis
# ---------------------------------------------------------------------------

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """
    Return a shared async Redis client.

    Uses a module-level pool so connections are reused across requests.
    """
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            str(settings.REDIS_URL),
            encoding="utf-8",
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
) -> User:
    """
    Validate Bearer JWT and return the authenticated User.

    Raises 401 if:
    - No token provided
    - Token is invalid or expired
    - JTI is blacklisted
    - User does not exist or is inactive
    """
    if credentials is None:
        raise _unauthorized("MISSING_TOKEN", "Authorization header required")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("INVALID_TOKEN", "Token is invalid or expired")

    jti: str = payload.get("jti", "")
    if await redis.exists(blacklist_redis_key(jti)):
        raise _unauthorized("TOKEN_REVOKED", "Token has been revoked")

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        raise _unauthorized("INVALID_TOKEN", "Token is invalid or expired")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise _unauthorized("USER_NOT_FOUND", "User not found or inactive")

    return user


# ---------------------------------------------------------------------------
# Organization staff + role enforcement
# ---------------------------------------------------------------------------

async def get_org_member(
    org_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> tuple[Organization, StaffMember]:
    """
    Resolve org by id and verify current user is staff.

    Returns (organization, staff_member) tuple.
    Raises 404 if org not found, 403 if user is not staff.
    """
    result = await db.execute(select(Organization).where(Organization.id == org_id))
    org = result.scalar_one_or_none()

    if org is None:
        raise NotFoundError("ORG_NOT_FOUND", "Organization not found")

    member_result = await db.execute(
        select(StaffMember).where(
            StaffMember.org_id == org.id,
            StaffMember.user_id == current_user.id,
        )
    )
    member = member_result.scalar_one_or_none()

    if member is None:
        raise ForbiddenError("NOT_A_MEMBER", "You are not a member of this organization")

    return org, member


def require_role(*roles: StaffRole):
    """
    Dependency factory that enforces one of the given staff roles.

    Usage:
        @router.post("/...")
        async def endpoint(
            org_and_member: tuple = Depends(require_role(StaffRole.admin, StaffRole.editor)),
        ):
            org, member = org_and_member
    """
    async def role_checker(
        org_and_member: tuple[Organization, StaffMember] = Depends(get_org_member),
    ) -> tuple[Organization, StaffMember]:
        _, member = org_and_member
        if member.role not in roles:
            raise ForbiddenError(
                "INSUFFICIENT_ROLE", f"Required role: {[r.value for r in roles]}"
            )
        return org_and_member

    return role_checker

