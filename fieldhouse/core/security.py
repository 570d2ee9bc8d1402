"""
Security utilities.

JWT access-token verification. Tokens are issued by the identity service;
this service only checks signatures, expiry and revocation.
"""

from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from fieldhouse.core.config import settings


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        JWTError: if the signature is invalid, the token is expired, or it
            is not an access token.
    """
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Not an access token")
    return payload


def blacklist_redis_key(jti: str) -> str:
    """Redis key under which a revoked token's JTI is stored."""
    return f"blacklist:{jti}"
