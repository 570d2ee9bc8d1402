"""
Typed service errors.

Each kind is an HTTPException carrying the usual
``{"code": ..., "message": ...}`` detail, so services raise them directly
and FastAPI renders them without extra handlers.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """Base class for coded service errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, code: str, message: str) -> None:
        super().__init__(
            status_code=type(self).status_code,
            detail={"code": code, "message": message},
        )
        self.code = code
        self.message = message


class NotFoundError(ServiceError):
    """Entity absent, or owned by another organization (never distinguished)."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Uniqueness violation: duplicate membership, pair, roster entry or slug."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidInputError(ServiceError):
    """Request is well-formed but inconsistent with stored state."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class BadRequestError(ServiceError):
    """Request refers to something that can no longer be used, e.g. a spent invitation."""

    status_code = status.HTTP_400_BAD_REQUEST
