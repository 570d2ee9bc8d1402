"""
Async SQLAlchemy engine and session management.

One session per request: the transaction commits when the handler returns
and rolls back on any exception, so multi-step service calls are atomic.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fieldhouse.core.config import settings
from fieldhouse.core.exceptions import ConflictError

logger = logging.getLogger(__name__)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_db)): ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def flush_or_conflict(db: AsyncSession, code: str, message: str) -> None:
    """
    Flush pending changes, translating a unique-constraint violation.

    The store's constraints are the authority for membership, junction and
    slug uniqueness; a violation here means a concurrent request won the
    race after our pre-check passed.
    """
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Integrity conflict (%s): %s", code, exc.orig)
        raise ConflictError(code, message) from exc
