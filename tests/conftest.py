"""
Pytest configuration for Fieldhouse backend tests.

Runs against an in-memory SQLite database (aiosqlite) with foreign keys
enforced, so the same unique and cascade rules as PostgreSQL apply.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-chars")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fieldhouse.models import Base, Organization, StaffMember, StaffRole, User


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


def unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Create a test database session."""
    async with session_maker() as session:
        yield session


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    async def _make_user(name: str = "Test User", email: str | None = None) -> User:
        user = User(email=email or unique_email(name.split()[0].lower()), display_name=name)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_org(db_session):
    async def _make_org(
        name: str = "Test Org",
        admin: User | None = None,
        role: StaffRole = StaffRole.admin,
    ) -> Organization:
        org = Organization(name=name, slug=f"org-{uuid.uuid4().hex[:8]}")
        db_session.add(org)
        await db_session.flush()
        if admin is not None:
            db_session.add(StaffMember(org_id=org.id, user_id=admin.id, role=role))
        await db_session.commit()
        return org

    return _make_org


@pytest_asyncio.fixture
async def org(make_org):
    return await make_org("Riverside FC")


@pytest_asyncio.fixture
async def other_org(make_org):
    return await make_org("Hillside United")
