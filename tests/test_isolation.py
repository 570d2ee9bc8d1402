"""
Cross-tenant isolation and security tests.

Drives the API in-process through httpx's ASGI transport. Verifies that:
- Users cannot access resources from other organizations
- Role enforcement works correctly within an org
- Token security is enforced
- Multi-step writes are all-or-nothing
"""

import uuid
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from jose import jwt
from sqlalchemy import select

from fieldhouse.core.config import settings
from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_redis
from fieldhouse.core.security import blacklist_redis_key
from fieldhouse.main import app
from fieldhouse.models import StaffRole, TeamMember

BASE_URL = "http://testserver"


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the token blacklist check."""

    def __init__(self) -> None:
        self.keys: set[str] = set()

    async def exists(self, key: str) -> int:
        return int(key in self.keys)


def make_token(user_id, jti: str | None = None) -> str:
    payload = {
        "sub": str(user_id),
        "jti": jti or uuid.uuid4().hex,
        "type": "access",
        "exp": datetime.now(UTC) + timedelta(minutes=15),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest_asyncio.fixture
async def fake_redis():
    return FakeRedis()


@pytest_asyncio.fixture
async def client(session_maker, fake_redis):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_redis():
        return fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url=BASE_URL
    ) as client:
        yield client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def create_team(client: httpx.AsyncClient, admin_user, org_id, team_admin, name: str) -> dict:
    resp = await client.post(
        f"/api/v1/organizations/{org_id}/teams",
        json={"name": name, "admin_user_id": str(team_admin.id)},
        headers=auth(admin_user),
    )
    assert resp.status_code == 201, f"Create team failed: {resp.text}"
    return resp.json()


async def create_league(client: httpx.AsyncClient, admin_user, org_id, name: str = "Spring League") -> dict:
    resp = await client.post(
        f"/api/v1/organizations/{org_id}/leagues",
        json={"name": name},
        headers=auth(admin_user),
    )
    assert resp.status_code == 201, f"Create league failed: {resp.text}"
    return resp.json()


async def setup_two_orgs(make_user, make_org):
    """Return (user_a, org_a, user_b, org_b), each user admin of their own org."""
    user_a = await make_user("Alice Admin")
    user_b = await make_user("Bob Admin")
    org_a = await make_org("Org A", admin=user_a)
    org_b = await make_org("Org B", admin=user_b)
    return user_a, org_a, user_b, org_b


# ---------------------------------------------------------------------------
# 1. Authentication
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_unauthenticated_request_rejected(client, make_user, make_org):
    org = await make_org(admin=await make_user("Alice Admin"))

    resp = await client.get(f"/api/v1/organizations/{org.id}")

    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "MISSING_TOKEN"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client, make_user, make_org):
    org = await make_org(admin=await make_user("Alice Admin"))

    resp = await client.get(
        f"/api/v1/organizations/{org.id}",
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_revoked_token_rejected(client, fake_redis, make_user, make_org):
    user = await make_user("Alice Admin")
    org = await make_org(admin=user)
    jti = uuid.uuid4().hex
    fake_redis.keys.add(blacklist_redis_key(jti))

    resp = await client.get(
        f"/api/v1/organizations/{org.id}",
        headers={"Authorization": f"Bearer {make_token(user.id, jti)}"},
    )

    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "TOKEN_REVOKED"


# ---------------------------------------------------------------------------
# 2. Cross-Org Isolation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cannot_access_other_org(client, make_user, make_org):
    user_a, _, _, org_b = await setup_two_orgs(make_user, make_org)

    for path in ("", "/players", "/teams", "/leagues", "/facilities", "/staff"):
        resp = await client.get(f"/api/v1/organizations/{org_b.id}{path}", headers=auth(user_a))
        assert resp.status_code == 403, path
        assert resp.json()["detail"]["code"] == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_unknown_org_is_not_found(client, make_user):
    user = await make_user("Alice Admin")

    resp = await client.get(f"/api/v1/organizations/{uuid.uuid4()}/teams", headers=auth(user))

    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "ORG_NOT_FOUND"


@pytest.mark.asyncio
async def test_other_org_team_is_not_found_through_own_org(client, make_user, make_org):
    user_a, org_a, user_b, org_b = await setup_two_orgs(make_user, make_org)
    team_b = await create_team(client, user_b, org_b.id, user_b, "Lions")

    resp = await client.get(
        f"/api/v1/organizations/{org_a.id}/teams/{team_b['id']}", headers=auth(user_a)
    )
    assert resp.status_code == 404

    resp = await client.post(
        f"/api/v1/organizations/{org_a.id}/teams/{team_b['id']}/players",
        json={"email": user_a.email},
        headers=auth(user_a),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "TEAM_NOT_FOUND"


@pytest.mark.asyncio
async def test_cannot_add_other_org_team_to_league(client, make_user, make_org):
    user_a, org_a, user_b, org_b = await setup_two_orgs(make_user, make_org)
    team_b = await create_team(client, user_b, org_b.id, user_b, "Lions")
    league = await create_league(client, user_a, org_a.id)

    resp = await client.post(
        f"/api/v1/organizations/{org_a.id}/leagues/{league['id']}/teams",
        json={"team_id": team_b["id"]},
        headers=auth(user_a),
    )

    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "TEAM_NOT_FOUND"


# ---------------------------------------------------------------------------
# 3. Role Enforcement
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_viewer_can_read_but_not_write(client, make_user, make_org):
    viewer = await make_user("Vera Viewer")
    org = await make_org(admin=viewer, role=StaffRole.viewer)

    resp = await client.get(f"/api/v1/organizations/{org.id}/players", headers=auth(viewer))
    assert resp.status_code == 200

    resp = await client.post(
        f"/api/v1/organizations/{org.id}/teams",
        json={"name": "Tigers", "admin_user_id": str(viewer.id)},
        headers=auth(viewer),
    )
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_editor_cannot_manage_staff(client, make_user, make_org):
    editor = await make_user("Eddie Editor")
    other = await make_user("Olive Other")
    org = await make_org(admin=editor, role=StaffRole.editor)

    resp = await client.post(
        f"/api/v1/organizations/{org.id}/staff",
        json={"email": other.email},
        headers=auth(editor),
    )

    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# 4. Roster flow and transactional writes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_roster_flow(client, make_user, make_org):
    admin = await make_user("Alice Admin")
    player = await make_user("Bob Player")
    org = await make_org(admin=admin)
    team = await create_team(client, admin, org.id, admin, "Tigers")

    resp = await client.post(
        f"/api/v1/organizations/{org.id}/teams/{team['id']}/players",
        json={"email": player.email, "status": "active"},
        headers=auth(admin),
    )
    assert resp.status_code == 201

    resp = await client.get(
        f"/api/v1/organizations/{org.id}/players",
        params={"team_id": team["id"]},
        headers=auth(admin),
    )
    assert resp.json()["total"] == 2

    resp = await client.delete(
        f"/api/v1/organizations/{org.id}/teams/{team['id']}/players/{admin.id}",
        headers=auth(admin),
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    resp = await client.get(
        f"/api/v1/organizations/{org.id}/teams/{team['id']}/players", headers=auth(admin)
    )
    members = resp.json()["members"]
    assert [(m["user_id"], m["role"]) for m in members] == [(str(player.id), "admin")]


@pytest.mark.asyncio
async def test_set_league_teams_is_all_or_nothing(client, make_user, make_org):
    user_a, org_a, user_b, org_b = await setup_two_orgs(make_user, make_org)
    team_a = await create_team(client, user_a, org_a.id, user_a, "Tigers")
    team_b = await create_team(client, user_b, org_b.id, user_b, "Lions")
    league = await create_league(client, user_a, org_a.id)
    teams_url = f"/api/v1/organizations/{org_a.id}/leagues/{league['id']}/teams"

    resp = await client.put(
        teams_url, json={"team_ids": [team_a["id"], team_b["id"]]}, headers=auth(user_a)
    )
    assert resp.status_code == 404

    resp = await client.get(teams_url, headers=auth(user_a))
    assert resp.json()["total"] == 0


@pytest.mark.asyncio
async def test_set_team_players_is_all_or_nothing(client, session_maker, make_user, make_org):
    admin = await make_user("Alice Admin")
    newcomer = await make_user("Nina New")
    taken = await make_user("Tom Taken")
    org = await make_org(admin=admin)
    tigers = await create_team(client, admin, org.id, admin, "Tigers")
    await create_team(client, admin, org.id, taken, "Lions")

    resp = await client.put(
        f"/api/v1/organizations/{org.id}/teams/{tigers['id']}/players",
        json={"user_ids": [str(admin.id), str(newcomer.id), str(taken.id)]},
        headers=auth(admin),
    )
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "ALREADY_ON_TEAM"

    async with session_maker() as session:
        result = await session.execute(
            select(TeamMember.user_id).where(TeamMember.user_id == newcomer.id)
        )
        assert result.scalar_one_or_none() is None


# ---------------------------------------------------------------------------
# 5. Schedules
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_group_schedule_endpoint(client, make_user):
    user = await make_user("Alice Admin")
    schedule = {
        day: {"startTime": "09:00", "endTime": "17:00"}
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
    }

    resp = await client.post(
        "/api/v1/schedules/groups", json={"schedule": schedule}, headers=auth(user)
    )

    assert resp.status_code == 200
    assert resp.json()["groups"] == [
        {"day_labels": ["Mon", "Tue", "Wed", "Thu", "Fri"], "time_range": "9:00 AM – 5:00 PM"},
        {"day_labels": ["Sat", "Sun"], "time_range": "Closed"},
    ]


@pytest.mark.asyncio
async def test_group_schedule_rejects_bad_time(client, make_user):
    user = await make_user("Alice Admin")

    resp = await client.post(
        "/api/v1/schedules/groups",
        json={"schedule": {"monday": {"startTime": "9am", "endTime": "17:00"}}},
        headers=auth(user),
    )

    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# 6. Staff invitations
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_invite_and_accept_staff(client, make_user, make_org):
    admin = await make_user("Alice Admin")
    org = await make_org(admin=admin)

    resp = await client.post(
        f"/api/v1/organizations/{org.id}/staff",
        json={"email": "new.coach@example.com", "role": "editor"},
        headers=auth(admin),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["member"] is None
    token = body["invitation"]["token"]

    coach = await make_user("New Coach", email="new.coach@example.com")
    resp = await client.post(f"/api/v1/invitations/{token}/accept", headers=auth(coach))
    assert resp.status_code == 200
    assert resp.json()["id"] == str(org.id)

    resp = await client.get(f"/api/v1/organizations/{org.id}/teams", headers=auth(coach))
    assert resp.status_code == 200

    resp = await client.post(f"/api/v1/invitations/{token}/accept", headers=auth(coach))
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVITE_USED"


@pytest.mark.asyncio
async def test_whitespace_names_are_rejected(client, make_user, make_org):
    admin = await make_user("Alice Admin")
    org = await make_org(admin=admin)

    for path, body in (
        ("/teams", {"name": "   ", "admin_user_id": str(admin.id)}),
        ("/leagues", {"name": "   "}),
        ("/facilities", {"name": "   "}),
    ):
        resp = await client.post(
            f"/api/v1/organizations/{org.id}{path}", json=body, headers=auth(admin)
        )
        assert resp.status_code == 422, path

    resp = await client.get(f"/api/v1/organizations/{org.id}/leagues", headers=auth(admin))
    assert resp.json()["total"] == 0
