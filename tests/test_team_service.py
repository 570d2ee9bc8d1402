"""
Team creation and CRUD tests.
"""

import re
import uuid

import pytest
from sqlalchemy import func, select

from fieldhouse.core.exceptions import ConflictError, NotFoundError
from fieldhouse.models import OrganizationPlayer, Team, TeamMember, TeamMemberRole, TeamStatus
from fieldhouse.schemas.league import LeagueCreateRequest
from fieldhouse.schemas.team import TeamCreateRequest, TeamUpdateRequest
from fieldhouse.services.league_service import LeagueService
from fieldhouse.services.team_service import TeamService


@pytest.mark.asyncio
async def test_create_team_with_admin(db_session, org, make_user):
    admin = await make_user("Alice Admin")

    team = await TeamService(db_session).create_team_with_admin(
        org.id, TeamCreateRequest(name="  Tigers ", admin_user_id=admin.id)
    )

    assert team.name == "Tigers"
    assert team.org_id == org.id
    assert team.status == TeamStatus.inactive
    assert re.fullmatch(r"[A-Z0-9]{7}", team.slug)

    membership = (
        await db_session.execute(select(TeamMember).where(TeamMember.team_id == team.id))
    ).scalar_one()
    assert membership.user_id == admin.id
    assert membership.role == TeamMemberRole.admin

    roster_count = await db_session.scalar(
        select(func.count())
        .select_from(OrganizationPlayer)
        .where(OrganizationPlayer.org_id == org.id, OrganizationPlayer.user_id == admin.id)
    )
    assert roster_count == 1


@pytest.mark.asyncio
async def test_create_team_admin_already_on_team(db_session, org, make_user):
    admin = await make_user("Alice Admin")
    service = TeamService(db_session)
    await service.create_team_with_admin(org.id, TeamCreateRequest(name="Tigers", admin_user_id=admin.id))

    with pytest.raises(ConflictError) as exc_info:
        await service.create_team_with_admin(
            org.id, TeamCreateRequest(name="Lions", admin_user_id=admin.id)
        )

    assert exc_info.value.code == "ALREADY_ON_TEAM"
    team_count = await db_session.scalar(select(func.count()).select_from(Team))
    assert team_count == 1


@pytest.mark.asyncio
async def test_create_team_with_unknown_admin(db_session, org):
    with pytest.raises(NotFoundError) as exc_info:
        await TeamService(db_session).create_team_with_admin(
            org.id, TeamCreateRequest(name="Tigers", admin_user_id=uuid.uuid4())
        )

    assert exc_info.value.code == "USER_NOT_FOUND"


def test_team_name_cannot_be_blank():
    with pytest.raises(ValueError):
        TeamCreateRequest(name="   ", admin_user_id=uuid.uuid4())


def test_team_rename_cannot_be_blank():
    with pytest.raises(ValueError):
        TeamUpdateRequest(name="   ")

    assert TeamUpdateRequest(name=" Tigers II ").name == "Tigers II"
    assert TeamUpdateRequest(status=TeamStatus.active).name is None


@pytest.mark.asyncio
async def test_get_team_by_slug_is_case_insensitive(db_session, org, make_user):
    admin = await make_user("Alice Admin")
    service = TeamService(db_session)
    team = await service.create_team_with_admin(
        org.id, TeamCreateRequest(name="Tigers", admin_user_id=admin.id)
    )

    found = await service.get_team_by_slug(org.id, team.slug.lower())

    assert found.id == team.id


@pytest.mark.asyncio
async def test_team_of_other_org_is_not_found(db_session, org, other_org, make_user):
    admin = await make_user("Alice Admin")
    service = TeamService(db_session)
    team = await service.create_team_with_admin(
        other_org.id, TeamCreateRequest(name="Tigers", admin_user_id=admin.id)
    )

    with pytest.raises(NotFoundError):
        await service.get_team(org.id, team.id)
    with pytest.raises(NotFoundError):
        await service.get_team_by_slug(org.id, team.slug)
    with pytest.raises(NotFoundError):
        await service.delete_team(org.id, team.id)


@pytest.mark.asyncio
async def test_update_team(db_session, org, make_user):
    admin = await make_user("Alice Admin")
    service = TeamService(db_session)
    team = await service.create_team_with_admin(
        org.id, TeamCreateRequest(name="Tigers", admin_user_id=admin.id)
    )

    updated = await service.update_team(
        org.id, team.id, TeamUpdateRequest(name="Tigers II", status=TeamStatus.active)
    )

    assert updated.name == "Tigers II"
    assert updated.status == TeamStatus.active
    assert updated.slug == team.slug


@pytest.mark.asyncio
async def test_list_teams_with_search(db_session, org, make_user):
    service = TeamService(db_session)
    for name in ("Tigers", "Lions", "Tiger Cubs"):
        admin = await make_user(f"{name} Admin")
        await service.create_team_with_admin(
            org.id, TeamCreateRequest(name=name, admin_user_id=admin.id)
        )

    result = await service.list_teams(org.id, search="tiger")

    assert [t.name for t in result.teams] == ["Tiger Cubs", "Tigers"]


@pytest.mark.asyncio
async def test_delete_team_removes_memberships_and_league_links(db_session, org, make_user):
    admin = await make_user("Alice Admin")
    service = TeamService(db_session)
    team = await service.create_team_with_admin(
        org.id, TeamCreateRequest(name="Tigers", admin_user_id=admin.id)
    )
    leagues = LeagueService(db_session)
    league = await leagues.create_league(org.id, LeagueCreateRequest(name="Spring League"))
    await leagues.add_team_to_league(org.id, league.id, team.id)

    await service.delete_team(org.id, team.id)

    assert await db_session.scalar(select(func.count()).select_from(TeamMember)) == 0
    participants = await leagues.list_participants(org.id, league.id)
    assert participants.total == 0
    # The player stays on the roster as a free agent
    roster_count = await db_session.scalar(select(func.count()).select_from(OrganizationPlayer))
    assert roster_count == 1
