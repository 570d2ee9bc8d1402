"""
Facility and surface tests.
"""

import pytest
from pydantic import ValidationError

from fieldhouse.core.exceptions import ConflictError, NotFoundError
from fieldhouse.models import SurfaceType
from fieldhouse.schemas.facility import (
    FacilityCreateRequest,
    FacilityUpdateRequest,
    SurfaceCreateRequest,
    SurfaceUpdateRequest,
)
from fieldhouse.services.facility_service import FacilityService


@pytest.mark.asyncio
async def test_facility_slugs_are_suffixed_within_org(db_session, org, other_org):
    service = FacilityService(db_session)

    first = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))
    second = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))
    elsewhere = await service.create_facility(
        other_org.id, FacilityCreateRequest(name="Riverside Park")
    )

    assert first.slug == "riverside-park"
    assert second.slug == "riverside-park-1"
    assert elsewhere.slug == "riverside-park"


@pytest.mark.asyncio
async def test_explicit_facility_slug_must_be_free(db_session, org):
    service = FacilityService(db_session)
    await service.create_facility(org.id, FacilityCreateRequest(name="North Field", slug="north"))

    with pytest.raises(ConflictError) as exc_info:
        await service.create_facility(
            org.id, FacilityCreateRequest(name="North Annex", slug="north")
        )

    assert exc_info.value.code == "SLUG_TAKEN"


def test_explicit_facility_slug_is_validated():
    with pytest.raises(ValidationError):
        FacilityCreateRequest(name="North Field", slug="North Field")


@pytest.mark.asyncio
async def test_facility_schedule_groups(db_session, org):
    facility = await FacilityService(db_session).create_facility(
        org.id,
        FacilityCreateRequest(
            name="Riverside Park",
            operating_schedule={
                "saturday": {"startTime": "08:00", "endTime": "20:00"},
                "sunday": {"startTime": "8:00", "endTime": "20:00"},
            },
        ),
    )

    groups = [(g.day_labels, g.time_range) for g in facility.schedule_groups]
    assert groups == [
        (["Mon", "Tue", "Wed", "Thu", "Fri"], "Closed"),
        (["Sat", "Sun"], "8:00 AM – 8:00 PM"),
    ]


@pytest.mark.asyncio
async def test_list_and_search_facilities(db_session, org):
    service = FacilityService(db_session)
    await service.create_facility(
        org.id, FacilityCreateRequest(name="Riverside Park", address="1 River Rd")
    )
    await service.create_facility(org.id, FacilityCreateRequest(name="Hilltop Courts"))

    by_address = await service.list_facilities(org.id, search="river rd")
    everything = await service.list_facilities(org.id)

    assert [f.name for f in by_address.facilities] == ["Riverside Park"]
    assert everything.total == 2


@pytest.mark.asyncio
async def test_update_facility_keeps_slug(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))

    updated = await service.update_facility(
        org.id, facility.id, FacilityUpdateRequest(name="Riverside Sports Park")
    )

    assert updated.name == "Riverside Sports Park"
    assert updated.slug == "riverside-park"


@pytest.mark.asyncio
async def test_facility_of_other_org_is_not_found(db_session, org, other_org):
    service = FacilityService(db_session)
    facility = await service.create_facility(
        other_org.id, FacilityCreateRequest(name="Riverside Park")
    )

    with pytest.raises(NotFoundError):
        await service.get_facility(org.id, facility.id)
    with pytest.raises(NotFoundError):
        await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_surfaces_are_appended_in_order(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))

    await service.add_surface(
        org.id, facility.id, SurfaceCreateRequest(name="Field 1", type=SurfaceType.field)
    )
    await service.add_surface(
        org.id, facility.id, SurfaceCreateRequest(name="Court A", type=SurfaceType.court)
    )
    detail = await service.get_facility(org.id, facility.id)

    assert [(s.name, s.sort_order) for s in detail.surfaces] == [("Field 1", 0), ("Court A", 1)]


@pytest.mark.asyncio
async def test_surface_names_are_unique_per_facility(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))
    await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))

    with pytest.raises(ConflictError) as exc_info:
        await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))

    assert exc_info.value.code == "SURFACE_NAME_TAKEN"


@pytest.mark.asyncio
async def test_update_and_remove_surface(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))
    surface = await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))

    renamed = await service.update_surface(
        org.id, facility.id, surface.id, SurfaceUpdateRequest(name="Main Field", type=SurfaceType.field)
    )
    assert renamed.name == "Main Field"
    assert renamed.type == SurfaceType.field

    await service.remove_surface(org.id, facility.id, surface.id)
    detail = await service.get_facility(org.id, facility.id)
    assert detail.surfaces == []


@pytest.mark.asyncio
async def test_delete_facility(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name="Riverside Park"))
    await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))

    await service.delete_facility(org.id, facility.id)

    assert (await service.list_facilities(org.id)).total == 0


@pytest.mark.parametrize(
    "request_cls",
    [FacilityCreateRequest, FacilityUpdateRequest, SurfaceCreateRequest, SurfaceUpdateRequest],
)
def test_blank_names_are_rejected(request_cls):
    with pytest.raises(ValidationError):
        request_cls(name=" \t ")


@pytest.mark.asyncio
async def test_surface_rename_is_trimmed(db_session, org):
    service = FacilityService(db_session)
    facility = await service.create_facility(org.id, FacilityCreateRequest(name=" Riverside Park "))
    surface = await service.add_surface(org.id, facility.id, SurfaceCreateRequest(name="Field 1"))

    renamed = await service.update_surface(
        org.id, facility.id, surface.id, SurfaceUpdateRequest(name="  Main Field ")
    )

    assert facility.name == "Riverside Park"
    assert renamed.name == "Main Field"
