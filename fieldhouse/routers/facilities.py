"""
Facility and surface endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from fieldhouse.core.database import get_db
from fieldhouse.core.dependencies import get_org_member, require_role
from fieldhouse.models.member import StaffMember, StaffRole
from fieldhouse.models.organization import Organization
from fieldhouse.schemas.facility import (
    FacilityCreateRequest,
    FacilityDetailResponse,
    FacilityListResponse,
    FacilityResponse,
    FacilityUpdateRequest,
    SurfaceCreateRequest,
    SurfaceResponse,
    SurfaceUpdateRequest,
)
from fieldhouse.services.facility_service import FacilityService

router = APIRouter()

OrgContext = tuple[Organization, StaffMember]


def get_facility_service(db: AsyncSession = Depends(get_db)) -> FacilityService:
    return FacilityService(db=db)


# ---------------------------------------------------------------------------
# Facilities
# ---------------------------------------------------------------------------

@router.get(
    "/organizations/{org_id}/facilities",
    response_model=FacilityListResponse,
    summary="List facilities",
)
async def list_facilities(
    search: str | None = Query(default=None, max_length=100),
    org_and_member: OrgContext = Depends(get_org_member),
    service: FacilityService = Depends(get_facility_service),
) -> FacilityListResponse:
    org, _ = org_and_member
    return await service.list_facilities(org.id, search)


@router.post(
    "/organizations/{org_id}/facilities",
    response_model=FacilityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a facility",
)
async def create_facility(
    data: FacilityCreateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> FacilityResponse:
    """
    Create a facility.

    Without an explicit slug one is derived from the name, with a numeric
    suffix when the organization already uses it.
    """
    org, _ = org_and_member
    return await service.create_facility(org.id, data)


@router.get(
    "/organizations/{org_id}/facilities/{facility_id}",
    response_model=FacilityDetailResponse,
    summary="Get facility with surfaces",
)
async def get_facility(
    facility_id: UUID,
    org_and_member: OrgContext = Depends(get_org_member),
    service: FacilityService = Depends(get_facility_service),
) -> FacilityDetailResponse:
    org, _ = org_and_member
    return await service.get_facility(org.id, facility_id)


@router.patch(
    "/organizations/{org_id}/facilities/{facility_id}",
    response_model=FacilityResponse,
    summary="Update facility",
)
async def update_facility(
    facility_id: UUID,
    data: FacilityUpdateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> FacilityResponse:
    org, _ = org_and_member
    return await service.update_facility(org.id, facility_id, data)


@router.delete(
    "/organizations/{org_id}/facilities/{facility_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete facility",
)
async def delete_facility(
    facility_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> dict:
    org, _ = org_and_member
    await service.delete_facility(org.id, facility_id)
    return {"success": True}


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------

@router.post(
    "/organizations/{org_id}/facilities/{facility_id}/surfaces",
    response_model=SurfaceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a surface to a facility",
)
async def add_surface(
    facility_id: UUID,
    data: SurfaceCreateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> SurfaceResponse:
    org, _ = org_and_member
    return await service.add_surface(org.id, facility_id, data)


@router.patch(
    "/organizations/{org_id}/facilities/{facility_id}/surfaces/{surface_id}",
    response_model=SurfaceResponse,
    summary="Update a surface",
)
async def update_surface(
    facility_id: UUID,
    surface_id: UUID,
    data: SurfaceUpdateRequest,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> SurfaceResponse:
    org, _ = org_and_member
    return await service.update_surface(org.id, facility_id, surface_id, data)


@router.delete(
    "/organizations/{org_id}/facilities/{facility_id}/surfaces/{surface_id}",
    status_code=status.HTTP_200_OK,
    summary="Remove a surface",
)
async def remove_surface(
    facility_id: UUID,
    surface_id: UUID,
    org_and_member: OrgContext = Depends(require_role(StaffRole.admin, StaffRole.editor)),
    service: FacilityService = Depends(get_facility_service),
) -> dict:
    org, _ = org_and_member
    await service.remove_surface(org.id, facility_id, surface_id)
    return {"success": True}
