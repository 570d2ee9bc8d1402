"""
Facility business logic.

Handles facility CRUD and the surfaces (fields, courts, ...) inside each
facility. All queries scoped by org_id.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fieldhouse.core.database import flush_or_conflict
from fieldhouse.core.exceptions import ConflictError, NotFoundError
from fieldhouse.models.facility import Facility, FacilitySurface
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
from fieldhouse.schemas.schedule import ScheduleGroupResponse
from fieldhouse.utils.schedule import group_schedule
from fieldhouse.utils.slugs import allocate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "A facility with this slug already exists"
SURFACE_NAME_TAKEN_MESSAGE = "A surface with this name already exists in the facility"


class FacilityService:

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # -----------------------------------------------------------------------
    # Facility CRUD
    # -----------------------------------------------------------------------

    async def list_facilities(
        self, org_id: UUID, search: str | None = None
    ) -> FacilityListResponse:
        stmt = select(Facility).where(Facility.org_id == org_id).order_by(Facility.name)
        term = (search or "").strip()
        if term:
            stmt = stmt.where(
                Facility.name.icontains(term, autoescape=True)
                | Facility.address.icontains(term, autoescape=True)
            )
        result = await self.db.execute(stmt)
        facilities = [self._to_response(f) for f in result.scalars().all()]
        return FacilityListResponse(facilities=facilities, total=len(facilities))

    async def create_facility(
        self, org_id: UUID, data: FacilityCreateRequest
    ) -> FacilityResponse:
        """
        Create a facility.

        An explicit slug must be free within the organization. Without one
        the slug is derived from the name, suffixed -1, -2, ... on collision.
        """
        name = data.name

        if data.slug is not None:
            if await self._slug_exists(org_id, data.slug):
                raise ConflictError("SLUG_TAKEN", SLUG_TAKEN_MESSAGE)
            slug = data.slug
        else:

            async def slug_taken(candidate: str) -> bool:
                return await self._slug_exists(org_id, candidate)

            slug = await allocate_slug(name, slug_taken, fallback="facility")

        facility = Facility(
            org_id=org_id,
            name=name,
            slug=slug,
            address=data.address,
            operating_schedule=(
                data.operating_schedule.to_storage() if data.operating_schedule else None
            ),
        )
        self.db.add(facility)
        await flush_or_conflict(self.db, "SLUG_TAKEN", SLUG_TAKEN_MESSAGE)
        await self.db.refresh(facility)

        logger.info("Created facility id=%s slug=%s org_id=%s", facility.id, slug, org_id)
        return self._to_response(facility)

    async def get_facility(self, org_id: UUID, facility_id: UUID) -> FacilityDetailResponse:
        result = await self.db.execute(
            select(Facility)
            .options(selectinload(Facility.surfaces))
            .where(Facility.id == facility_id, Facility.org_id == org_id)
        )
        facility = result.scalar_one_or_none()
        if facility is None:
            raise NotFoundError("FACILITY_NOT_FOUND", "Facility not found")

        base = self._to_response(facility)
        return FacilityDetailResponse(
            **base.model_dump(),
            surfaces=[SurfaceResponse.model_validate(s) for s in facility.surfaces],
        )

    async def update_facility(
        self, org_id: UUID, facility_id: UUID, data: FacilityUpdateRequest
    ) -> FacilityResponse:
        facility = await self._get_facility(org_id, facility_id)
        fields = data.model_fields_set

        if data.name is not None:
            facility.name = data.name
        if "address" in fields:
            facility.address = data.address
        if "operating_schedule" in fields:
            facility.operating_schedule = (
                data.operating_schedule.to_storage() if data.operating_schedule else None
            )

        await self.db.flush()
        await self.db.refresh(facility)
        return self._to_response(facility)

    async def delete_facility(self, org_id: UUID, facility_id: UUID) -> None:
        facility = await self._get_facility(org_id, facility_id)
        await self.db.delete(facility)
        await self.db.flush()
        logger.info("Deleted facility id=%s org_id=%s", facility_id, org_id)

    # -----------------------------------------------------------------------
    # Surfaces
    # -----------------------------------------------------------------------

    async def add_surface(
        self, org_id: UUID, facility_id: UUID, data: SurfaceCreateRequest
    ) -> SurfaceResponse:
        """Append a surface; sort_order continues after the current last one."""
        await self._get_facility(org_id, facility_id)
        name = data.name

        if await self._surface_name_exists(facility_id, name):
            raise ConflictError("SURFACE_NAME_TAKEN", SURFACE_NAME_TAKEN_MESSAGE)

        max_order = await self.db.scalar(
            select(func.max(FacilitySurface.sort_order)).where(
                FacilitySurface.facility_id == facility_id
            )
        )
        surface = FacilitySurface(
            facility_id=facility_id,
            name=name,
            type=data.type,
            sort_order=(max_order + 1) if max_order is not None else 0,
        )
        self.db.add(surface)
        await flush_or_conflict(self.db, "SURFACE_NAME_TAKEN", SURFACE_NAME_TAKEN_MESSAGE)
        await self.db.refresh(surface)
        return SurfaceResponse.model_validate(surface)

    async def update_surface(
        self,
        org_id: UUID,
        facility_id: UUID,
        surface_id: UUID,
        data: SurfaceUpdateRequest,
    ) -> SurfaceResponse:
        await self._get_facility(org_id, facility_id)
        surface = await self._get_surface(facility_id, surface_id)

        if data.name is not None:
            name = data.name
            if name != surface.name and await self._surface_name_exists(facility_id, name):
                raise ConflictError("SURFACE_NAME_TAKEN", SURFACE_NAME_TAKEN_MESSAGE)
            surface.name = name
        if data.type is not None:
            surface.type = data.type

        await flush_or_conflict(self.db, "SURFACE_NAME_TAKEN", SURFACE_NAME_TAKEN_MESSAGE)
        await self.db.refresh(surface)
        return SurfaceResponse.model_validate(surface)

    async def remove_surface(self, org_id: UUID, facility_id: UUID, surface_id: UUID) -> None:
        await self._get_facility(org_id, facility_id)
        surface = await self._get_surface(facility_id, surface_id)
        await self.db.delete(surface)
        await self.db.flush()

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    async def _get_facility(self, org_id: UUID, facility_id: UUID) -> Facility:
        result = await self.db.execute(
            select(Facility).where(Facility.id == facility_id, Facility.org_id == org_id)
        )
        facility = result.scalar_one_or_none()
        if facility is None:
            raise NotFoundError("FACILITY_NOT_FOUND", "Facility not found")
        return facility

    async def _get_surface(self, facility_id: UUID, surface_id: UUID) -> FacilitySurface:
        result = await self.db.execute(
            select(FacilitySurface).where(
                FacilitySurface.id == surface_id,
                FacilitySurface.facility_id == facility_id,
            )
        )
        surface = result.scalar_one_or_none()
        if surface is None:
            raise NotFoundError("SURFACE_NOT_FOUND", "Surface not found")
        return surface

    async def _slug_exists(self, org_id: UUID, slug: str) -> bool:
        count = await self.db.scalar(
            select(func.count())
            .select_from(Facility)
            .where(Facility.org_id == org_id, Facility.slug == slug)
        )
        return bool(count)

    async def _surface_name_exists(self, facility_id: UUID, name: str) -> bool:
        count = await self.db.scalar(
            select(func.count())
            .select_from(FacilitySurface)
            .where(FacilitySurface.facility_id == facility_id, FacilitySurface.name == name)
        )
        return bool(count)

    @staticmethod
    def _to_response(facility: Facility) -> FacilityResponse:
        return FacilityResponse(
            id=facility.id,
            org_id=facility.org_id,
            name=facility.name,
            slug=facility.slug,
            address=facility.address,
            operating_schedule=facility.operating_schedule,
            schedule_groups=[
                ScheduleGroupResponse.from_group(g)
                for g in group_schedule(facility.operating_schedule)
            ],
            created_at=facility.created_at,
            updated_at=facility.updated_at,
        )
