"""
Schedule display endpoint.

Lets clients render an operating schedule the same way league and
facility responses do, before it is saved.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldhouse.core.dependencies import get_current_user
from fieldhouse.models.user import User
from fieldhouse.schemas.schedule import (
    ScheduleGroupListResponse,
    ScheduleGroupRequest,
    ScheduleGroupResponse,
)
from fieldhouse.utils.schedule import group_schedule

router = APIRouter()


@router.post(
    "/schedules/groups",
    response_model=ScheduleGroupListResponse,
    summary="Group a weekly schedule into display rows",
)
async def group_operating_schedule(
    data: ScheduleGroupRequest,
    current_user: User = Depends(get_current_user),
) -> ScheduleGroupListResponse:
    """
    Merge days with identical hours.

    Returns e.g. [{"day_labels": ["Mon", ..., "Fri"], "time_range": "9:00 AM – 5:00 PM"}].
    """
    schedule = data.schedule.to_storage() if data.schedule else None
    return ScheduleGroupListResponse(
        groups=[ScheduleGroupResponse.from_group(g) for g in group_schedule(schedule)]
    )
