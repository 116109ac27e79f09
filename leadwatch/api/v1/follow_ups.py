"""
Admin follow-up dashboard: leads gone quiet and who owns them.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from leadwatch.api.errors import raise_for_domain_error
from leadwatch.core.deps import get_follow_up_service
from leadwatch.core.exceptions import InvalidArgumentError
from leadwatch.core.security import require_role
from leadwatch.models.user import UserRole
from leadwatch.schemas.follow_up import FollowUpFilters, FollowUpReport
from leadwatch.services.follow_up_service import FollowUpService, parse_task_status

router = APIRouter(
    prefix="/admin",
    tags=["follow-ups"],
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)


@router.get("/follow-ups", response_model=FollowUpReport)
async def get_follow_ups(
    owner_id: Optional[int] = Query(None, description="Only leads owned by this user"),
    hours_min: Optional[float] = Query(None, description="Defaults to the inactivity threshold"),
    hours_max: Optional[float] = Query(None),
    task_status: Optional[str] = Query(None, description="PENDING, ACKNOWLEDGED or RESOLVED"),
    service: FollowUpService = Depends(get_follow_up_service),
):
    try:
        filters = FollowUpFilters(
            owner_id=owner_id,
            hours_min=hours_min,
            hours_max=hours_max,
            task_status=parse_task_status(task_status),
        )
        return await service.get_follow_up_summary(filters)
    except InvalidArgumentError as e:
        raise_for_domain_error(e)
