"""
Follow-up tasks with live inactivity figures.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from leadwatch.api.errors import raise_for_domain_error
from leadwatch.core.deps import get_follow_up_service
from leadwatch.core.exceptions import InvalidArgumentError
from leadwatch.core.security import get_current_user
from leadwatch.schemas.task import TaskListResponse
from leadwatch.schemas.token import CallerIdentity
from leadwatch.services.follow_up_service import FollowUpService, parse_task_status

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    user_id: Optional[int] = Query(None, description="Admins only; ignored for other callers"),
    status: Optional[str] = Query(None),
    limit: int = Query(50),
    offset: int = Query(0),
    caller: CallerIdentity = Depends(get_current_user),
    service: FollowUpService = Depends(get_follow_up_service),
):
    try:
        return await service.list_tasks(
            caller,
            user_id=user_id,
            status=parse_task_status(status),
            limit=limit,
            offset=offset,
        )
    except InvalidArgumentError as e:
        raise_for_domain_error(e)
