"""
Notification center for the calling user.
"""
from fastapi import APIRouter, Depends, Query

from leadwatch.api.errors import raise_for_domain_error
from leadwatch.core.deps import get_escalation_service
from leadwatch.core.exceptions import ForbiddenError, NotFoundError
from leadwatch.core.security import get_current_user
from leadwatch.schemas.notification import (
    MarkAllReadResponse,
    NotificationFilters,
    NotificationListResponse,
    NotificationResponse,
)
from leadwatch.schemas.token import CallerIdentity
from leadwatch.services.escalation_service import EscalationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    unacknowledged_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    caller: CallerIdentity = Depends(get_current_user),
    service: EscalationService = Depends(get_escalation_service),
):
    filters = NotificationFilters(
        unread_only=unread_only,
        unacknowledged_only=unacknowledged_only,
        limit=limit,
        offset=offset,
    )
    return await service.list_for_user(caller.user_id, filters)


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    caller: CallerIdentity = Depends(get_current_user),
    service: EscalationService = Depends(get_escalation_service),
):
    count = await service.mark_all_read(caller.user_id)
    return MarkAllReadResponse(count=count)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    caller: CallerIdentity = Depends(get_current_user),
    service: EscalationService = Depends(get_escalation_service),
):
    try:
        notification = await service.mark_read(notification_id, caller.user_id)
    except (NotFoundError, ForbiddenError) as e:
        raise_for_domain_error(e)
    return NotificationResponse.model_validate(notification)


@router.patch("/{notification_id}/acknowledge")
async def acknowledge(
    notification_id: int,
    caller: CallerIdentity = Depends(get_current_user),
    service: EscalationService = Depends(get_escalation_service),
):
    """Acknowledge an alert. The notification and its task are removed."""
    try:
        await service.acknowledge(notification_id, caller.user_id)
    except (NotFoundError, ForbiddenError) as e:
        raise_for_domain_error(e)
    return {"success": True, "message": "Notification acknowledged"}
