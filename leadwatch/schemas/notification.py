"""
Pydantic schemas for the notification center.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from leadwatch.models.notification import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: NotificationType
    lead_id: Optional[int] = None
    task_id: Optional[int] = None
    read: bool
    read_at: Optional[datetime] = None
    acknowledged: bool
    created_at: datetime


class NotificationFilters(BaseModel):
    unread_only: bool = False
    unacknowledged_only: bool = False
    limit: int = 50
    offset: int = 0


class NotificationCounts(BaseModel):
    unread: int
    unacknowledged: int


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    pagination: Pagination
    counts: NotificationCounts


class MarkAllReadResponse(BaseModel):
    count: int
    message: str = "All notifications marked as read"
