"""
Pydantic schemas for follow-up tasks.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from leadwatch.models.task import TaskStatus, TaskType
from leadwatch.schemas.notification import Pagination


class TaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    lead_id: int
    type: TaskType
    status: TaskStatus
    created_at: datetime


class TaskWithActivity(TaskSummary):
    lead_name: Optional[str] = None
    owner_name: Optional[str] = None
    hours_inactive: int = 0
    last_activity: Optional[datetime] = None


class TaskCounts(BaseModel):
    pending: int
    acknowledged: int


class TaskListResponse(BaseModel):
    tasks: list[TaskWithActivity]
    pagination: Pagination
    counts: TaskCounts
