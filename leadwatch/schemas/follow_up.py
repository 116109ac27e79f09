"""
Pydantic schemas for follow-up reporting.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from leadwatch.models.task import TaskStatus
from leadwatch.schemas.task import TaskSummary


class FollowUpFilters(BaseModel):
    """Dashboard filters. ``hours_min`` falls back to the inactivity threshold."""
    owner_id: Optional[int] = None
    hours_min: Optional[float] = None
    hours_max: Optional[float] = None
    task_status: Optional[TaskStatus] = None


class OwnerRef(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class InactiveLead(BaseModel):
    lead_id: int
    lead_name: Optional[str] = None
    owner: OwnerRef
    last_activity: datetime
    hours_inactive: int
    task: Optional[TaskSummary] = None


class OwnerStats(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    inactive_count: int = 0
    total_hours_inactive: float = 0.0
    average_hours_inactive: int = 0
    unacknowledged_tasks: int = 0


class FollowUpSummary(BaseModel):
    total_inactive_leads: int
    total_unacknowledged_tasks: int
    owner_stats: list[OwnerStats]


class FollowUpReport(BaseModel):
    summary: FollowUpSummary
    inactive_leads: list[InactiveLead]
