"""
FollowUpService - inactivity reporting for dashboards.

Everything is derived from current storage state on each call; there is no
cached aggregate to invalidate. A single ``now`` is captured per call so
every lead in one report is measured against the same instant.
"""
import math
from datetime import datetime, UTC
from typing import Optional

from leadwatch.core.config import settings
from leadwatch.core.exceptions import InvalidArgumentError
from leadwatch.models.task import TaskStatus
from leadwatch.repositories.lead_repo import LeadRepository
from leadwatch.repositories.task_repo import TaskRepository
from leadwatch.schemas.follow_up import (
    FollowUpFilters,
    FollowUpReport,
    FollowUpSummary,
    InactiveLead,
    OwnerRef,
    OwnerStats,
)
from leadwatch.schemas.notification import Pagination
from leadwatch.schemas.task import TaskCounts, TaskListResponse, TaskSummary, TaskWithActivity
from leadwatch.schemas.token import CallerIdentity
from leadwatch.services.activity_resolver import ActivityResolver, hours_between


def parse_task_status(value: Optional[str]) -> Optional[TaskStatus]:
    """Coerce a raw query value into a TaskStatus."""
    if value is None or value == "":
        return None
    try:
        return TaskStatus(value.strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise InvalidArgumentError("task_status", f"expected one of {allowed}, got {value!r}")


def validate_filters(filters: FollowUpFilters) -> None:
    for field in ("hours_min", "hours_max"):
        value = getattr(filters, field)
        if value is not None and not math.isfinite(value):
            raise InvalidArgumentError(field, "must be a finite number")
    if filters.hours_min is not None and filters.hours_min < 0:
        raise InvalidArgumentError("hours_min", "must not be negative")
    if filters.hours_max is not None and filters.hours_max < 0:
        raise InvalidArgumentError("hours_max", "must not be negative")
    if (
        filters.hours_min is not None
        and filters.hours_max is not None
        and filters.hours_max < filters.hours_min
    ):
        raise InvalidArgumentError("hours_max", "must be greater than or equal to hours_min")


class FollowUpService:
    def __init__(
        self,
        lead_repo: LeadRepository,
        task_repo: TaskRepository,
        resolver: ActivityResolver,
        threshold_hours: Optional[float] = None,
    ):
        self.lead_repo = lead_repo
        self.task_repo = task_repo
        self.resolver = resolver
        self.threshold_hours = (
            settings.INACTIVITY_THRESHOLD_HOURS if threshold_hours is None else threshold_hours
        )

    async def get_follow_up_summary(
        self,
        filters: Optional[FollowUpFilters] = None,
        now: Optional[datetime] = None,
    ) -> FollowUpReport:
        """
        Inactive leads plus per-owner rollups.

        A lead is listed when it is owned, non-terminal, has resolvable
        activity, falls inside the inclusive hours band and, if a task
        status filter is given, has an inactivity task in that status.
        """
        filters = filters or FollowUpFilters()
        validate_filters(filters)
        now = now or datetime.now(UTC)
        hours_min = self.threshold_hours if filters.hours_min is None else filters.hours_min

        leads = await self.lead_repo.get_follow_up_candidates(owner_id=filters.owner_id)

        inactive_leads: list[InactiveLead] = []
        owner_stats: dict[int, OwnerStats] = {}

        for lead in leads:
            owner = lead.assigned_to
            if owner is None:
                continue

            last_activity = await self.resolver.resolve_last_activity(lead.id)
            if last_activity is None:
                continue

            hours_inactive = hours_between(last_activity, now)
            if hours_inactive < hours_min:
                continue
            if filters.hours_max is not None and hours_inactive > filters.hours_max:
                continue

            tasks = lead.tasks
            if filters.task_status is not None:
                tasks = [t for t in tasks if t.status == filters.task_status]
                if not tasks:
                    continue

            stats = owner_stats.get(owner.id)
            if stats is None:
                stats = OwnerStats(id=owner.id, name=owner.full_name, email=owner.email)
                owner_stats[owner.id] = stats

            stats.inactive_count += 1
            stats.total_hours_inactive += hours_inactive
            if any(t.status == TaskStatus.PENDING for t in tasks):
                stats.unacknowledged_tasks += 1

            inactive_leads.append(
                InactiveLead(
                    lead_id=lead.id,
                    lead_name=lead.full_name,
                    owner=OwnerRef(id=owner.id, name=owner.full_name, email=owner.email),
                    last_activity=last_activity,
                    hours_inactive=math.floor(hours_inactive),
                    task=TaskSummary.model_validate(tasks[0]) if tasks else None,
                )
            )

        for stats in owner_stats.values():
            if stats.inactive_count:
                stats.average_hours_inactive = math.floor(
                    stats.total_hours_inactive / stats.inactive_count
                )

        return FollowUpReport(
            summary=FollowUpSummary(
                total_inactive_leads=len(inactive_leads),
                total_unacknowledged_tasks=sum(
                    1 for item in inactive_leads
                    if item.task is not None and item.task.status == TaskStatus.PENDING
                ),
                owner_stats=list(owner_stats.values()),
            ),
            inactive_leads=inactive_leads,
        )

    async def list_tasks(
        self,
        caller: CallerIdentity,
        user_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        limit: int = 50,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> TaskListResponse:
        """
        Tasks visible to ``caller`` with live inactivity figures.

        Admins see every task (optionally narrowed to ``user_id``); everyone
        else only sees their own.
        """
        if limit < 1:
            raise InvalidArgumentError("limit", "must be at least 1")
        if offset < 0:
            raise InvalidArgumentError("offset", "must not be negative")

        now = now or datetime.now(UTC)
        scope_user_id = user_id if caller.is_admin else caller.user_id

        tasks = await self.task_repo.get_all(
            user_id=scope_user_id, status=status, offset=offset, limit=limit
        )

        items: list[TaskWithActivity] = []
        for task in tasks:
            last_activity = await self.resolver.resolve_last_activity(task.lead_id)
            hours = math.floor(hours_between(last_activity, now)) if last_activity else 0
            items.append(
                TaskWithActivity(
                    **TaskSummary.model_validate(task).model_dump(),
                    lead_name=task.lead.full_name if task.lead else None,
                    owner_name=task.user.full_name if task.user else None,
                    hours_inactive=hours,
                    last_activity=last_activity,
                )
            )

        total = await self.task_repo.count(user_id=scope_user_id, status=status)
        pending = await self.task_repo.count(user_id=scope_user_id, status=TaskStatus.PENDING)
        acknowledged = await self.task_repo.count(
            user_id=scope_user_id, status=TaskStatus.ACKNOWLEDGED
        )

        return TaskListResponse(
            tasks=items,
            pagination=Pagination(total=total, limit=limit, offset=offset),
            counts=TaskCounts(pending=pending, acknowledged=acknowledged),
        )
