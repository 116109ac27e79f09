"""
EscalationService - owns the lifecycle of inactivity escalations.

Rules enforced here:
- At most one open task of a type per lead (check-then-create, backed by
  the ``uq_tasks_lead_type`` constraint).
- At most one unacknowledged notification of a type per (recipient, lead).
- The owner's notification links the task; supervisors get unlinked copies
  because a task may be linked from only one notification.
- Acknowledging deletes the notification and its linked task in the same
  transaction. That is the only way an escalation episode ends; renewed
  activity on the lead does not close it.
"""
from datetime import datetime, UTC
from typing import Optional

from leadwatch.core.exceptions import NotFoundError, ForbiddenError
from leadwatch.core.logging import get_logger
from leadwatch.models.notification import Notification, NotificationType
from leadwatch.models.task import Task, TaskType, TaskStatus
from leadwatch.models.user import SUPERVISORY_ROLES
from leadwatch.repositories.notification_repo import NotificationRepository
from leadwatch.repositories.task_repo import TaskRepository
from leadwatch.repositories.user_repo import UserRepository
from leadwatch.schemas.notification import (
    NotificationCounts,
    NotificationFilters,
    NotificationListResponse,
    NotificationResponse,
    Pagination,
)
from leadwatch.schemas.scan import EscalationOutcome

logger = get_logger(__name__)

# Notification type raised for each task type
ALERT_TYPE_FOR_TASK: dict[TaskType, NotificationType] = {
    TaskType.LEAD_INACTIVITY: NotificationType.LEAD_INACTIVITY,
}


class EscalationService:
    def __init__(
        self,
        task_repo: TaskRepository,
        notification_repo: NotificationRepository,
        user_repo: UserRepository,
    ):
        self.task_repo = task_repo
        self.notification_repo = notification_repo
        self.user_repo = user_repo

    # ──────────────────────────────────────────────
    # Opening an episode (scanner side)
    # ──────────────────────────────────────────────

    async def open_escalation(
        self,
        lead_id: int,
        owner_id: int,
        task_type: TaskType = TaskType.LEAD_INACTIVITY,
    ) -> EscalationOutcome:
        """
        Create the follow-up task for ``lead_id`` and fan out notifications.

        If a task of ``task_type`` already exists for the lead the episode is
        already open and nothing is written.
        """
        existing = await self.task_repo.find_for_lead(lead_id, task_type)
        if existing is not None:
            return EscalationOutcome(task_id=existing.id)

        task = await self.task_repo.create(
            Task(
                user_id=owner_id,
                lead_id=lead_id,
                type=task_type,
                status=TaskStatus.PENDING,
            )
        )
        outcome = EscalationOutcome(task_id=task.id, task_created=True)
        alert_type = ALERT_TYPE_FOR_TASK[task_type]

        if await self._notify_once(owner_id, lead_id, alert_type, task_id=task.id):
            outcome.notifications_created += 1

        supervisor_ids = await self.user_repo.get_ids_by_roles(SUPERVISORY_ROLES)
        for supervisor_id in supervisor_ids:
            if await self._notify_once(supervisor_id, lead_id, alert_type):
                outcome.notifications_created += 1

        logger.info(
            "escalation_opened",
            lead_id=lead_id,
            owner_id=owner_id,
            task_id=task.id,
            notifications_created=outcome.notifications_created,
        )
        return outcome

    async def _notify_once(
        self,
        user_id: int,
        lead_id: int,
        notification_type: NotificationType,
        task_id: Optional[int] = None,
    ) -> bool:
        """Create a notification unless the recipient already holds an open one."""
        outstanding = await self.notification_repo.find_unacknowledged(
            user_id, lead_id, notification_type
        )
        if outstanding is not None:
            return False

        await self.notification_repo.create(
            Notification(
                user_id=user_id,
                lead_id=lead_id,
                type=notification_type,
                task_id=task_id,
            )
        )
        return True

    # ──────────────────────────────────────────────
    # Notification center (recipient side)
    # ──────────────────────────────────────────────

    async def _get_owned(self, notification_id: int, caller_id: int) -> Notification:
        notification = await self.notification_repo.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        if notification.user_id != caller_id:
            raise ForbiddenError("Notification", notification_id, caller_id)
        return notification

    async def acknowledge(self, notification_id: int, caller_id: int) -> None:
        """
        Close the alert: delete the notification and its linked task, if any.

        Both deletes run in the caller's transaction and are committed together.
        """
        notification = await self._get_owned(notification_id, caller_id)
        task_id = notification.task_id

        await self.notification_repo.delete_by_id(notification_id)
        if task_id is not None:
            await self.task_repo.delete_by_id(task_id)

        logger.info(
            "notification_acknowledged",
            notification_id=notification_id,
            user_id=caller_id,
            task_id=task_id,
        )

    async def mark_read(self, notification_id: int, caller_id: int) -> Notification:
        """Set the read flag; acknowledgment and existence are untouched."""
        notification = await self._get_owned(notification_id, caller_id)
        notification.read = True
        notification.read_at = datetime.now(UTC)
        return await self.notification_repo.save(notification)

    async def mark_all_read(self, user_id: int) -> int:
        count = await self.notification_repo.mark_all_read(user_id, datetime.now(UTC))
        logger.info("notifications_marked_read", user_id=user_id, count=count)
        return count

    async def list_for_user(
        self,
        user_id: int,
        filters: Optional[NotificationFilters] = None,
    ) -> NotificationListResponse:
        """
        Notifications addressed to ``user_id``.

        ``unacknowledged_only`` is honoured as a filter even though every
        stored row is unacknowledged (acknowledging deletes the row).
        """
        filters = filters or NotificationFilters()
        notifications = await self.notification_repo.get_for_user(
            user_id,
            unread_only=filters.unread_only,
            unacknowledged_only=filters.unacknowledged_only,
            offset=filters.offset,
            limit=filters.limit,
        )
        total = await self.notification_repo.count_for_user(
            user_id,
            unread_only=filters.unread_only,
            unacknowledged_only=filters.unacknowledged_only,
        )
        unread = await self.notification_repo.count_for_user(user_id, unread_only=True)
        unacknowledged = await self.notification_repo.count_for_user(
            user_id, unacknowledged_only=True
        )
        return NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            pagination=Pagination(total=total, limit=filters.limit, offset=filters.offset),
            counts=NotificationCounts(unread=unread, unacknowledged=unacknowledged),
        )
