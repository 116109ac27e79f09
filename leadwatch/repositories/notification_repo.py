"""
Notification Repository - per-recipient alert records.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from leadwatch.models.notification import Notification, NotificationType


class NotificationRepository:
    """Repository for Notification operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, notification_id: int) -> Optional[Notification]:
        stmt = (
            select(Notification)
            .options(selectinload(Notification.task))
            .where(Notification.id == notification_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_unacknowledged(
        self,
        user_id: int,
        lead_id: int,
        notification_type: NotificationType,
    ) -> Optional[Notification]:
        """An outstanding alert of ``notification_type`` for (user, lead), if any."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.lead_id == lead_id)
            .where(Notification.type == notification_type)
            .where(Notification.acknowledged == False)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, notification: Notification) -> Notification:
        self.db.add(notification)
        await self.db.flush()
        await self.db.refresh(notification)
        return notification

    def _for_user(self, stmt, user_id: int, unread_only: bool, unacknowledged_only: bool):
        stmt = stmt.where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read == False)
        if unacknowledged_only:
            stmt = stmt.where(Notification.acknowledged == False)
        return stmt

    async def get_for_user(
        self,
        user_id: int,
        unread_only: bool = False,
        unacknowledged_only: bool = False,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Notification]:
        """Unacknowledged first, unread first, newest first."""
        stmt = self._for_user(select(Notification), user_id, unread_only, unacknowledged_only)
        stmt = stmt.order_by(
            Notification.acknowledged.asc(),
            Notification.read.asc(),
            Notification.created_at.desc(),
            Notification.id.desc(),
        )
        stmt = stmt.offset(offset).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_for_user(
        self,
        user_id: int,
        unread_only: bool = False,
        unacknowledged_only: bool = False,
    ) -> int:
        stmt = self._for_user(
            select(func.count(Notification.id)), user_id, unread_only, unacknowledged_only
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def save(self, notification: Notification) -> Notification:
        await self.db.flush()
        await self.db.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: int, read_at: datetime) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read == False)
            .values(read=True, read_at=read_at)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def delete_by_id(self, notification_id: int) -> int:
        result = await self.db.execute(
            delete(Notification).where(Notification.id == notification_id)
        )
        return result.rowcount
