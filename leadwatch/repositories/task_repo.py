"""
Task Repository - follow-up task records.
"""
from typing import Optional

from sqlalchemy import select, func, delete, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from leadwatch.models.task import Task, TaskType, TaskStatus


class TaskRepository:
    """Repository for Task operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_for_lead(self, lead_id: int, task_type: TaskType) -> Optional[Task]:
        """The task of ``task_type`` open on ``lead_id``, if any."""
        stmt = (
            select(Task)
            .where(Task.lead_id == lead_id)
            .where(Task.type == task_type)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, task: Task) -> Task:
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def get_all(
        self,
        user_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Task]:
        """List tasks, PENDING first then newest first."""
        stmt = select(Task).options(selectinload(Task.lead), selectinload(Task.user))
        if user_id is not None:
            stmt = stmt.where(Task.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Task.status == status)
        pending_first = case((Task.status == TaskStatus.PENDING, 0), else_=1)
        stmt = stmt.order_by(pending_first, Task.created_at.desc(), Task.id.desc())
        stmt = stmt.offset(offset).limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(
        self,
        user_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
    ) -> int:
        stmt = select(func.count(Task.id))
        if user_id is not None:
            stmt = stmt.where(Task.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Task.status == status)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def delete_by_id(self, task_id: int) -> int:
        result = await self.db.execute(delete(Task).where(Task.id == task_id))
        return result.rowcount
