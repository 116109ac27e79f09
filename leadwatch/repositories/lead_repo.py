"""
Lead Repository - Data Access Layer for Lead model.
"""
from typing import Optional

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_loader_criteria

from leadwatch.models.lead import Lead, LeadStatus, TERMINAL_LEAD_STATUSES
from leadwatch.models.task import Task, TaskType


class LeadRepository:
    """Repository for Lead operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _owned_open_leads(self):
        return and_(
            Lead.assigned_to_id.isnot(None),
            Lead.status.notin_(list(TERMINAL_LEAD_STATUSES)),
        )

    async def get_scan_candidates(self) -> list[tuple[int, int]]:
        """
        Return ``(lead_id, owner_id)`` pairs for every owned, non-terminal lead.

        Plain tuples rather than ORM instances: the scanner commits and rolls
        back per lead, which would expire loaded objects.
        """
        stmt = (
            select(Lead.id, Lead.assigned_to_id)
            .where(self._owned_open_leads())
            .order_by(Lead.id)
        )
        result = await self.db.execute(stmt)
        return [(row.id, row.assigned_to_id) for row in result.all()]

    async def get_follow_up_candidates(
        self,
        owner_id: Optional[int] = None,
        task_type: TaskType = TaskType.LEAD_INACTIVITY,
    ) -> list[Lead]:
        """Owned, non-terminal leads with owner and tasks of ``task_type`` preloaded."""
        stmt = (
            select(Lead)
            .where(self._owned_open_leads())
            .options(
                selectinload(Lead.assigned_to),
                selectinload(Lead.tasks),
                with_loader_criteria(Task, Task.type == task_type),
            )
            .order_by(Lead.id)
        )
        if owner_id is not None:
            stmt = stmt.where(Lead.assigned_to_id == owner_id)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_open_lead_ids_for_owner(self, owner_id: int) -> list[int]:
        stmt = (
            select(Lead.id)
            .where(self._owned_open_leads())
            .where(Lead.assigned_to_id == owner_id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_by_owner(
        self,
        owner_id: int,
        status: Optional[LeadStatus] = None,
    ) -> int:
        """Count leads assigned to ``owner_id``, optionally in one status."""
        stmt = select(func.count(Lead.id)).where(Lead.assigned_to_id == owner_id)
        if status is not None:
            stmt = stmt.where(Lead.status == status)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_won_by_owner(self, owner_id: int) -> list[Lead]:
        stmt = (
            select(Lead)
            .where(Lead.assigned_to_id == owner_id)
            .where(Lead.status == LeadStatus.WON)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
