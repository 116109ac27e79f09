"""
Activity sources - each lead-linked table that carries a timestamp.

Every provider answers one question: when was the newest record of this
kind created for a lead? The resolver combines them.
"""
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.models.appointment import Appointment
from leadwatch.models.lead import Lead
from leadwatch.models.note import LeadNote
from leadwatch.models.quote import Quote


class ActivityProvider(Protocol):
    """A single activity-bearing source."""

    name: str

    async def latest_timestamp_for_lead(self, lead_id: int) -> Optional[datetime]:
        ...


class LeadRecordActivityProvider:
    """Newest ``timestamp_attr`` among rows of ``model`` linked to a lead."""

    def __init__(
        self,
        db: AsyncSession,
        model: type,
        name: str,
        timestamp_attr: str = "created_at",
        lead_attr: str = "lead_id",
    ):
        self.db = db
        self.model = model
        self.name = name
        self._timestamp_col = getattr(model, timestamp_attr)
        self._lead_col = getattr(model, lead_attr)

    async def latest_timestamp_for_lead(self, lead_id: int) -> Optional[datetime]:
        stmt = select(func.max(self._timestamp_col)).where(self._lead_col == lead_id)
        result = await self.db.execute(stmt)
        return result.scalar()

    def __repr__(self):
        return f"<LeadRecordActivityProvider {self.name}>"


def default_activity_providers(
    db: AsyncSession,
    include_lead_updates: bool = False,
) -> list[ActivityProvider]:
    """Notes, appointments and quotes; optionally the lead row's own edits."""
    providers: list[ActivityProvider] = [
        LeadRecordActivityProvider(db, LeadNote, "notes"),
        LeadRecordActivityProvider(db, Appointment, "appointments"),
        LeadRecordActivityProvider(db, Quote, "quotes"),
    ]
    if include_lead_updates:
        providers.append(
            LeadRecordActivityProvider(
                db, Lead, "lead_updates", timestamp_attr="updated_at", lead_attr="id"
            )
        )
    return providers
