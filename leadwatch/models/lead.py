"""
Lead model - a tracked sales opportunity.
"""
import enum
from typing import TYPE_CHECKING
from datetime import datetime, UTC

from sqlalchemy import String, Integer, DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.user import User
    from leadwatch.models.note import LeadNote
    from leadwatch.models.appointment import Appointment
    from leadwatch.models.quote import Quote
    from leadwatch.models.task import Task


class LeadStatus(str, enum.Enum):
    """Lead pipeline statuses."""
    NEW = "NEW"
    ASSIGNED = "ASSIGNED"
    APPOINTMENT_SET = "APPOINTMENT_SET"
    QUOTED = "QUOTED"
    WON = "WON"
    LOST = "LOST"


# Statuses that are terminal; no further activity tracking applies
TERMINAL_LEAD_STATUSES = {LeadStatus.WON, LeadStatus.LOST}


class Lead(Base):
    """Lead model.

    A lead is eligible for inactivity scanning while it has an owner
    (``assigned_to_id``) and its status is not terminal.
    """
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    status: Mapped[LeadStatus] = mapped_column(
        SAEnum(LeadStatus), nullable=False, default=LeadStatus.NEW, index=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Owner
    assigned_to_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    assigned_to: Mapped["User | None"] = relationship(
        "User", back_populates="assigned_leads", foreign_keys=[assigned_to_id]
    )
    notes: Mapped[list["LeadNote"]] = relationship(
        "LeadNote", back_populates="lead", cascade="all, delete-orphan"
    )
    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment", back_populates="lead", cascade="all, delete-orphan"
    )
    quotes: Mapped[list["Quote"]] = relationship(
        "Quote", back_populates="lead", cascade="all, delete-orphan"
    )
    tasks: Mapped[list["Task"]] = relationship(
        "Task", back_populates="lead", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Lead id={self.id} status={self.status.value} owner={self.assigned_to_id}>"
