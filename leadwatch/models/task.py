"""
Task model - a pending follow-up obligation for a lead owner.
"""
import enum
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import Integer, DateTime, ForeignKey, Enum as SAEnum, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead
    from leadwatch.models.notification import Notification
    from leadwatch.models.user import User


class TaskType(str, enum.Enum):
    """Task types. Only inactivity follow-ups are produced today."""
    LEAD_INACTIVITY = "LEAD_INACTIVITY"


class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"


class Task(Base):
    """Follow-up task.

    At most one task of a given type exists per lead; the row is deleted
    together with its linked notification when that notification is
    acknowledged.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    lead_id: Mapped[int] = mapped_column(
        ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[TaskType] = mapped_column(SAEnum(TaskType), nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        SAEnum(TaskStatus), nullable=False, default=TaskStatus.PENDING
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    acknowledged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    lead: Mapped["Lead"] = relationship("Lead", back_populates="tasks")
    user: Mapped["User"] = relationship("User")
    notification: Mapped["Notification | None"] = relationship(
        "Notification", back_populates="task", uselist=False, passive_deletes=True
    )

    __table_args__ = (
        UniqueConstraint("lead_id", "type", name="uq_tasks_lead_type"),
        Index("ix_tasks_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<Task id={self.id} lead_id={self.lead_id} type={self.type.value} status={self.status.value}>"
