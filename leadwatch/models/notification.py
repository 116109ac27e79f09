"""
Notification model - per-recipient in-app alerts.
"""
import enum
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Integer, DateTime, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead
    from leadwatch.models.task import Task


class NotificationType(str, enum.Enum):
    LEAD_INACTIVITY = "LEAD_INACTIVITY"
    ADMIN_COMMENT = "ADMIN_COMMENT"


class Notification(Base):
    """In-app notification.

    Acknowledging deletes the row, so ``acknowledged`` is False on every
    row that still exists.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[NotificationType] = mapped_column(SAEnum(NotificationType), nullable=False)
    lead_id: Mapped[int | None] = mapped_column(
        ForeignKey("leads.id", ondelete="CASCADE"), nullable=True, index=True
    )
    # A task is linked from at most one notification
    task_id: Mapped[int | None] = mapped_column(
        ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    acknowledged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    lead: Mapped["Lead | None"] = relationship("Lead")
    task: Mapped["Task | None"] = relationship("Task", back_populates="notification")

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
        Index("ix_notifications_user_acknowledged", "user_id", "acknowledged"),
        Index("ix_notifications_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Notification id={self.id} user_id={self.user_id} type={self.type.value} task_id={self.task_id}>"
