"""
Appointment model - scheduled visits for a lead.
"""
import enum
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import Integer, DateTime, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(
        ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sales_rep_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    scheduled_for: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[AppointmentStatus] = mapped_column(
        SAEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.SCHEDULED
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    lead: Mapped["Lead"] = relationship("Lead", back_populates="appointments")

    __table_args__ = (
        Index("ix_appointments_lead_created", "lead_id", "created_at"),
    )

    def __repr__(self):
        return f"<Appointment id={self.id} lead_id={self.lead_id} status={self.status.value}>"
