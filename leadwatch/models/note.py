"""
Lead Note model - comments left on a lead.
"""
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import Text, ForeignKey, DateTime, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead


class LeadNote(Base):
    """Note/comment attached to a lead."""

    __tablename__ = "lead_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(
        ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    lead: Mapped["Lead"] = relationship("Lead", back_populates="notes")

    __table_args__ = (
        Index("ix_lead_notes_lead_created", "lead_id", "created_at"),
    )

    def __repr__(self):
        return f"<LeadNote id={self.id} lead_id={self.lead_id}>"
