"""
Quote model - price quotes issued for a lead.
"""
import enum
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import Integer, DateTime, ForeignKey, Enum as SAEnum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead


class QuoteStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    EXPIRED = "EXPIRED"


class Quote(Base):
    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(
        ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Amount in cents
    amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[QuoteStatus] = mapped_column(
        SAEnum(QuoteStatus), nullable=False, default=QuoteStatus.DRAFT
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    lead: Mapped["Lead"] = relationship("Lead", back_populates="quotes")

    __table_args__ = (
        Index("ix_quotes_lead_created", "lead_id", "created_at"),
    )

    def __repr__(self):
        return f"<Quote id={self.id} lead_id={self.lead_id} status={self.status.value}>"
