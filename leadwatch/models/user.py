"""
User model - sales reps and supervising admins.
"""
import enum
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from sqlalchemy import String, Boolean, Integer, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadwatch.core.base import Base

if TYPE_CHECKING:
    from leadwatch.models.lead import Lead


class UserRole(str, enum.Enum):
    """User roles."""
    ADMIN = "ADMIN"
    SALES_REP = "SALES_REP"


# Roles that receive a copy of every inactivity alert
SUPERVISORY_ROLES = {UserRole.ADMIN}


class User(Base):
    """Application user; leads are owned by users."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole), nullable=False, default=UserRole.SALES_REP
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    assigned_leads: Mapped[list["Lead"]] = relationship(
        "Lead", back_populates="assigned_to", foreign_keys="Lead.assigned_to_id"
    )

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role.value}>"
