"""
Pydantic schemas for team performance analytics.
"""
from typing import Optional

from pydantic import BaseModel

from leadwatch.models.user import UserRole


class TeamPerformanceStat(BaseModel):
    user_id: int
    user_name: Optional[str] = None
    user_email: str
    user_role: UserRole
    total_leads: int
    won_leads: int
    win_rate: float
    appointment_set_leads: int
    conversion_rate: float
    total_appointments: int
    won_in_period: int
    overdue_follow_ups: int


class TeamPerformanceResponse(BaseModel):
    lookback_days: int
    stats: list[TeamPerformanceStat]
