"""
KPI Service - team performance analytics for the dashboard.
Includes the overdue follow-up count per rep, measured with the same
inactivity rule as the scanner.
"""
from datetime import datetime, timedelta, UTC
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.core.config import settings
from leadwatch.core.logging import get_logger
from leadwatch.models.appointment import Appointment
from leadwatch.models.lead import LeadStatus
from leadwatch.models.user import User
from leadwatch.repositories.lead_repo import LeadRepository
from leadwatch.schemas.performance import TeamPerformanceResponse, TeamPerformanceStat
from leadwatch.schemas.token import CallerIdentity
from leadwatch.services.activity_resolver import ActivityResolver, as_utc, hours_between

logger = get_logger(__name__)


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


class KPIService:
    """Service for calculating KPIs and analytics."""

    def __init__(
        self,
        db: AsyncSession,
        resolver: ActivityResolver,
        threshold_hours: Optional[float] = None,
        lookback_days: Optional[int] = None,
    ):
        self.db = db
        self.lead_repo = LeadRepository(db)
        self.resolver = resolver
        self.threshold_hours = (
            settings.INACTIVITY_THRESHOLD_HOURS if threshold_hours is None else threshold_hours
        )
        self.lookback_days = (
            settings.REPORTING_LOOKBACK_DAYS if lookback_days is None else lookback_days
        )

    async def _count_appointments(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Appointment.id)).where(Appointment.sales_rep_id == user_id)
        )
        return result.scalar() or 0

    async def _count_overdue(self, user_id: int, now: datetime) -> int:
        """Owned non-terminal leads silent for longer than the threshold."""
        overdue = 0
        for lead_id in await self.lead_repo.get_open_lead_ids_for_owner(user_id):
            last_activity = await self.resolver.resolve_last_activity(lead_id)
            if last_activity is not None and hours_between(last_activity, now) > self.threshold_hours:
                overdue += 1
        return overdue

    async def get_team_performance(
        self,
        caller: CallerIdentity,
        now: Optional[datetime] = None,
    ) -> TeamPerformanceResponse:
        """
        Per-user lead outcomes for every user, ranked by won leads.
        """
        now = now or datetime.now(UTC)
        period_start = now - timedelta(days=self.lookback_days)

        stmt = select(User).order_by(User.id)
        result = await self.db.execute(stmt)
        users = list(result.scalars().all())

        stats: list[TeamPerformanceStat] = []
        for user in users:
            total_leads = await self.lead_repo.count_by_owner(user.id)
            won = await self.lead_repo.get_won_by_owner(user.id)
            appointment_set = await self.lead_repo.count_by_owner(
                user.id, LeadStatus.APPOINTMENT_SET
            )
            won_in_period = sum(
                1 for lead in won
                if as_utc(lead.closed_at or lead.created_at) >= period_start
            )

            stats.append(
                TeamPerformanceStat(
                    user_id=user.id,
                    user_name=user.full_name,
                    user_email=user.email,
                    user_role=user.role,
                    total_leads=total_leads,
                    won_leads=len(won),
                    win_rate=_rate(len(won), total_leads),
                    appointment_set_leads=appointment_set,
                    conversion_rate=_rate(appointment_set, total_leads),
                    total_appointments=await self._count_appointments(user.id),
                    won_in_period=won_in_period,
                    overdue_follow_ups=await self._count_overdue(user.id, now),
                )
            )

        stats.sort(key=lambda s: s.won_leads, reverse=True)
        logger.info("team_performance_computed", users=len(stats), caller_id=caller.user_id)
        return TeamPerformanceResponse(lookback_days=self.lookback_days, stats=stats)
