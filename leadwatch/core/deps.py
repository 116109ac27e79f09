"""
FastAPI dependencies for dependency injection.
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.core.config import settings
from leadwatch.core.database import get_db
from leadwatch.repositories.activity_repo import default_activity_providers
from leadwatch.repositories.lead_repo import LeadRepository
from leadwatch.repositories.notification_repo import NotificationRepository
from leadwatch.repositories.task_repo import TaskRepository
from leadwatch.repositories.user_repo import UserRepository
from leadwatch.services.activity_resolver import ActivityResolver
from leadwatch.services.escalation_service import EscalationService
from leadwatch.services.follow_up_service import FollowUpService
from leadwatch.services.inactivity_scanner import InactivityScanner
from leadwatch.services.kpi_service import KPIService


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_activity_resolver(db: DbSession) -> ActivityResolver:
    """Get ActivityResolver over the default activity providers."""
    return ActivityResolver(
        default_activity_providers(db, settings.INACTIVITY_COUNT_LEAD_UPDATES)
    )


async def get_escalation_service(db: DbSession) -> EscalationService:
    """Get EscalationService instance."""
    return EscalationService(
        TaskRepository(db), NotificationRepository(db), UserRepository(db)
    )


async def get_follow_up_service(
    db: DbSession,
    resolver: Annotated[ActivityResolver, Depends(get_activity_resolver)],
) -> FollowUpService:
    """Get FollowUpService instance."""
    return FollowUpService(LeadRepository(db), TaskRepository(db), resolver)


async def get_kpi_service(
    db: DbSession,
    resolver: Annotated[ActivityResolver, Depends(get_activity_resolver)],
) -> KPIService:
    """Get KPIService instance."""
    return KPIService(db, resolver)


async def get_inactivity_scanner(db: DbSession) -> InactivityScanner:
    """Get InactivityScanner instance."""
    return InactivityScanner.for_session(db)
