"""
InactivityScanner - the batch entry point of the follow-up engine.

One call to ``run_scan`` walks every owned, non-terminal lead, resolves its
last activity and opens an escalation for leads silent for longer than the
threshold. Each lead is committed (or rolled back) on its own, so a failure
on one lead never undoes or blocks the others.

The check-then-create steps are not locked: at most one scan may run at a
time, which is the trigger's responsibility.
"""
import uuid
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leadwatch.core.config import settings
from leadwatch.core.exceptions import FatalScanError, TransientStorageError
from leadwatch.core.logging import get_logger, log_context
from leadwatch.repositories.activity_repo import default_activity_providers
from leadwatch.repositories.lead_repo import LeadRepository
from leadwatch.repositories.notification_repo import NotificationRepository
from leadwatch.repositories.task_repo import TaskRepository
from leadwatch.repositories.user_repo import UserRepository
from leadwatch.schemas.scan import EscalationOutcome, ScanError, ScanResult
from leadwatch.services.activity_resolver import ActivityResolver, hours_between
from leadwatch.services.escalation_service import EscalationService

logger = get_logger(__name__)


class InactivityScanner:
    """Stateless between runs; all idempotency lives in stored tasks/notifications."""

    def __init__(
        self,
        db: AsyncSession,
        lead_repo: LeadRepository,
        resolver: ActivityResolver,
        escalation: EscalationService,
        threshold_hours: Optional[float] = None,
    ):
        self.db = db
        self.lead_repo = lead_repo
        self.resolver = resolver
        self.escalation = escalation
        self.threshold_hours = (
            settings.INACTIVITY_THRESHOLD_HOURS if threshold_hours is None else threshold_hours
        )

    @classmethod
    def for_session(cls, db: AsyncSession, threshold_hours: Optional[float] = None) -> "InactivityScanner":
        """Wire a scanner with the default repositories and activity providers."""
        return cls(
            db=db,
            lead_repo=LeadRepository(db),
            resolver=ActivityResolver(
                default_activity_providers(db, settings.INACTIVITY_COUNT_LEAD_UPDATES)
            ),
            escalation=EscalationService(
                TaskRepository(db), NotificationRepository(db), UserRepository(db)
            ),
            threshold_hours=threshold_hours,
        )

    async def run_scan(self, now: Optional[datetime] = None) -> ScanResult:
        """
        Run one scan over all candidate leads.

        Raises:
            FatalScanError: the candidate set could not be loaded.
        """
        now = now or datetime.now(UTC)
        scan_id = uuid.uuid4().hex[:12]

        with log_context(scan_id=scan_id):
            try:
                candidates = await self.lead_repo.get_scan_candidates()
            except SQLAlchemyError as exc:
                await self.db.rollback()
                logger.error("scan_candidates_failed", error=str(exc))
                raise FatalScanError(f"Could not load scan candidates: {exc}") from exc

            logger.info(
                "scan_started",
                candidates=len(candidates),
                threshold_hours=self.threshold_hours,
            )
            result = ScanResult(processed=len(candidates))

            for lead_id, owner_id in candidates:
                try:
                    outcome = await self._process_lead(lead_id, owner_id, now)
                    await self.db.commit()
                    if outcome is not None and outcome.task_created:
                        result.tasks_created += 1
                        result.notifications_created += outcome.notifications_created
                except Exception as exc:
                    await self.db.rollback()
                    failure = TransientStorageError(lead_id, exc) if isinstance(exc, SQLAlchemyError) else exc
                    result.errors.append(
                        ScanError(lead_id=lead_id, kind=type(failure).__name__, message=str(failure))
                    )
                    logger.error("scan_lead_failed", lead_id=lead_id, error=str(failure))

            logger.info(
                "scan_completed",
                processed=result.processed,
                tasks_created=result.tasks_created,
                notifications_created=result.notifications_created,
                errors=len(result.errors),
            )
        return result

    async def _process_lead(
        self,
        lead_id: int,
        owner_id: int,
        now: datetime,
    ) -> Optional[EscalationOutcome]:
        last_activity = await self.resolver.resolve_last_activity(lead_id)
        if last_activity is None:
            # Nothing to measure from
            return None

        if hours_between(last_activity, now) <= self.threshold_hours:
            return None

        return await self.escalation.open_escalation(lead_id, owner_id)
