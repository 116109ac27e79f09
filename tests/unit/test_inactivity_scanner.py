"""
Unit tests for the inactivity scan.
"""
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock

from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from leadwatch.core.exceptions import FatalScanError
from leadwatch.models.lead import LeadStatus
from leadwatch.models.notification import Notification, NotificationType
from leadwatch.models.task import Task, TaskStatus, TaskType
from leadwatch.services.inactivity_scanner import InactivityScanner


async def _count(db_session, model, *criteria) -> int:
    result = await db_session.execute(select(func.count(model.id)).where(*criteria))
    return result.scalar()


class FailingProvider:
    """Simulates a storage failure for one lead only."""

    name = "failing"

    def __init__(self, lead_id: int):
        self.lead_id = lead_id

    async def latest_timestamp_for_lead(self, lead_id):
        if lead_id == self.lead_id:
            raise OperationalError("SELECT max(created_at)", {}, Exception("database is locked"))
        return None


# ──────────────────────────────────────────────
# Escalation
# ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_stale_lead_gets_task_and_notifications(db_session, admin, rep, make_lead, now):
    lead = await make_lead(rep, note_at=now - timedelta(hours=72))

    scanner = InactivityScanner.for_session(db_session)
    result = await scanner.run_scan(now=now)

    assert result.success
    assert result.processed == 1
    assert result.tasks_created == 1
    assert result.notifications_created == 2

    task = (await db_session.execute(select(Task).where(Task.lead_id == lead.id))).scalar_one()
    assert task.user_id == rep.id
    assert task.type == TaskType.LEAD_INACTIVITY
    assert task.status == TaskStatus.PENDING

    owner_alert = (await db_session.execute(
        select(Notification).where(Notification.user_id == rep.id)
    )).scalar_one()
    assert owner_alert.task_id == task.id
    assert owner_alert.type == NotificationType.LEAD_INACTIVITY
    assert owner_alert.read is False

    admin_alert = (await db_session.execute(
        select(Notification).where(Notification.user_id == admin.id)
    )).scalar_one()
    assert admin_alert.task_id is None
    assert admin_alert.lead_id == lead.id


@pytest.mark.asyncio
async def test_second_scan_creates_nothing(db_session, admin, rep, make_lead, now):
    await make_lead(rep, note_at=now - timedelta(hours=72))
    scanner = InactivityScanner.for_session(db_session)

    first = await scanner.run_scan(now=now)
    second = await scanner.run_scan(now=now + timedelta(hours=1))

    assert first.tasks_created == 1
    assert second.processed == 1
    assert second.tasks_created == 0
    assert second.notifications_created == 0
    assert await _count(db_session, Task) == 1
    assert await _count(db_session, Notification) == 2


@pytest.mark.asyncio
async def test_threshold_is_strictly_greater_than(db_session, rep, make_lead, now):
    at_threshold = await make_lead(rep, note_at=now - timedelta(hours=48))
    just_over = await make_lead(rep, note_at=now - timedelta(hours=48, seconds=36))

    result = await InactivityScanner.for_session(db_session).run_scan(now=now)

    assert result.tasks_created == 1
    assert await _count(db_session, Task, Task.lead_id == at_threshold.id) == 0
    assert await _count(db_session, Task, Task.lead_id == just_over.id) == 1


@pytest.mark.asyncio
async def test_custom_threshold(db_session, rep, make_lead, now):
    await make_lead(rep, note_at=now - timedelta(hours=30))

    result = await InactivityScanner.for_session(db_session, threshold_hours=24).run_scan(now=now)

    assert result.tasks_created == 1


# ──────────────────────────────────────────────
# Skipped leads
# ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_terminal_and_unowned_leads_are_not_candidates(db_session, rep, make_lead, now):
    stale = now - timedelta(hours=200)
    await make_lead(rep, status=LeadStatus.WON, note_at=stale)
    await make_lead(rep, status=LeadStatus.LOST, note_at=stale)
    await make_lead(None, note_at=stale)

    result = await InactivityScanner.for_session(db_session).run_scan(now=now)

    assert result.processed == 0
    assert await _count(db_session, Task) == 0
    assert await _count(db_session, Notification) == 0


@pytest.mark.asyncio
async def test_lead_without_any_activity_is_skipped(db_session, rep, make_lead, now):
    await make_lead(rep)

    result = await InactivityScanner.for_session(db_session).run_scan(now=now)

    assert result.processed == 1
    assert result.tasks_created == 0
    assert result.success


@pytest.mark.asyncio
async def test_recent_activity_on_any_source_prevents_escalation(
    db_session, rep, make_lead, add_activity, now
):
    lead = await make_lead(rep, note_at=now - timedelta(hours=100))
    await add_activity(lead, "quote", now - timedelta(hours=2))

    result = await InactivityScanner.for_session(db_session).run_scan(now=now)

    assert result.tasks_created == 0


@pytest.mark.asyncio
async def test_renewed_activity_does_not_close_open_task(
    db_session, rep, make_lead, add_activity, now
):
    lead = await make_lead(rep, note_at=now - timedelta(hours=72))
    scanner = InactivityScanner.for_session(db_session)
    await scanner.run_scan(now=now)

    await add_activity(lead, "note", now + timedelta(hours=1))
    await scanner.run_scan(now=now + timedelta(hours=2))

    assert await _count(db_session, Task, Task.lead_id == lead.id) == 1


# ──────────────────────────────────────────────
# Failures
# ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_per_lead_storage_error_is_recorded_and_scan_continues(
    db_session, rep, make_lead, now
):
    broken = await make_lead(rep, note_at=now - timedelta(hours=72))
    healthy = await make_lead(rep, note_at=now - timedelta(hours=72))
    # Rollback expires loaded instances
    broken_id, healthy_id = broken.id, healthy.id

    scanner = InactivityScanner.for_session(db_session)
    scanner.resolver.register(FailingProvider(broken_id))
    result = await scanner.run_scan(now=now)

    assert result.processed == 2
    assert result.tasks_created == 1
    assert not result.success
    assert len(result.errors) == 1
    assert result.errors[0].lead_id == broken_id
    assert result.errors[0].kind == "TransientStorageError"
    assert str(broken_id) in str(result.errors[0])

    assert await _count(db_session, Task, Task.lead_id == healthy_id) == 1
    assert await _count(db_session, Task, Task.lead_id == broken_id) == 0


@pytest.mark.asyncio
async def test_candidate_fetch_failure_is_fatal(db_session, rep, make_lead, now):
    await make_lead(rep, note_at=now - timedelta(hours=72))

    scanner = InactivityScanner.for_session(db_session)
    scanner.lead_repo.get_scan_candidates = AsyncMock(
        side_effect=OperationalError("SELECT leads", {}, Exception("connection refused"))
    )

    with pytest.raises(FatalScanError):
        await scanner.run_scan(now=now)

    assert await _count(db_session, Task) == 0
