"""
Unit tests for the Celery inactivity scan task.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from leadwatch.celery.tasks import inactivity_tasks
from leadwatch.core.exceptions import FatalScanError
from leadwatch.schemas.scan import ScanError, ScanResult


@pytest.fixture
def engine(monkeypatch) -> MagicMock:
    engine = MagicMock()
    engine.dispose = AsyncMock()
    monkeypatch.setattr(inactivity_tasks, "engine", engine)

    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=MagicMock())
    session_cm.__aexit__ = AsyncMock(return_value=False)
    monkeypatch.setattr(inactivity_tasks, "AsyncSessionLocal", MagicMock(return_value=session_cm))
    return engine


def _use_scanner(monkeypatch, run_scan: AsyncMock) -> None:
    scanner = MagicMock()
    scanner.run_scan = run_scan
    monkeypatch.setattr(
        inactivity_tasks.InactivityScanner, "for_session", MagicMock(return_value=scanner)
    )


class TestCheckInactivityTask:

    def test_returns_scan_summary_and_disposes_engine(self, monkeypatch, engine):
        result = ScanResult(
            processed=2,
            tasks_created=1,
            errors=[ScanError(lead_id=7, kind="escalation", message="boom")],
        )
        _use_scanner(monkeypatch, AsyncMock(return_value=result))

        summary = inactivity_tasks.check_inactivity_task()

        assert summary["processed"] == 2
        assert summary["tasks_created"] == 1
        assert summary["errors"][0]["lead_id"] == 7
        engine.dispose.assert_awaited_once()

    def test_fatal_scan_still_disposes_engine(self, monkeypatch, engine):
        _use_scanner(monkeypatch, AsyncMock(side_effect=FatalScanError("candidates unavailable")))

        with pytest.raises(FatalScanError):
            inactivity_tasks.check_inactivity_task()

        engine.dispose.assert_awaited_once()
