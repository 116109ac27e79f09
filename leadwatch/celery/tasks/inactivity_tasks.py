"""
Celery tasks for the inactivity scan.
"""
import asyncio

from leadwatch.celery.config import celery_app
from leadwatch.core.database import AsyncSessionLocal, engine
from leadwatch.core.logging import get_logger
from leadwatch.services.inactivity_scanner import InactivityScanner

logger = get_logger(__name__)


@celery_app.task
def check_inactivity_task() -> dict:
    """
    Scan all owned, open leads and escalate the ones gone quiet.

    FatalScanError propagates so the task is marked failed.
    """

    async def _scan():
        # Pooled connections are bound to this run's event loop
        try:
            async with AsyncSessionLocal() as session:
                result = await InactivityScanner.for_session(session).run_scan()
        finally:
            await engine.dispose()

        if result.errors:
            logger.warning("scan_finished_with_errors", errors=len(result.errors))
        return result.model_dump()

    return asyncio.run(_scan())
