"""
Run one inactivity scan and exit.

For platforms that schedule plain commands (system cron, CI schedules)
instead of running the Celery beat. Exit code 1 means the scan could not
start; per-lead failures are logged and still exit 0.
"""
import asyncio
import fcntl
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

from leadwatch.core.database import AsyncSessionLocal, engine
from leadwatch.core.exceptions import FatalScanError
from leadwatch.core.logging import get_logger, setup_logging
from leadwatch.services.inactivity_scanner import InactivityScanner

logger = get_logger(__name__)

_lock_file = None


def acquire_single_instance_lock() -> bool:
    """At most one scan may run at a time."""
    global _lock_file
    lock_path = Path(__file__).parent / ".check_inactivity.lock"

    _lock_file = open(lock_path, "w")
    try:
        fcntl.flock(_lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        _lock_file.write(str(os.getpid()))
        _lock_file.flush()
        return True
    except BlockingIOError:
        return False


async def main() -> int:
    setup_logging()

    if not acquire_single_instance_lock():
        logger.error("scan_already_running")
        return 1

    try:
        async with AsyncSessionLocal() as session:
            result = await InactivityScanner.for_session(session).run_scan()
    except FatalScanError as e:
        logger.error("scan_aborted", error=str(e))
        return 1
    finally:
        await engine.dispose()

    for error in result.errors:
        logger.warning("scan_lead_error", lead_id=error.lead_id, error=str(error))
    logger.info(
        "scan_summary",
        processed=result.processed,
        tasks_created=result.tasks_created,
        notifications_created=result.notifications_created,
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
