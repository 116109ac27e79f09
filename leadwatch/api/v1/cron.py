"""
Scan trigger for external schedulers (cron platforms, uptime pingers).
"""
from fastapi import APIRouter, Depends

from leadwatch.api.errors import raise_for_domain_error
from leadwatch.core.deps import get_inactivity_scanner
from leadwatch.core.exceptions import FatalScanError
from leadwatch.core.security import verify_cron_secret
from leadwatch.services.inactivity_scanner import InactivityScanner

router = APIRouter(
    prefix="/cron",
    tags=["cron"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.post("/check-inactivity")
async def check_inactivity(
    scanner: InactivityScanner = Depends(get_inactivity_scanner),
):
    """Run one inactivity scan and report what it did."""
    try:
        result = await scanner.run_scan()
    except FatalScanError as e:
        raise_for_domain_error(e)

    return {"success": result.success, **result.model_dump()}
