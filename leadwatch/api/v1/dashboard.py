"""
Dashboard API - team performance.
"""
from fastapi import APIRouter, Depends

from leadwatch.core.deps import get_kpi_service
from leadwatch.core.security import require_role
from leadwatch.models.user import UserRole
from leadwatch.schemas.performance import TeamPerformanceResponse
from leadwatch.schemas.token import CallerIdentity
from leadwatch.services.kpi_service import KPIService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/team-performance", response_model=TeamPerformanceResponse)
async def team_performance(
    caller: CallerIdentity = Depends(require_role(UserRole.ADMIN)),
    service: KPIService = Depends(get_kpi_service),
):
    return await service.get_team_performance(caller)
