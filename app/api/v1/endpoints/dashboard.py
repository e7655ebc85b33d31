from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.services.school_service import SchoolService
from app.schemas.dashboard import DashboardStats
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/stats", response_model=SuccessResponse[DashboardStats])
async def get_dashboard_stats(
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Totals for the overview cards (schools, students, outstanding, near expiration).
    """
    stats = await SchoolService.get_stats(db)
    return SuccessResponse(data=stats)
