from typing import Any
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.services.log_service import LogService
from app.schemas.logs import ActionLogResponse, PaymentLogEntry
from app.schemas.responses import PaginatedResponse, PaginationMeta

router = APIRouter()


@router.get("/actions", response_model=PaginatedResponse[ActionLogResponse])
async def list_action_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Audit trail of administrative actions, newest first.
    """
    entries, total = await LogService.list_action_logs(db, page=page, limit=limit)
    return PaginatedResponse(data=entries, meta=PaginationMeta.build(page, limit, total))


@router.get("/payments", response_model=PaginatedResponse[PaymentLogEntry])
async def list_payment_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Every recorded payment across schools, latest first.
    """
    entries, total = await LogService.list_payment_logs(db, page=page, limit=limit)
    return PaginatedResponse(data=entries, meta=PaginationMeta.build(page, limit, total))
