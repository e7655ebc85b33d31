from typing import Any, List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.models.enums import BillingStatus, SchoolSortField, SortOrder
from app.models.school import School
from app.services.billing_service import BillingService, BillingConflictError
from app.services.school_service import SchoolService
from app.schemas.billing import (
    BillingInfoResponse,
    PaymentCreate,
    PaymentLogResponse,
    PaymentRecordedResponse,
)
from app.schemas.school import (
    SchoolCreate,
    SchoolDetailResponse,
    SchoolListItem,
    SchoolResponse,
    SchoolUpdate,
)
from app.schemas.responses import SuccessResponse, PaginatedResponse, PaginationMeta

router = APIRouter()


def _detail(school: School) -> SchoolDetailResponse:
    return SchoolDetailResponse(
        **SchoolResponse.model_validate(school).model_dump(),
        billing=BillingService.get_overview(school, school.billing_info),
    )


async def _get_school_or_404(db: AsyncSession, school_id: UUID) -> School:
    school = await SchoolService.get_school_by_id(db, school_id)
    if not school:
        raise HTTPException(status_code=404, detail="School not found")
    return school


@router.get("", response_model=PaginatedResponse[SchoolListItem])
async def list_schools(
    search: Optional[str] = None,
    status_filter: Optional[Literal["all", "paid", "overdue", "critical"]] = Query(None, alias="status"),
    sort_by: SchoolSortField = SchoolSortField.DAYS_REMAINING,
    order: SortOrder = SortOrder.ASC,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Dashboard list: every school with its validity and status.
    """
    rows = await SchoolService.list_dashboard(
        db,
        search=search,
        status=None if status_filter in (None, "all") else BillingStatus(status_filter),
        sort_by=sort_by,
        order=order,
    )
    start = (page - 1) * limit
    return PaginatedResponse(
        data=rows[start:start + limit],
        meta=PaginationMeta.build(page, limit, len(rows)),
    )


@router.post("", response_model=SuccessResponse[SchoolDetailResponse], status_code=status.HTTP_201_CREATED)
async def create_school(
    school_in: SchoolCreate,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Register a school, optionally with its first advance payment.
    """
    try:
        school = await SchoolService.create_school(db, school_in, performed_by=admin)
    except BillingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SuccessResponse(
        data=_detail(school),
        message=f"{school.name} has been added to the system"
    )


@router.get("/{school_id}", response_model=SuccessResponse[SchoolDetailResponse])
async def get_school(
    school_id: UUID,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    School details with billing summary and validity.
    """
    school = await _get_school_or_404(db, school_id)
    return SuccessResponse(data=_detail(school))


@router.put("/{school_id}", response_model=SuccessResponse[SchoolDetailResponse])
async def update_school(
    school_id: UUID,
    school_in: SchoolUpdate,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Update contact details or student count.
    """
    school = await SchoolService.update_school(db, school_id, school_in, performed_by=admin)
    if not school:
        raise HTTPException(status_code=404, detail="School not found")

    return SuccessResponse(data=_detail(school), message="School updated successfully")


@router.delete("/{school_id}", response_model=SuccessResponse)
async def delete_school(
    school_id: UUID,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Permanently delete a school and all associated payment records.
    """
    deleted = await SchoolService.delete_school(db, school_id, performed_by=admin)
    if not deleted:
        raise HTTPException(status_code=404, detail="School not found")

    return SuccessResponse(data={"id": str(school_id)}, message="School deleted successfully")


@router.get("/{school_id}/payments", response_model=SuccessResponse[List[PaymentLogResponse]])
async def list_school_payments(
    school_id: UUID,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Payment history of a school, newest first.
    """
    await _get_school_or_404(db, school_id)
    payments = await BillingService.list_payments(db, school_id)
    return SuccessResponse(data=[PaymentLogResponse.model_validate(p) for p in payments])


@router.post("/{school_id}/payments", response_model=SuccessResponse[PaymentRecordedResponse])
async def record_payment(
    school_id: UUID,
    payment_in: PaymentCreate,
    admin: str = Depends(deps.get_current_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Record a payment and return the refreshed billing record and validity.
    """
    school = await _get_school_or_404(db, school_id)
    try:
        result = await BillingService.record_payment(
            db, school, school.billing_info, payment_in, performed_by=admin
        )
    except BillingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    message = f"{payment_in.amount} has been added to {school.name}'s account"
    if result.excess_charge > 0:
        message += (
            f"; {result.excess_charge:.2f} was deducted as excess charges for"
            f" {payment_in.excess_student_count} additional students for"
            f" {payment_in.excess_days} days"
        )

    return SuccessResponse(
        data=PaymentRecordedResponse(
            billing_info=BillingInfoResponse.model_validate(result.billing_info),
            payment=PaymentLogResponse.model_validate(result.payment_log),
            excess_charge=result.excess_charge,
            validity=result.validity,
        ),
        message=message,
    )
