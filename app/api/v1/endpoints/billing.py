from typing import Any
from fastapi import APIRouter, Depends, HTTPException

from app.api import deps
from app.services import billing_calculator as calculator
from app.schemas.billing import BillingPreviewRequest, BillingPreviewResponse
from app.schemas.responses import SuccessResponse
from app.utils.time import get_utc_today

router = APIRouter()


@router.post("/preview", response_model=SuccessResponse[BillingPreviewResponse])
async def preview_billing(
    preview_in: BillingPreviewRequest,
    admin: str = Depends(deps.get_current_admin),
) -> Any:
    """
    Live validity calculation for a prospective advance; nothing is stored.
    """
    try:
        payment = calculator.compute_effective_payment(
            preview_in.advance_paid,
            preview_in.quoted_price,
            preview_in.is_special_case,
            preview_in.excess_student_count,
            preview_in.excess_days,
        )
        summary = calculator.compute_billing_summary(
            preview_in.student_count,
            preview_in.quoted_price,
            payment.effective_amount,
        )
        validity = calculator.compute_validity(
            preview_in.student_count,
            preview_in.quoted_price,
            payment.effective_amount,
            preview_in.advance_paid_date or get_utc_today(),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SuccessResponse(
        data=BillingPreviewResponse(payment=payment, summary=summary, validity=validity)
    )
