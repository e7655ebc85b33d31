from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime, date
from decimal import Decimal

from app.models.enums import BillingStatus


class Validity(BaseModel):
    """How long the current advance keeps a school's subscription alive."""
    days_of_validity: int = 0
    days_remaining: int = 0
    valid_until: Optional[date] = None
    status: BillingStatus = BillingStatus.CRITICAL

    model_config = ConfigDict(frozen=True)


class EffectivePayment(BaseModel):
    """Amount credited toward validity after the excess-student deduction."""
    effective_amount: Decimal
    excess_charge: Decimal

    model_config = ConfigDict(frozen=True)


class BillingSummary(BaseModel):
    total_annual_fees: Decimal
    total_paid: Decimal
    remaining_balance: Decimal

    model_config = ConfigDict(frozen=True)


class PaymentCreate(BaseModel):
    """Payment form submitted by the admin."""
    amount: Decimal = Field(..., gt=0, description="Amount received, recorded verbatim")
    description: str = Field(..., min_length=3)
    student_count: int = Field(..., ge=1, description="Student count at time of payment")
    price_per_student: Decimal = Field(..., gt=0, description="Price per student per year")
    payment_mode: Optional[str] = Field(None, max_length=50)
    is_special_case: bool = False
    excess_student_count: int = Field(0, ge=0)
    excess_days: int = Field(0, ge=0)


class BillingInfoResponse(BaseModel):
    id: UUID
    school_id: UUID
    quoted_price: Decimal
    advance_paid: Decimal
    advance_paid_date: Optional[date] = None
    total_installments: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentLogResponse(BaseModel):
    id: UUID
    school_id: UUID
    billing_id: Optional[UUID] = None
    amount: Decimal
    credited_amount: Decimal
    payment_date: date
    description: Optional[str] = None
    payment_mode: Optional[str] = None
    receipt_url: Optional[str] = None
    student_count: Optional[int] = None
    price_per_student: Optional[Decimal] = None
    is_special_case: bool = False
    excess_student_count: int = 0
    excess_days: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentRecordedResponse(BaseModel):
    billing_info: BillingInfoResponse
    payment: PaymentLogResponse
    excess_charge: Decimal
    validity: Validity


class BillingPreviewRequest(BaseModel):
    """Inputs of the live validity calculator shown while adding a school."""
    student_count: int = Field(..., ge=0)
    quoted_price: Decimal = Field(..., ge=0)
    advance_paid: Decimal = Field(Decimal("0"), ge=0)
    advance_paid_date: Optional[date] = None
    is_special_case: bool = False
    excess_student_count: int = Field(0, ge=0)
    excess_days: int = Field(0, ge=0)


class BillingPreviewResponse(BaseModel):
    payment: EffectivePayment
    summary: BillingSummary
    validity: Validity


class BillingOverview(BaseModel):
    """Billing card of the school detail page."""
    quoted_price: Optional[Decimal] = None
    advance_paid_date: Optional[date] = None
    summary: BillingSummary
    validity: Validity
