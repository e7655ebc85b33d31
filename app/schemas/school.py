from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, model_validator
from datetime import datetime, date
from decimal import Decimal
from uuid import UUID

from app.models.enums import BillingStatus
from app.schemas.billing import BillingOverview


class SchoolBase(BaseModel):
    name: str = Field(..., min_length=3, max_length=255)
    address: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    student_count: Optional[int] = Field(None, ge=0)


class SchoolCreate(SchoolBase):
    """
    New school. When both ``quoted_price`` and a positive ``advance_paid``
    are given, the advance is recorded as the school's first payment.
    """
    quoted_price: Optional[Decimal] = Field(None, gt=0)
    advance_paid: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def _advance_needs_price(self) -> "SchoolCreate":
        if self.advance_paid > 0:
            if self.quoted_price is None:
                raise ValueError("quoted_price is required when advance_paid is given")
            if not self.student_count:
                raise ValueError("student_count is required when advance_paid is given")
        return self


class SchoolUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=255)
    address: Optional[str] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    student_count: Optional[int] = Field(None, ge=0)


class SchoolResponse(SchoolBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SchoolDetailResponse(SchoolResponse):
    billing: BillingOverview


class SchoolListItem(BaseModel):
    """One dashboard row: a school with its derived validity."""
    id: UUID
    name: str
    address: Optional[str] = None
    contact_person: Optional[str] = None
    student_count: int
    quoted_price: Optional[Decimal] = None
    advance_paid: Decimal
    valid_until: Optional[date] = None
    days_remaining: int
    status: BillingStatus
