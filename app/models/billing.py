"""Billing Models: per-school billing record and payment history"""

from sqlalchemy import (
    Column, Date, Numeric, Integer, Boolean, Text, String, ForeignKey, CheckConstraint
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, AppendOnlyModel, SchoolOwnedMixin


class BillingInfo(BaseModel):
    """
    Contracted price and cumulative advance for one school.

    Created on the first payment and updated on every later one.
    ``version`` guards the read-modify-write of ``advance_paid``: an UPDATE
    only applies if nobody else bumped the version in between.
    """
    __tablename__ = "billing_info"
    __table_args__ = (
        CheckConstraint("quoted_price >= 0", name="ck_billing_info_quoted_price"),
        CheckConstraint("advance_paid >= 0", name="ck_billing_info_advance_paid"),
    )

    # One billing record per school
    school_id = Column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    quoted_price = Column(Numeric(12, 2), nullable=False)
    advance_paid = Column(Numeric(12, 2), nullable=False, default=0)
    advance_paid_date = Column(Date, nullable=True)
    total_installments = Column(Integer, nullable=False, default=1)
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    school = relationship("School", back_populates="billing_info")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<BillingInfo {self.school_id} - {self.advance_paid}>"


class PaymentLog(AppendOnlyModel, SchoolOwnedMixin):
    """
    One recorded payment. ``amount`` is what the school paid, verbatim;
    ``credited_amount`` is what was added to the advance after any
    excess-student deduction.
    """
    __tablename__ = "payment_logs"

    billing_id = Column(
        UUID(as_uuid=True),
        ForeignKey("billing_info.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    credited_amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    payment_mode = Column(String(50), nullable=True)
    receipt_url = Column(Text, nullable=True)

    # Snapshot at time of payment
    student_count = Column(Integer, nullable=True)
    price_per_student = Column(Numeric(12, 2), nullable=True)

    # Special case: excess students charged pro rata
    is_special_case = Column(Boolean, nullable=False, default=False)
    excess_student_count = Column(Integer, nullable=False, default=0)
    excess_days = Column(Integer, nullable=False, default=0)

    # Relationships
    school = relationship("School", back_populates="payment_logs")

    def __repr__(self) -> str:
        return f"<PaymentLog {self.amount} on {self.payment_date}>"
