"""Billing Service - records payments and derives validity from stored billing"""

import uuid
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, NamedTuple, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
import logging

from app.models.billing import BillingInfo, PaymentLog
from app.models.enums import ActionType
from app.models.school import School
from app.schemas.billing import BillingOverview, PaymentCreate, Validity
from app.services import billing_calculator as calculator
from app.services.log_service import LogService
from app.utils.time import get_utc_today

logger = logging.getLogger(__name__)

# Money columns are Numeric(12, 2)
_CENT = Decimal("0.01")


class BillingConflictError(RuntimeError):
    """Another payment updated the same billing record first."""


class PaymentResult(NamedTuple):
    billing_info: BillingInfo
    payment_log: PaymentLog
    excess_charge: Decimal
    validity: Validity


class BillingService:
    """Service layer for billing records and payments"""

    @staticmethod
    def get_validity(
        school: School,
        billing_info: Optional[BillingInfo],
        today: Optional[date] = None,
    ) -> Validity:
        """Validity of a school; the unpaid defaults when it has no dated advance."""
        if billing_info is None or billing_info.advance_paid_date is None:
            return calculator.default_validity()
        return calculator.compute_validity(
            school.billable_students,
            billing_info.quoted_price,
            billing_info.advance_paid or 0,
            billing_info.advance_paid_date,
            today=today,
        )

    @staticmethod
    def get_overview(
        school: School,
        billing_info: Optional[BillingInfo],
        today: Optional[date] = None,
    ) -> BillingOverview:
        if billing_info is None:
            summary = calculator.compute_billing_summary(school.billable_students, 0, 0)
            return BillingOverview(summary=summary, validity=calculator.default_validity())

        summary = calculator.compute_billing_summary(
            school.billable_students,
            billing_info.quoted_price,
            billing_info.advance_paid or 0,
        )
        return BillingOverview(
            quoted_price=billing_info.quoted_price,
            advance_paid_date=billing_info.advance_paid_date,
            summary=summary,
            validity=BillingService.get_validity(school, billing_info, today),
        )

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        school: School,
        billing_info: Optional[BillingInfo],
        payment: PaymentCreate,
        performed_by: str,
        today: Optional[date] = None,
    ) -> PaymentResult:
        """
        Credit a payment to a school's advance and log it.

        The raw ``payment.amount`` goes into the payment log; only the
        effective amount (after any excess-student deduction), rounded to the
        cent, is added to ``advance_paid``. The contracted price changes only
        on special-case payments.

        Raises:
            InvalidArgument: On negative inputs
            BillingConflictError: If the billing record was changed or created
                concurrently
        """
        today = today or get_utc_today()
        effective = calculator.compute_effective_payment(
            payment.amount,
            payment.price_per_student,
            payment.is_special_case,
            payment.excess_student_count,
            payment.excess_days,
        )
        credited = effective.effective_amount.quantize(_CENT, rounding=ROUND_HALF_UP)
        if effective.excess_charge > 0:
            logger.info(
                "Excess charge deducted for %s",
                school.name,
                extra={
                    "school_id": str(school.id),
                    "excess_charge": str(effective.excess_charge),
                    "excess_student_count": payment.excess_student_count,
                    "excess_days": payment.excess_days,
                },
            )

        is_first_payment = billing_info is None
        if is_first_payment:
            billing_info = BillingInfo(
                id=uuid.uuid4(),
                school_id=school.id,
                school=school,
                quoted_price=payment.price_per_student,
                total_installments=1,
                advance_paid=credited,
                advance_paid_date=today,
            )
            db.add(billing_info)
        else:
            if payment.is_special_case:
                billing_info.quoted_price = payment.price_per_student
            billing_info.advance_paid = (billing_info.advance_paid or 0) + credited
            billing_info.advance_paid_date = today

        description = payment.description
        if payment.is_special_case:
            description += (
                f" (Special case: {payment.excess_student_count} excess students"
                f" for {payment.excess_days} days)"
            )

        payment_log = PaymentLog(
            id=uuid.uuid4(),
            school_id=school.id,
            billing_id=billing_info.id,
            amount=payment.amount,
            credited_amount=credited,
            payment_date=today,
            description=description,
            payment_mode=payment.payment_mode,
            student_count=payment.student_count,
            price_per_student=payment.price_per_student,
            is_special_case=payment.is_special_case,
            excess_student_count=payment.excess_student_count,
            excess_days=payment.excess_days,
        )
        db.add(payment_log)

        LogService.log_action(
            db,
            ActionType.PAYMENT_ADDED,
            f"Payment of {payment.amount} recorded for {school.name}",
            performed_by,
            school_id=school.id,
            related_record_id=payment_log.id,
        )

        try:
            await db.commit()
        except StaleDataError as e:
            await db.rollback()
            raise BillingConflictError(
                f"Billing for {school.name} was updated by another payment, please retry"
            ) from e
        except IntegrityError as e:
            await db.rollback()
            if not is_first_payment:
                raise
            # Another first payment created the school's billing record meanwhile
            raise BillingConflictError(
                f"Billing for {school.name} was created by another payment, please retry"
            ) from e

        await db.refresh(billing_info)
        validity = BillingService.get_validity(school, billing_info, today)

        logger.info(
            "Payment recorded for %s",
            school.name,
            extra={
                "school_id": str(school.id),
                "amount": str(payment.amount),
                "credited_amount": str(credited),
                "days_remaining": validity.days_remaining,
                "status": validity.status.value,
            },
        )
        return PaymentResult(billing_info, payment_log, effective.excess_charge, validity)

    @staticmethod
    async def list_payments(db: AsyncSession, school_id: UUID) -> List[PaymentLog]:
        """Payment history of one school, newest first."""
        stmt = (
            select(PaymentLog)
            .where(PaymentLog.school_id == school_id)
            .order_by(PaymentLog.payment_date.desc(), PaymentLog.created_at.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
