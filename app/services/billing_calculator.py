"""
Billing Calculator - pure subscription arithmetic, no I/O.

A school pays a quoted price per student per year. Whatever it has paid in
advance buys a proportional number of days from the date the advance was
last updated:

    days_of_validity = floor(advance_paid / (student_count * quoted_price / 365))

All money is handled as Decimal so results never drift from the formula.
"""

import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from app.models.enums import BillingStatus
from app.schemas.billing import BillingSummary, EffectivePayment, Validity
from app.utils.time import get_utc_today

Number = Union[int, float, Decimal]

DAYS_IN_YEAR = 365

# Strictly greater than: 31 days is paid, 30 is overdue, 11 overdue, 10 critical
PAID_THRESHOLD_DAYS = 30
OVERDUE_THRESHOLD_DAYS = 10

_SECONDS_PER_DAY = 24 * 60 * 60
_ZERO = Decimal("0")


class InvalidArgument(ValueError):
    """Raised for billing inputs that can only come from corrupt upstream data."""


def _to_decimal(name: str, value: Number) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise InvalidArgument(f"{name} must be finite, got {value!r}")
    if result < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value!r}")
    return result


def _to_count(name: str, value: Number) -> int:
    result = _to_decimal(name, value)
    if result != result.to_integral_value():
        raise InvalidArgument(f"{name} must be a whole number, got {value!r}")
    return int(result)


def classify_status(days_remaining: int) -> BillingStatus:
    if days_remaining > PAID_THRESHOLD_DAYS:
        return BillingStatus.PAID
    if days_remaining > OVERDUE_THRESHOLD_DAYS:
        return BillingStatus.OVERDUE
    return BillingStatus.CRITICAL


def compute_days_of_validity(student_count: Number, quoted_price: Number, advance_paid: Number) -> int:
    """
    Whole days of service the advance pays for.

    Zero students or a zero price means nothing is being billed, so the
    advance buys no extension (instead of dividing by zero).
    """
    students = _to_count("student_count", student_count)
    price = _to_decimal("quoted_price", quoted_price)
    paid = _to_decimal("advance_paid", advance_paid)

    total_annual_fees = students * price
    if total_annual_fees <= 0:
        return 0
    # advance / (fees / 365) without the intermediate rounding of price per day
    return int((paid * DAYS_IN_YEAR) // total_annual_fees)


def days_until(valid_until: date, today: Union[date, datetime]) -> int:
    """Calendar days from today to valid_until; partial days round up."""
    if isinstance(today, datetime):
        expiry = datetime.combine(valid_until, time.min, tzinfo=today.tzinfo)
        return math.ceil((expiry - today).total_seconds() / _SECONDS_PER_DAY)
    return (valid_until - today).days


def compute_validity(
    student_count: Number,
    quoted_price: Number,
    advance_paid: Number,
    advance_paid_date: Union[date, datetime],
    today: Optional[Union[date, datetime]] = None,
) -> Validity:
    """
    Compute expiry and status for a school's advance payment.

    Args:
        student_count: Billed students (>= 0)
        quoted_price: Price per student per year (>= 0)
        advance_paid: Cumulative advance (>= 0)
        advance_paid_date: Date the advance was last updated
        today: Reference point, defaults to the current UTC date

    Returns:
        Validity. ``days_remaining`` is negative once the subscription expired.
        Validity that would run past ``date.max`` ends on ``date.max``.

    Raises:
        InvalidArgument: On negative or non-numeric inputs
    """
    if advance_paid_date is None:
        raise InvalidArgument("advance_paid_date is required; use default_validity() when unpaid")
    if isinstance(advance_paid_date, datetime):
        advance_paid_date = advance_paid_date.date()
    if today is None:
        today = get_utc_today()

    days_of_validity = min(
        compute_days_of_validity(student_count, quoted_price, advance_paid),
        (date.max - advance_paid_date).days,
    )
    valid_until = advance_paid_date + timedelta(days=days_of_validity)
    days_remaining = days_until(valid_until, today)

    return Validity(
        days_of_validity=days_of_validity,
        days_remaining=days_remaining,
        valid_until=valid_until,
        status=classify_status(days_remaining),
    )


def default_validity() -> Validity:
    """Validity of a school that has never paid."""
    return Validity(
        days_of_validity=0,
        days_remaining=0,
        valid_until=None,
        status=BillingStatus.CRITICAL,
    )


def compute_effective_payment(
    amount: Number,
    price_per_student: Number,
    is_special_case: bool = False,
    excess_student_count: Number = 0,
    excess_days: Number = 0,
) -> EffectivePayment:
    """
    Split a payment into the part credited toward validity and the excess charge.

    For a special case the school temporarily had more students than it paid
    for; those students are charged pro rata per day and deducted:

        excess_charge = excess_students * (price_per_student / 365) * excess_days

    The credited amount never goes below zero. Non-special payments, or
    special cases missing either count, are credited in full. Values are
    exact; rounding to cents is left to whoever stores them.
    """
    amount = _to_decimal("amount", amount)
    price = _to_decimal("price_per_student", price_per_student)
    excess_students = _to_count("excess_student_count", excess_student_count or 0)
    days = _to_count("excess_days", excess_days or 0)

    if not (is_special_case and excess_students > 0 and days > 0):
        return EffectivePayment(effective_amount=amount, excess_charge=_ZERO)

    excess_charge = excess_students * price * days / DAYS_IN_YEAR
    effective_amount = max(_ZERO, amount - excess_charge)
    return EffectivePayment(effective_amount=effective_amount, excess_charge=excess_charge)


def compute_billing_summary(
    student_count: Number,
    quoted_price: Number,
    advance_paid: Number,
) -> BillingSummary:
    """Annual fees, amount paid so far and the (never negative) balance."""
    students = _to_count("student_count", student_count)
    price = _to_decimal("quoted_price", quoted_price)
    paid = _to_decimal("advance_paid", advance_paid)

    total_annual_fees = students * price
    return BillingSummary(
        total_annual_fees=total_annual_fees,
        total_paid=paid,
        remaining_balance=max(_ZERO, total_annual_fees - paid),
    )
