"""Request validation of the billing and school schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.schemas.billing import PaymentCreate
from app.schemas.responses import PaginationMeta
from app.schemas.school import SchoolCreate, SchoolUpdate


def _payment_data(**overrides) -> dict:
    data = {
        "amount": "5000",
        "description": "Term 1 fees",
        "student_count": 120,
        "price_per_student": "350",
    }
    data.update(overrides)
    return data


def test_payment_defaults():
    payment = PaymentCreate(**_payment_data())
    assert payment.amount == Decimal("5000")
    assert payment.is_special_case is False
    assert payment.excess_student_count == 0
    assert payment.excess_days == 0
    assert payment.payment_mode is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": "0"},
        {"amount": "-10"},
        {"description": "ab"},
        {"student_count": 0},
        {"price_per_student": "0"},
        {"excess_student_count": -1},
        {"excess_days": -3},
    ],
)
def test_payment_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        PaymentCreate(**_payment_data(**overrides))


def test_school_name_length():
    with pytest.raises(ValidationError):
        SchoolCreate(name="AB")


def test_school_rejects_negative_student_count():
    with pytest.raises(ValidationError):
        SchoolCreate(name="Greenwood High", student_count=-1)


def test_school_rejects_malformed_email():
    with pytest.raises(ValidationError):
        SchoolCreate(name="Greenwood High", email="not-an-email")


def test_school_without_billing_is_valid():
    school = SchoolCreate(name="Greenwood High")
    assert school.quoted_price is None
    assert school.advance_paid == 0


def test_advance_requires_quoted_price():
    with pytest.raises(ValidationError, match="quoted_price"):
        SchoolCreate(name="Greenwood High", student_count=100, advance_paid="1000")


def test_advance_requires_student_count():
    with pytest.raises(ValidationError, match="student_count"):
        SchoolCreate(name="Greenwood High", quoted_price="365", advance_paid="1000")


def test_quoted_price_without_advance_is_allowed():
    school = SchoolCreate(name="Greenwood High", quoted_price="365")
    assert school.quoted_price == Decimal("365")


def test_update_tracks_only_given_fields():
    update = SchoolUpdate(phone="9876543210")
    assert update.model_dump(exclude_unset=True) == {"phone": "9876543210"}


@pytest.mark.parametrize(
    "total,page_size,expected_pages",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (250, 100, 3)],
)
def test_pagination_meta_total_pages(total, page_size, expected_pages):
    meta = PaginationMeta.build(page=1, page_size=page_size, total=total)
    assert meta.total_pages == expected_pages
    assert meta.total == total
