"""Unit tests for SchoolService: dashboard rows, filtering, stats and CRUD with a mocked session."""

from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import ActionLog
from app.models.billing import BillingInfo, PaymentLog
from app.models.enums import ActionType, BillingStatus, SchoolSortField, SortOrder
from app.models.school import School
from app.schemas.school import SchoolCreate, SchoolListItem, SchoolUpdate
from app.services.school_service import SchoolService

TODAY = date(2026, 3, 1)
ADMIN = "admin@billeasy.in"


def _school(name: str, student_count=365, days_paid=None) -> School:
    """A school at 1 per student per year, so each paid unit buys one day per 365 students."""
    school = School(id=uuid4(), name=name, student_count=student_count)
    if days_paid is not None:
        school.billing_info = BillingInfo(
            id=uuid4(),
            school_id=school.id,
            quoted_price=Decimal("1"),
            advance_paid=Decimal(days_paid),
            advance_paid_date=TODAY,
            total_installments=1,
        )
    else:
        school.billing_info = None
    return school


def _row(name: str, days_remaining: int, status: BillingStatus, valid_until=None) -> SchoolListItem:
    return SchoolListItem(
        id=uuid4(),
        name=name,
        student_count=100,
        advance_paid=Decimal("0"),
        valid_until=valid_until,
        days_remaining=days_remaining,
        status=status,
    )


def _mock_db_returning(school):
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalar_one_or_none.return_value = school
    db.execute.return_value = result
    return db


def _added(db, model):
    return [c.args[0] for c in db.add.call_args_list if isinstance(c.args[0], model)]


# ---------------------------------------------------------------------------
# Dashboard rows
# ---------------------------------------------------------------------------

def test_dashboard_row_for_paid_school():
    row = SchoolService.build_dashboard_row(_school("Greenwood High", days_paid=45), TODAY)
    assert row.days_remaining == 45
    assert row.valid_until == TODAY + timedelta(days=45)
    assert row.status == BillingStatus.PAID
    assert row.quoted_price == Decimal("1")
    assert row.advance_paid == Decimal("45")


def test_dashboard_row_for_school_without_billing():
    row = SchoolService.build_dashboard_row(_school("Riverside Academy"), TODAY)
    assert row.days_remaining == 0
    assert row.valid_until is None
    assert row.status == BillingStatus.CRITICAL
    assert row.quoted_price is None
    assert row.advance_paid == Decimal("0")


def test_dashboard_row_with_unknown_student_count():
    row = SchoolService.build_dashboard_row(_school("Sunrise Public", student_count=None), TODAY)
    assert row.student_count == 0


def _tiny_price_school() -> School:
    school = _school("Hilltop Montessori", student_count=1)
    school.billing_info = BillingInfo(
        id=uuid4(),
        school_id=school.id,
        quoted_price=Decimal("0.01"),
        advance_paid=Decimal("12345"),
        advance_paid_date=TODAY,
        total_installments=1,
    )
    return school


def test_dashboard_row_with_validity_past_calendar_end():
    row = SchoolService.build_dashboard_row(_tiny_price_school(), TODAY)
    assert row.valid_until == date.max
    assert row.days_remaining == (date.max - TODAY).days
    assert row.status == BillingStatus.PAID


# ---------------------------------------------------------------------------
# filter_and_sort
# ---------------------------------------------------------------------------

@pytest.fixture
def rows():
    return [
        _row("Greenwood High", 45, BillingStatus.PAID, TODAY + timedelta(days=45)),
        _row("Riverside Academy", 15, BillingStatus.OVERDUE, TODAY + timedelta(days=15)),
        _row("Sunrise Public", 5, BillingStatus.CRITICAL, TODAY + timedelta(days=5)),
        _row("Little Flowers", 0, BillingStatus.CRITICAL, None),
    ]


def test_search_is_case_insensitive_substring(rows):
    result = SchoolService.filter_and_sort(rows, search="  HIGH ")
    assert [r.name for r in result] == ["Greenwood High"]


def test_empty_search_returns_everything(rows):
    assert len(SchoolService.filter_and_sort(rows, search="")) == 4


def test_status_filter(rows):
    result = SchoolService.filter_and_sort(rows, status=BillingStatus.CRITICAL)
    assert {r.name for r in result} == {"Sunrise Public", "Little Flowers"}


def test_search_and_status_combine(rows):
    result = SchoolService.filter_and_sort(rows, search="sun", status=BillingStatus.PAID)
    assert result == []


def test_default_sort_is_most_urgent_first(rows):
    result = SchoolService.filter_and_sort(rows)
    assert [r.days_remaining for r in result] == [0, 5, 15, 45]


def test_sort_by_name_descending(rows):
    result = SchoolService.filter_and_sort(rows, sort_by=SchoolSortField.NAME, order=SortOrder.DESC)
    assert [r.name for r in result] == [
        "Sunrise Public", "Riverside Academy", "Little Flowers", "Greenwood High",
    ]


@pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
def test_schools_without_expiry_sort_last(rows, order):
    result = SchoolService.filter_and_sort(rows, sort_by=SchoolSortField.VALID_UNTIL, order=order)
    assert result[-1].name == "Little Flowers"
    dated = [r.valid_until for r in result[:-1]]
    assert dated == sorted(dated, reverse=order == SortOrder.DESC)


# ---------------------------------------------------------------------------
# compute_stats
# ---------------------------------------------------------------------------

def test_stats_counts_pending_and_near_expiration():
    schools = [
        _school("Greenwood High", days_paid=45),
        _school("Riverside Academy", days_paid=15),
        _school("Sunrise Public", student_count=None),
    ]
    stats = SchoolService.compute_stats(schools, TODAY)

    assert stats.total_schools == 3
    assert stats.total_students == 730
    assert stats.pending_schools == 2
    assert stats.near_expiration == 2
    # Riverside owes 365 - 15; Sunrise has no billing and no students
    assert stats.total_outstanding == Decimal("350")


def test_stats_with_validity_past_calendar_end():
    stats = SchoolService.compute_stats([_tiny_price_school(), _school("Greenwood High", days_paid=5)], TODAY)
    assert stats.total_schools == 2
    assert stats.pending_schools == 1
    assert stats.near_expiration == 1


def test_stats_for_empty_system():
    stats = SchoolService.compute_stats([], TODAY)
    assert stats.total_schools == 0
    assert stats.total_outstanding == 0


# ---------------------------------------------------------------------------
# CRUD with a mocked session
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_school_without_advance_only_logs_the_addition():
    db = AsyncMock(spec=AsyncSession)
    school_in = SchoolCreate(name="Greenwood High", student_count=850)

    school = await SchoolService.create_school(db, school_in, ADMIN, today=TODAY)

    assert school.name == "Greenwood High"
    assert school.billing_info is None
    assert _added(db, School) == [school]
    assert _added(db, BillingInfo) == []
    actions = _added(db, ActionLog)
    assert [a.action_type for a in actions] == [ActionType.SCHOOL_ADDED]
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_school_with_advance_records_first_payment():
    db = AsyncMock(spec=AsyncSession)
    school_in = SchoolCreate(
        name="Greenwood High",
        student_count=100,
        quoted_price=Decimal("365"),
        advance_paid=Decimal("3650"),
    )

    school = await SchoolService.create_school(db, school_in, ADMIN, today=TODAY)

    billing = school.billing_info
    assert billing is not None
    assert billing.advance_paid == Decimal("3650")
    assert billing.advance_paid_date == TODAY
    payments = _added(db, PaymentLog)
    assert len(payments) == 1
    assert payments[0].description == "Initial advance payment"
    actions = _added(db, ActionLog)
    assert [a.action_type for a in actions] == [ActionType.SCHOOL_ADDED, ActionType.PAYMENT_ADDED]


@pytest.mark.asyncio
async def test_update_school_applies_only_given_fields():
    school = _school("Greenwood High", student_count=850)
    school.phone = "9876543210"
    db = _mock_db_returning(school)

    updated = await SchoolService.update_school(db, school.id, SchoolUpdate(student_count=900), ADMIN)

    assert updated is school
    assert school.student_count == 900
    assert school.phone == "9876543210"
    actions = _added(db, ActionLog)
    assert actions[0].action_type == ActionType.SCHOOL_UPDATED
    assert "student_count" in actions[0].description
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_missing_school_returns_none():
    db = _mock_db_returning(None)
    assert await SchoolService.update_school(db, uuid4(), SchoolUpdate(name="Nobody"), ADMIN) is None
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_school_logs_and_deletes():
    school = _school("Greenwood High", days_paid=45)
    db = _mock_db_returning(school)

    assert await SchoolService.delete_school(db, school.id, ADMIN) is True

    actions = _added(db, ActionLog)
    assert actions[0].action_type == ActionType.SCHOOL_DELETED
    assert actions[0].school_id == school.id
    db.delete.assert_awaited_once_with(school)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_missing_school_returns_false():
    db = _mock_db_returning(None)
    assert await SchoolService.delete_school(db, uuid4(), ADMIN) is False
    db.delete.assert_not_awaited()
