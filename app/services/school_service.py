import uuid
from operator import attrgetter
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from app.models.enums import ActionType, BillingStatus, SchoolSortField, SortOrder
from app.models.school import School
from app.schemas.billing import PaymentCreate
from app.schemas.dashboard import DashboardStats
from app.schemas.school import SchoolCreate, SchoolListItem, SchoolUpdate
from app.services.billing_service import BillingService
from app.services.log_service import LogService
from app.utils.time import get_utc_today

logger = logging.getLogger(__name__)

# Dashboard "near expiration" card counts schools strictly below this
NEAR_EXPIRATION_DAYS = 30


def _sort_key(sort_by: SchoolSortField):
    if sort_by == SchoolSortField.NAME:
        return lambda row: row.name.lower()
    return attrgetter(sort_by.value)


class SchoolService:
    """Service layer for School operations"""

    @staticmethod
    async def get_school_by_id(db: AsyncSession, school_id: UUID) -> Optional[School]:
        result = await db.execute(
            select(School)
            .options(selectinload(School.billing_info))
            .where(School.id == school_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_schools(db: AsyncSession) -> List[School]:
        result = await db.execute(
            select(School).options(selectinload(School.billing_info)).order_by(School.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_school(
        db: AsyncSession,
        school_in: SchoolCreate,
        performed_by: str,
        today: Optional[date] = None,
    ) -> School:
        """
        Create a school. An advance given at creation is recorded as the
        school's first payment so it goes through the same crediting rules.
        """
        school = School(
            id=uuid.uuid4(),
            name=school_in.name,
            address=school_in.address,
            contact_person=school_in.contact_person,
            email=school_in.email,
            phone=school_in.phone,
            student_count=school_in.student_count,
            billing_info=None,
        )
        db.add(school)
        LogService.log_action(
            db,
            ActionType.SCHOOL_ADDED,
            f"Added school: {school.name}",
            performed_by,
            school_id=school.id,
        )

        if school_in.quoted_price is not None and school_in.advance_paid > 0:
            await BillingService.record_payment(
                db,
                school,
                None,
                PaymentCreate(
                    amount=school_in.advance_paid,
                    description="Initial advance payment",
                    student_count=school_in.student_count,
                    price_per_student=school_in.quoted_price,
                ),
                performed_by,
                today=today,
            )
        else:
            await db.commit()

        logger.info("School created", extra={"school_id": str(school.id)})
        return school

    @staticmethod
    async def update_school(
        db: AsyncSession,
        school_id: UUID,
        school_update: SchoolUpdate,
        performed_by: str,
    ) -> Optional[School]:
        school = await SchoolService.get_school_by_id(db, school_id)
        if not school:
            return None

        update_data = school_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(school, field, value)

        if update_data:
            LogService.log_action(
                db,
                ActionType.SCHOOL_UPDATED,
                f"Updated school: {school.name} ({', '.join(sorted(update_data))})",
                performed_by,
                school_id=school.id,
            )

        await db.commit()
        return school

    @staticmethod
    async def delete_school(db: AsyncSession, school_id: UUID, performed_by: str) -> bool:
        """
        Delete a school with its billing record and payment history.
        The deletion entry stays in the action log with its school link nulled.
        """
        school = await SchoolService.get_school_by_id(db, school_id)
        if not school:
            return False

        LogService.log_action(
            db,
            ActionType.SCHOOL_DELETED,
            f"Deleted school: {school.name}",
            performed_by,
            school_id=school.id,
        )
        # Insert the entry before the school row goes; ON DELETE SET NULL then unlinks it
        await db.flush()
        # billing_info is loaded and deleted by the ORM cascade; payment logs by ON DELETE CASCADE
        await db.delete(school)
        await db.commit()
        logger.info("School deleted", extra={"school_id": str(school_id)})
        return True

    @staticmethod
    def build_dashboard_row(school: School, today: Optional[date] = None) -> SchoolListItem:
        billing = school.billing_info
        validity = BillingService.get_validity(school, billing, today)
        return SchoolListItem(
            id=school.id,
            name=school.name,
            address=school.address,
            contact_person=school.contact_person,
            student_count=school.billable_students,
            quoted_price=billing.quoted_price if billing else None,
            advance_paid=(billing.advance_paid or Decimal("0")) if billing else Decimal("0"),
            valid_until=validity.valid_until,
            days_remaining=validity.days_remaining,
            status=validity.status,
        )

    @staticmethod
    def filter_and_sort(
        rows: Iterable[SchoolListItem],
        search: Optional[str] = None,
        status: Optional[BillingStatus] = None,
        sort_by: SchoolSortField = SchoolSortField.DAYS_REMAINING,
        order: SortOrder = SortOrder.ASC,
    ) -> List[SchoolListItem]:
        """Dashboard search (name, case-insensitive), status filter and sort."""
        needle = (search or "").strip().lower()
        selected = [
            row for row in rows
            if needle in row.name.lower() and (status is None or row.status == status)
        ]

        key = _sort_key(sort_by)

        # Schools never paid have no expiry; keep them last in either direction
        with_value = [row for row in selected if key(row) is not None]
        without_value = [row for row in selected if key(row) is None]
        with_value.sort(key=key, reverse=order == SortOrder.DESC)
        return with_value + without_value

    @staticmethod
    async def list_dashboard(
        db: AsyncSession,
        search: Optional[str] = None,
        status: Optional[BillingStatus] = None,
        sort_by: SchoolSortField = SchoolSortField.DAYS_REMAINING,
        order: SortOrder = SortOrder.ASC,
        today: Optional[date] = None,
    ) -> List[SchoolListItem]:
        today = today or get_utc_today()
        schools = await SchoolService.get_schools(db)
        rows = [SchoolService.build_dashboard_row(s, today) for s in schools]
        return SchoolService.filter_and_sort(rows, search, status, sort_by, order)

    @staticmethod
    def compute_stats(schools: Iterable[School], today: Optional[date] = None) -> DashboardStats:
        today = today or get_utc_today()
        total_schools = 0
        total_students = 0
        total_outstanding = Decimal("0")
        pending = 0
        near_expiration = 0

        for school in schools:
            total_schools += 1
            total_students += school.billable_students
            overview = BillingService.get_overview(school, school.billing_info, today)
            if overview.validity.status != BillingStatus.PAID:
                pending += 1
                total_outstanding += overview.summary.remaining_balance
            if overview.validity.days_remaining < NEAR_EXPIRATION_DAYS:
                near_expiration += 1

        return DashboardStats(
            total_schools=total_schools,
            total_students=total_students,
            total_outstanding=total_outstanding,
            pending_schools=pending,
            near_expiration=near_expiration,
        )

    @staticmethod
    async def get_stats(db: AsyncSession, today: Optional[date] = None) -> DashboardStats:
        """Aggregated counters for the dashboard overview cards."""
        schools = await SchoolService.get_schools(db)
        return SchoolService.compute_stats(schools, today)
