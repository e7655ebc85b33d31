"""Audit trail: append-only action log plus the activity views"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.models.audit import ActionLog
from app.models.billing import PaymentLog
from app.models.enums import ActionType
from app.models.school import School
from app.schemas.billing import PaymentLogResponse
from app.schemas.logs import ActionLogResponse, PaymentLogEntry

logger = logging.getLogger(__name__)


class LogService:
    """Writes and reads the activity logs. Entries are never updated."""

    @staticmethod
    def log_action(
        db: AsyncSession,
        action_type: ActionType,
        description: str,
        performed_by: str,
        school_id: Optional[UUID] = None,
        related_record_id: Optional[UUID] = None,
    ) -> ActionLog:
        """Stage an action log entry in the caller's transaction (caller commits)."""
        entry = ActionLog(
            action_type=action_type,
            description=description,
            performed_by=performed_by,
            school_id=school_id,
            related_record_id=related_record_id,
        )
        db.add(entry)
        logger.info(
            "Action logged: %s",
            description,
            extra={"action_type": action_type.value, "performed_by": performed_by},
        )
        return entry

    @staticmethod
    async def list_action_logs(
        db: AsyncSession, page: int = 1, limit: int = 50
    ) -> Tuple[List[ActionLogResponse], int]:
        """Newest first, with the school name while the school still exists."""
        total = await db.scalar(select(func.count(ActionLog.id)))
        stmt = (
            select(ActionLog, School.name)
            .outerjoin(School, School.id == ActionLog.school_id)
            .order_by(ActionLog.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(stmt)
        entries = []
        for log, school_name in result.all():
            entry = ActionLogResponse.model_validate(log)
            entries.append(entry.model_copy(update={"school_name": school_name}))
        return entries, total or 0

    @staticmethod
    async def list_payment_logs(
        db: AsyncSession, page: int = 1, limit: int = 50
    ) -> Tuple[List[PaymentLogEntry], int]:
        """Every recorded payment, latest payment date first."""
        total = await db.scalar(select(func.count(PaymentLog.id)))
        stmt = (
            select(PaymentLog, School.name)
            .join(School, School.id == PaymentLog.school_id)
            .order_by(PaymentLog.payment_date.desc(), PaymentLog.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(stmt)
        entries = [
            PaymentLogEntry(
                **PaymentLogResponse.model_validate(log).model_dump(),
                school_name=school_name,
            )
            for log, school_name in result.all()
        ]
        return entries, total or 0
