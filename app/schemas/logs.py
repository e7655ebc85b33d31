"""Activity log schemas."""

from typing import Optional
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from uuid import UUID

from app.models.enums import ActionType
from app.schemas.billing import PaymentLogResponse


class ActionLogResponse(BaseModel):
    id: UUID
    action_type: ActionType
    description: str
    performed_by: str
    school_id: Optional[UUID] = None
    school_name: Optional[str] = None
    related_record_id: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentLogEntry(PaymentLogResponse):
    """Payment log row joined with the paying school's name."""
    school_name: Optional[str] = None
