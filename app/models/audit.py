"""Audit Trail Model"""

from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import relationship

from app.models.base import AppendOnlyModel
from app.models.enums import ActionType


class ActionLog(AppendOnlyModel):
    """
    Append-only record of an administrative action.
    ``school_id`` is nulled (not cascaded) so deletion entries outlive the school.
    """
    __tablename__ = "action_logs"

    action_type = Column(
        ENUM(ActionType, name="action_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    description = Column(Text, nullable=False)
    performed_by = Column(String(255), nullable=False)
    school_id = Column(
        UUID(as_uuid=True),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    related_record_id = Column(UUID(as_uuid=True), nullable=True)

    # One-way: deleting a school leaves its entries to ON DELETE SET NULL
    school = relationship("School")

    def __repr__(self) -> str:
        return f"<ActionLog {self.action_type} by {self.performed_by}>"
