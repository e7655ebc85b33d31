"""School Model"""

from sqlalchemy import Column, String, Text, Integer, CheckConstraint
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class School(BaseModel):
    """
    A customer school billed per enrolled student.
    Deleting a school removes its billing record and payment history.
    """
    __tablename__ = "schools"
    __table_args__ = (
        CheckConstraint("student_count IS NULL OR student_count >= 0", name="ck_schools_student_count"),
    )

    name = Column(String(255), nullable=False, index=True)

    # Contact
    address = Column(Text, nullable=True)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # NULL means unknown and is billed as zero students
    student_count = Column(Integer, nullable=True)

    # Relationships
    billing_info = relationship(
        "BillingInfo",
        back_populates="school",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    payment_logs = relationship(
        "PaymentLog",
        back_populates="school",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PaymentLog.payment_date.desc()",
    )

    @property
    def billable_students(self) -> int:
        return self.student_count or 0

    def __repr__(self) -> str:
        return f"<School {self.name}>"
