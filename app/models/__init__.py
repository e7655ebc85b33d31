"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, AppendOnlyModel, SchoolOwnedMixin
from app.models.enums import *
from app.models.school import School
from app.models.billing import BillingInfo, PaymentLog
from app.models.audit import ActionLog


__all__ = [
    # Base classes
    "BaseModel",
    "AppendOnlyModel",
    "SchoolOwnedMixin",

    # Enums
    "BillingStatus",
    "ActionType",
    "SchoolSortField",
    "SortOrder",

    # Schools
    "School",

    # Billing
    "BillingInfo",
    "PaymentLog",

    # Audit
    "ActionLog",
]
