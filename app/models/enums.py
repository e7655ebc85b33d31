"""Centralized Enum Definitions"""

import enum


class BillingStatus(str, enum.Enum):
    """Derived subscription status, recomputed from validity on every read"""
    PAID = "paid"
    OVERDUE = "overdue"
    CRITICAL = "critical"


class ActionType(str, enum.Enum):
    """Audit trail action kinds"""
    SCHOOL_ADDED = "school_added"
    SCHOOL_UPDATED = "school_updated"
    SCHOOL_DELETED = "school_deleted"
    PAYMENT_ADDED = "payment_added"


class SchoolSortField(str, enum.Enum):
    """Sortable columns of the dashboard school list"""
    NAME = "name"
    STUDENT_COUNT = "student_count"
    VALID_UNTIL = "valid_until"
    DAYS_REMAINING = "days_remaining"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"
