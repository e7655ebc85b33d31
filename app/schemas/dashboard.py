"""Dashboard schemas."""

from decimal import Decimal
from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """
    Aggregated counters for the dashboard overview cards.
    Returned by GET /api/v1/dashboard/stats.
    """

    total_schools: int = Field(..., ge=0)
    total_students: int = Field(..., ge=0)
    total_outstanding: Decimal = Field(
        ...,
        ge=0,
        description="Remaining balance summed over overdue and critical schools",
    )
    pending_schools: int = Field(
        ...,
        ge=0,
        description="Schools whose status is not paid",
    )
    near_expiration: int = Field(
        ...,
        ge=0,
        description="Schools with fewer than 30 days of validity left",
    )
