"""Dashboard Pydantic schemas for API responses."""

from pydantic import BaseModel, Field

from hrms.dashboard.activity import Activity


class RecentActivityResponse(BaseModel):
    """Newest-first activity feed."""

    limit: int
    data: list[Activity]


class DashboardSummaryResponse(BaseModel):
    """Headline counts for the dashboard stat cards."""

    total_employees: int = Field(..., ge=0)
    active_employees: int = Field(..., ge=0)
    pending_leave_requests: int = Field(..., ge=0)
    pending_expenses: int = Field(..., ge=0)
    expiring_documents: int = Field(
        ..., ge=0, description="Visas and licences expiring in the next 30 days",
    )
