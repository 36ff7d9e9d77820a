"""Dashboard service — activity feed and headline counts.

All methods are static async, following the project convention.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import (
    EXPIRY_WINDOW_DAYS,
    RECENT_ACTIVITY_LIMIT,
    EmploymentStatus,
    ExpenseStatus,
    LeaveStatus,
)
from hrms.dashboard.activity import synthesize
from hrms.dashboard.schemas import DashboardSummaryResponse, RecentActivityResponse
from hrms.records.models import DrivingLicence, Employee, Expense, LeaveRequest, Visa
from hrms.records.service import RecordFetchers, gather_collections


class DashboardService:
    """Async dashboard queries."""

    # ═════════════════════════════════════════════════════════════════
    # GET /recent-activity
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def get_recent_activity(
        fetchers: RecordFetchers,
        *,
        now: Optional[datetime] = None,
        limit: int = RECENT_ACTIVITY_LIMIT,
    ) -> RecentActivityResponse:
        employees, leaves = await gather_collections(
            fetchers.fetch_employees, fetchers.fetch_leaves,
        )
        activities = synthesize(
            employees, leaves, now or datetime.now(timezone.utc), limit=limit,
        )
        return RecentActivityResponse(limit=limit, data=activities)

    # ═════════════════════════════════════════════════════════════════
    # GET /summary
    # ═════════════════════════════════════════════════════════════════

    @staticmethod
    async def get_summary(
        db: AsyncSession,
        *,
        today: Optional[date] = None,
    ) -> DashboardSummaryResponse:
        """Counts at DB level; expiring documents use the alert window."""
        today = today or datetime.now(timezone.utc).date()
        window_end = today + timedelta(days=EXPIRY_WINDOW_DAYS)

        async def count(stmt) -> int:
            return (await db.execute(stmt)).scalar_one()

        total = await count(select(func.count(Employee.id)))
        active = await count(
            select(func.count(Employee.id))
            .where(Employee.status == EmploymentStatus.active)
        )
        pending_leave = await count(
            select(func.count(LeaveRequest.id))
            .where(LeaveRequest.status == LeaveStatus.pending)
        )
        pending_expenses = await count(
            select(func.count(Expense.id))
            .where(Expense.status == ExpenseStatus.pending)
        )
        expiring = 0
        for model in (Visa, DrivingLicence):
            expiring += await count(
                select(func.count(model.id)).where(
                    model.expiry_date > today,
                    model.expiry_date <= window_end,
                )
            )

        return DashboardSummaryResponse(
            total_employees=total,
            active_employees=active,
            pending_leave_requests=pending_leave,
            pending_expenses=pending_expenses,
            expiring_documents=expiring,
        )
