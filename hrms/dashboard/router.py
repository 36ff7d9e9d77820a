"""Dashboard router — read-only endpoints for dashboard widgets."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.dashboard.schemas import DashboardSummaryResponse, RecentActivityResponse
from hrms.dashboard.service import DashboardService
from hrms.database import get_db
from hrms.dependencies import get_fetchers
from hrms.records.service import RecordFetchers

router = APIRouter()


# ── GET /summary ────────────────────────────────────────────────────

@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(db: AsyncSession = Depends(get_db)):
    """Employee, pending-approval and expiring-document counts."""
    return await DashboardService.get_summary(db)


# ── GET /recent-activity ────────────────────────────────────────────

@router.get("/recent-activity", response_model=RecentActivityResponse)
async def recent_activity(fetchers: RecordFetchers = Depends(get_fetchers)):
    """The five newest joiners and leave requests, newest first."""
    return await DashboardService.get_recent_activity(fetchers)
