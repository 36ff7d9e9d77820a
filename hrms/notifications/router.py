"""Notification endpoints — alert list and badge count."""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from hrms.common.rate_limit import limiter
from hrms.dependencies import get_alert_poller, get_fetchers
from hrms.notifications.poller import AlertPoller
from hrms.notifications.schemas import (
    AlertCount,
    AlertCountResponse,
    AlertListResponse,
)
from hrms.notifications.service import NotificationService
from hrms.records.service import RecordFetchers

router = APIRouter(prefix="", tags=["notifications"])


# ── GET / — current alerts ──────────────────────────────────────────

@router.get("", response_model=AlertListResponse)
@limiter.limit("60/minute")
async def list_notifications(
    request: Request,
    fetchers: RecordFetchers = Depends(get_fetchers),
    poller: Optional[AlertPoller] = Depends(get_alert_poller),
):
    """Pending leave requests and documents expiring in the next 30 days."""
    return await NotificationService.list_alerts(fetchers, poller)


# ── GET /unread-count — badge count ─────────────────────────────────

@router.get("/unread-count", response_model=AlertCountResponse)
@limiter.limit("60/minute")
async def unread_count(
    request: Request,
    fetchers: RecordFetchers = Depends(get_fetchers),
    poller: Optional[AlertPoller] = Depends(get_alert_poller),
):
    count = await NotificationService.count_alerts(fetchers, poller)
    return AlertCountResponse(data=AlertCount(count=count))
