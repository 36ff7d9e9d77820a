"""Notification service — serves the alert list.

Alerts come from the running ``AlertPoller`` snapshot when it has
completed a refresh; otherwise they are computed for the request.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from hrms.common.constants import AlertPriority
from hrms.notifications.classifier import Alert
from hrms.notifications.poller import AlertPoller, compute_alerts
from hrms.notifications.schemas import AlertListMeta, AlertListResponse
from hrms.records.service import RecordFetchers


class NotificationService:
    """Alert list operations."""

    @staticmethod
    async def get_alerts(
        fetchers: RecordFetchers,
        poller: Optional[AlertPoller] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Sequence[Alert]:
        if poller is not None and poller.has_run:
            return poller.alerts
        return await compute_alerts(
            fetchers.fetch_leaves,
            fetchers.fetch_visas,
            fetchers.fetch_driving_licences,
            now or datetime.now(timezone.utc),
        )

    @staticmethod
    async def list_alerts(
        fetchers: RecordFetchers,
        poller: Optional[AlertPoller] = None,
    ) -> AlertListResponse:
        alerts = await NotificationService.get_alerts(fetchers, poller)
        high = sum(1 for alert in alerts if alert.priority == AlertPriority.high)
        return AlertListResponse(
            data=list(alerts),
            meta=AlertListMeta(total=len(alerts), high_priority=high),
        )

    @staticmethod
    async def count_alerts(
        fetchers: RecordFetchers,
        poller: Optional[AlertPoller] = None,
    ) -> int:
        return len(await NotificationService.get_alerts(fetchers, poller))
