"""Periodic alert refresh.

``AlertPoller`` fetches the leave, visa and licence collections concurrently,
runs the classifier and keeps the latest alert list as an immutable
snapshot. A failed fetch contributes an empty collection for that cycle.
The FastAPI lifespan starts and stops it.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Sequence

from hrms.notifications.classifier import Alert, classify
from hrms.records.service import gather_collections

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Sequence[dict[str, Any]]]]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def compute_alerts(
    fetch_leaves: Fetcher,
    fetch_visas: Fetcher,
    fetch_licences: Fetcher,
    now: datetime,
) -> list[Alert]:
    leaves, visas, licences = await gather_collections(
        fetch_leaves, fetch_visas, fetch_licences,
    )
    return classify(now, leaves, visas, licences)


class AlertPoller:
    """Re-classify alerts every *interval* seconds until stopped."""

    def __init__(
        self,
        fetch_leaves: Fetcher,
        fetch_visas: Fetcher,
        fetch_licences: Fetcher,
        *,
        interval: float,
        clock: Clock = _utcnow,
    ) -> None:
        self._fetchers = (fetch_leaves, fetch_visas, fetch_licences)
        self.interval = interval
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._alerts: tuple[Alert, ...] = ()
        self.last_refreshed: Optional[datetime] = None

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return self._alerts

    @property
    def has_run(self) -> bool:
        return self.last_refreshed is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> tuple[Alert, ...]:
        """Fetch, classify and swap in a new snapshot."""
        now = self._clock()
        alerts = await compute_alerts(*self._fetchers, now)
        self._alerts = tuple(alerts)
        self.last_refreshed = now
        logger.debug("Alert snapshot refreshed: %d alerts", len(alerts))
        return self._alerts

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Alert refresh failed; retrying in %ss", self.interval)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="alert-poller")
        logger.info("Alert poller started (every %ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Alert poller stopped")
