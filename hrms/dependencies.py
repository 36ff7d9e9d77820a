"""Shared FastAPI dependencies."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hrms.database import get_session_factory
from hrms.notifications.poller import AlertPoller
from hrms.records.service import RecordFetchers


def get_fetchers(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> RecordFetchers:
    """Collection fetchers, one session per fetch."""
    return RecordFetchers(session_factory)


def get_alert_poller(request: Request) -> Optional[AlertPoller]:
    """The poller started by the app lifespan, if any."""
    return getattr(request.app.state, "alert_poller", None)
