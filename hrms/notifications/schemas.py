"""Notification Pydantic schemas for API responses."""

from pydantic import BaseModel

from hrms.notifications.classifier import Alert


class AlertListMeta(BaseModel):
    total: int
    high_priority: int


class AlertListResponse(BaseModel):
    """Current alerts, high priority first."""

    data: list[Alert]
    meta: AlertListMeta


class AlertCount(BaseModel):
    count: int


class AlertCountResponse(BaseModel):
    data: AlertCount
