"""Expiry / notification classifier.

Turns the current leave, visa and driving-licence collections into the
alert list shown in the notification centre. Pure: callers supply ``now``
and the persisted-form records, nothing here touches the database or a
clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from hrms.common.constants import (
    DATE_FORMAT,
    EXPIRY_WINDOW_DAYS,
    AlertPriority,
    AlertType,
    LeaveStatus,
)
from hrms.common.normalizer import as_datetime

UNKNOWN_EMPLOYEE = "An employee"


class Alert(BaseModel):
    """One derived notification. Never persisted."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    time: str
    type: AlertType
    link: str
    priority: AlertPriority


# ── helpers ─────────────────────────────────────────────────────────

def _first_name(record: Mapping[str, Any]) -> str:
    employee = record.get("employee") or {}
    return employee.get("first_name") or UNKNOWN_EMPLOYEE


def _status(record: Mapping[str, Any]) -> Any:
    status = record.get("status")
    return getattr(status, "value", status)


def expires_within_window(
    expiry: Any,
    now: datetime,
    days: int = EXPIRY_WINDOW_DAYS,
) -> Optional[datetime]:
    """Return the expiry moment when ``now < expiry <= now + days``, else None."""
    moment = as_datetime(expiry, now)
    if moment is None:
        return None
    if now < moment <= now + timedelta(days=days):
        return moment
    return None


# ── per-source rules ────────────────────────────────────────────────

def _leave_alerts(now: datetime, leaves: Iterable[Mapping[str, Any]]) -> list[Alert]:
    alerts = []
    for leave in leaves:
        if _status(leave) != LeaveStatus.pending.value:
            continue
        created = as_datetime(leave.get("created_at"), now) or now
        alerts.append(Alert(
            id=f"leave-{leave['id']}",
            title="New Leave Request",
            description=f"{_first_name(leave)} requested {leave.get('type') or 'leave'}",
            time=created.strftime(DATE_FORMAT),
            type=AlertType.leave,
            link="/leave-management",
            priority=AlertPriority.normal,
        ))
    return alerts


def _expiry_alerts(
    now: datetime,
    records: Iterable[Mapping[str, Any]],
    *,
    prefix: str,
    noun: str,
    link: str,
) -> list[Alert]:
    alerts = []
    for record in records:
        expiry = expires_within_window(record.get("expiry_date"), now)
        if expiry is None:
            continue
        alerts.append(Alert(
            id=f"{prefix}-{record['id']}",
            title=f"{noun} Expiring Soon",
            description=(
                f"{noun} for {_first_name(record)} expires on "
                f"{expiry.strftime(DATE_FORMAT)}"
            ),
            time="Urgent",
            type=AlertType.expiry,
            link=link,
            priority=AlertPriority.high,
        ))
    return alerts


# ── public API ──────────────────────────────────────────────────────

def classify(
    now: datetime,
    leaves: Iterable[Mapping[str, Any]],
    visas: Iterable[Mapping[str, Any]],
    licences: Iterable[Mapping[str, Any]],
) -> list[Alert]:
    """Build the alert list: high priority first, then input order.

    * pending leave request → ``leave`` / ``normal``
    * visa or licence expiring within the next 30 days → ``expiry`` / ``high``

    Already-expired documents, documents beyond the window and documents
    without a readable expiry date produce nothing.
    """
    alerts = (
        _expiry_alerts(now, visas, prefix="visa", noun="Visa", link="/visa-documents")
        + _expiry_alerts(
            now, licences, prefix="lic", noun="Licence", link="/driving-licence",
        )
        + _leave_alerts(now, leaves)
    )
    return sorted(alerts, key=lambda alert: alert.priority != AlertPriority.high)
