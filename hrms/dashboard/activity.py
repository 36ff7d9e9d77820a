"""Recent-activity synthesizer.

Merges new employees ("joined") and leave requests ("requested <type>")
into the dashboard's newest-first activity feed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from hrms.common.constants import (
    RECENT_ACTIVITY_LIMIT,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_MONTH,
    SECONDS_PER_YEAR,
    ActivityType,
)
from hrms.common.normalizer import as_datetime

# Largest unit first
_UNITS = (
    (SECONDS_PER_YEAR, "year"),
    (SECONDS_PER_MONTH, "month"),
    (SECONDS_PER_DAY, "day"),
    (SECONDS_PER_HOUR, "hour"),
    (SECONDS_PER_MINUTE, "minute"),
)


class ActivityUser(BaseModel):
    name: str
    initials: str


class Activity(BaseModel):
    id: str
    user: ActivityUser
    action: str
    type: ActivityType
    timestamp: datetime
    time: str


def time_ago(moment: datetime, now: datetime) -> str:
    """Coarse relative age: ``"3 hours ago"``; under a minute is ``"just now"``."""
    seconds = int((now - moment).total_seconds())
    for size, unit in _UNITS:
        count = seconds // size
        if count >= 1:
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


def _user(person: Mapping[str, Any]) -> ActivityUser:
    first = (person.get("first_name") or "").strip()
    last = (person.get("last_name") or "").strip()
    name = f"{first} {last}".strip() or "Unknown"
    initials = f"{first[:1]}{last[:1]}".upper() or "NA"
    return ActivityUser(name=name, initials=initials)


def synthesize(
    employees: Iterable[Mapping[str, Any]],
    leaves: Iterable[Mapping[str, Any]],
    now: datetime,
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[Activity]:
    """Newest-first feed of at most *limit* entries.

    Records without a readable ``created_at`` are skipped. Equal timestamps
    keep input order, employees before leave requests.
    """
    candidates: list[tuple[datetime, str, Mapping[str, Any], str, ActivityType]] = []

    for employee in employees:
        moment = as_datetime(employee.get("created_at"), now)
        if moment is not None:
            candidates.append(
                (moment, f"emp-{employee['id']}", employee, "joined", ActivityType.onboarding)
            )

    for leave in leaves:
        moment = as_datetime(leave.get("created_at"), now)
        if moment is not None:
            action = f"requested {leave.get('type') or 'leave'}"
            candidates.append(
                (moment, f"leave-{leave['id']}", leave.get("employee") or {}, action,
                 ActivityType.leave)
            )

    # sorted() is stable, so ties keep the order built above
    newest = sorted(candidates, key=lambda item: item[0], reverse=True)[:limit]
    return [
        Activity(
            id=activity_id,
            user=_user(person),
            action=action,
            type=activity_type,
            timestamp=moment,
            time=time_ago(moment, now),
        )
        for moment, activity_id, person, action, activity_type in newest
    ]
