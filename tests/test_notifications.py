"""Notification API test suite — alert list, badge count, poller snapshot.

Uses the shared conftest.py pattern with in-memory SQLite.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from hrms.notifications.poller import AlertPoller
from hrms.records.service import RecordFetchers

API = "/api/v1/notifications"


def _today():
    return datetime.now(timezone.utc).date()


# ═════════════════════════════════════════════════════════════════════
# ON-DEMAND COMPUTATION
# ═════════════════════════════════════════════════════════════════════


async def test_empty_database_has_no_alerts(client: AsyncClient):
    resp = await client.get(API)

    assert resp.status_code == 200
    assert resp.json() == {"data": [], "meta": {"total": 0, "high_priority": 0}}


async def test_alerts_from_database(
    client: AsyncClient, test_employee, make_leave, make_visa, make_licence,
):
    leave = await make_leave(test_employee)
    await make_leave(test_employee, status="approved")
    visa = await make_visa(test_employee, _today() + timedelta(days=10))
    await make_visa(test_employee, _today() + timedelta(days=90))
    await make_licence(test_employee, _today() - timedelta(days=3))

    resp = await client.get(API)
    body = resp.json()

    assert body["meta"] == {"total": 2, "high_priority": 1}
    assert [a["id"] for a in body["data"]] == [f"visa-{visa.id}", f"leave-{leave.id}"]

    expiry, request = body["data"]
    assert expiry["type"] == "expiry"
    assert expiry["priority"] == "high"
    assert expiry["time"] == "Urgent"
    assert expiry["description"].startswith("Visa for Jane expires on")
    assert request["description"] == "Jane requested Annual Leave"
    assert request["link"] == "/leave-management"


async def test_unread_count(client: AsyncClient, test_employee, make_leave, make_licence):
    await make_leave(test_employee)
    await make_licence(test_employee, _today() + timedelta(days=1))

    resp = await client.get(f"{API}/unread-count")

    assert resp.status_code == 200
    assert resp.json() == {"data": {"count": 2}}


# ═════════════════════════════════════════════════════════════════════
# POLLER SNAPSHOT
# ═════════════════════════════════════════════════════════════════════


async def test_served_from_poller_snapshot(
    app, client: AsyncClient, session_factory, test_employee, make_leave,
):
    await make_leave(test_employee)
    fetchers = RecordFetchers(session_factory)
    poller = AlertPoller(
        fetchers.fetch_leaves,
        fetchers.fetch_visas,
        fetchers.fetch_driving_licences,
        interval=60,
    )
    await poller.refresh()
    app.state.alert_poller = poller

    # Rows added after the refresh are not visible until the next cycle
    await make_leave(test_employee)

    resp = await client.get(API)
    assert resp.json()["meta"]["total"] == 1


async def test_poller_that_never_ran_is_bypassed(
    app, client: AsyncClient, session_factory, test_employee, make_leave,
):
    await make_leave(test_employee)
    fetchers = RecordFetchers(session_factory)
    app.state.alert_poller = AlertPoller(
        fetchers.fetch_leaves,
        fetchers.fetch_visas,
        fetchers.fetch_driving_licences,
        interval=60,
    )

    resp = await client.get(API)
    assert resp.json()["meta"]["total"] == 1
