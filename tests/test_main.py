"""Application factory tests — health check and poller lifespan."""

from __future__ import annotations

from httpx import AsyncClient

from hrms.config import settings
from hrms.main import create_app


async def test_health_check(client: AsyncClient):
    resp = await client.get("/api/v1/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.json()["environment"] == "testing"


async def test_lifespan_without_polling_leaves_no_poller():
    app = create_app()
    async with app.router.lifespan_context(app):
        assert app.state.alert_poller is None


async def test_lifespan_starts_and_stops_poller(monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_POLL_SECONDS", 3600)
    app = create_app()

    async with app.router.lifespan_context(app):
        poller = app.state.alert_poller
        assert poller is not None
        assert poller.running
        assert poller.interval == 3600

    assert not poller.running
