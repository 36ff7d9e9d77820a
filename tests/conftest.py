"""Shared test fixtures — async DB, client, record factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Configure settings before any module touches pydantic-settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["NOTIFICATION_POLL_SECONDS"] = "0"
os.environ.setdefault("LOG_LEVEL", "warning")

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hrms.common.rate_limit import limiter
from hrms.database import Base, get_db, get_session_factory
from hrms.main import create_app
from hrms.records.models import (
    DrivingLicence,
    Employee,
    LeaveRequest,
    Visa,
)

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Clear slowapi's in-memory counters between tests."""
    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def _override_get_session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionFactory


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependencies overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_session_factory] = _override_get_session_factory
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    return TestSessionFactory


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    email: str | None = None,
    first_name: str = "Test",
    last_name: str = "User",
    status: str = "active",
    created_at: datetime | None = None,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name=last_name,
        email=email or f"{uuid.uuid4().hex[:8]}@hrms.test",
        position="Engineer",
        department="Engineering",
        hire_date=date(2024, 1, 15),
        salary=Decimal("5000.00"),
        status=status,
        created_at=created_at or datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def make_employee(db):
    """Insert an employee; keyword arguments override the defaults."""

    async def _factory(**kwargs) -> Employee:
        employee = Employee(**_make_employee(**kwargs))
        db.add(employee)
        await db.commit()
        return employee

    return _factory


@pytest.fixture
def make_leave(db):
    async def _factory(employee: Employee, **kwargs) -> LeaveRequest:
        values = dict(
            employee_id=employee.id,
            type="Annual Leave",
            start_date=date(2024, 7, 1),
            end_date=date(2024, 7, 5),
            days=5,
            status="pending",
        )
        values.update(kwargs)
        leave = LeaveRequest(**values)
        db.add(leave)
        await db.commit()
        return leave

    return _factory


@pytest.fixture
def make_visa(db):
    async def _factory(employee: Employee, expiry_date: date, **kwargs) -> Visa:
        values = dict(
            employee_id=employee.id,
            type="work",
            visa_number=f"V-{uuid.uuid4().hex[:8]}",
            issue_date=date(2022, 1, 1),
            expiry_date=expiry_date,
        )
        values.update(kwargs)
        visa = Visa(**values)
        db.add(visa)
        await db.commit()
        return visa

    return _factory


@pytest.fixture
def make_licence(db):
    async def _factory(employee: Employee, expiry_date: date, **kwargs) -> DrivingLicence:
        values = dict(
            employee_id=employee.id,
            licence_no=f"DL-{uuid.uuid4().hex[:8]}",
            category="B",
            issue_date=date(2020, 1, 1),
            expiry_date=expiry_date,
        )
        values.update(kwargs)
        licence = DrivingLicence(**values)
        db.add(licence)
        await db.commit()
        return licence

    return _factory


@pytest.fixture
async def test_employee(make_employee) -> Employee:
    """An active employee, Jane Doe."""
    return await make_employee(first_name="Jane", last_name="Doe", email="jane.doe@hrms.test")
