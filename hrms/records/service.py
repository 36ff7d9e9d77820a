"""Records service layer — generic CRUD + workflow actions for HR records.

Every public method speaks *display form*: request bodies are run through
``to_persisted`` and coerced to column types, results come back through
``to_display``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hrms.common.constants import (
    AssetStatus,
    ExpenseStatus,
    LeaveStatus,
    PayrollStatus,
)
from hrms.common.exceptions import (
    ConflictError,
    NotFoundException,
    UnknownEntityException,
    ValidationException,
)
from hrms.common.filters import apply_filters, apply_search, apply_sorting
from hrms.common.normalizer import parse_date, parse_number
from hrms.common.pagination import PaginationMeta, PaginationParams, paginate
from hrms.database import Base
from hrms.records.mappings import get_mapping
from hrms.records.models import (
    Asset,
    AttendanceRecord,
    Benefit,
    ComplianceAudit,
    Department,
    DisciplinaryAction,
    DrivingLicence,
    Employee,
    Expense,
    HealthInsurancePolicy,
    LeaveRequest,
    Payroll,
    PerformanceReview,
    Vehicle,
    Visa,
)

logger = logging.getLogger(__name__)

MODELS: Mapping[str, type[Base]] = MappingProxyType({
    "employees": Employee,
    "leaves": LeaveRequest,
    "visas": Visa,
    "driving-licences": DrivingLicence,
    "expenses": Expense,
    "assets": Asset,
    "benefits": Benefit,
    "payrolls": Payroll,
    "disciplinary": DisciplinaryAction,
    "health-insurance": HealthInsurancePolicy,
    "compliance": ComplianceAudit,
    "performance": PerformanceReview,
    "departments": Department,
    "attendance": AttendanceRecord,
    "vehicles": Vehicle,
})

SEARCH_COLUMNS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "employees": ("first_name", "last_name", "email", "department", "position"),
    "assets": ("name", "serial_number"),
    "compliance": ("area", "auditor_name"),
    "health-insurance": ("policy_number", "provider_name"),
    "departments": ("name", "head"),
    "vehicles": ("plate_number", "make", "model"),
})

# Column behind the dateFrom / dateTo list filters
DATE_COLUMNS: Mapping[str, str] = MappingProxyType({
    "leaves": "start_date",
    "visas": "expiry_date",
    "driving-licences": "expiry_date",
    "expenses": "expense_date",
    "health-insurance": "expiry_date",
    "disciplinary": "incident_date",
    "attendance": "attendance_date",
    "vehicles": "next_service",
})

# Server-managed columns never taken from request bodies
_READ_ONLY = frozenset({"id", "created_at", "updated_at"})


def get_model(entity: str) -> type[Base]:
    try:
        return MODELS[entity]
    except KeyError:
        raise UnknownEntityException(entity) from None


# ── Row / value conversion ──────────────────────────────────────────

def row_to_dict(row: Base) -> dict[str, Any]:
    """Persisted-form dict of a row, plus a brief of the owning employee."""
    state = sa.inspect(row)
    data = {attr.key: getattr(row, attr.key) for attr in state.mapper.column_attrs}

    if "employee" in state.mapper.relationships and "employee" not in state.unloaded:
        owner = row.employee
        if owner is not None:
            data["employee"] = {
                "id": owner.id,
                "first_name": owner.first_name,
                "last_name": owner.last_name,
                "email": owner.email,
            }
    return data


def _coerce_value(column: sa.Column, value: Any) -> Any:
    """Convert a JSON-ish value to what *column* stores. Raises ValueError."""
    if value is None or value == "":
        return None

    col_type = column.type
    if isinstance(col_type, sa.Enum):
        return value
    if isinstance(col_type, sa.Uuid):
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    if isinstance(col_type, sa.DateTime):
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError("Invalid datetime.")
        if not isinstance(parsed, datetime):
            parsed = datetime.combine(parsed, time.min, tzinfo=timezone.utc)
        return parsed
    if isinstance(col_type, sa.Time):
        if isinstance(value, time):
            return value
        try:
            return time.fromisoformat(str(value))
        except ValueError:
            raise ValueError("Invalid time.") from None
    if isinstance(col_type, sa.Date):
        parsed = parse_date(value)
        if parsed is None:
            raise ValueError("Invalid date.")
        return parsed.date() if isinstance(parsed, datetime) else parsed
    if isinstance(col_type, sa.Integer):
        return int(parse_number(value))
    if isinstance(col_type, sa.Numeric):
        return Decimal(str(parse_number(value)))
    if isinstance(col_type, sa.String):
        return str(value)
    return value


def _to_columns(
    entity: str,
    model: type[Base],
    body: Mapping[str, Any],
) -> dict[str, Any]:
    """Display-form body → column values, collecting per-field errors."""
    mapping = get_mapping(entity)
    columns = model.__table__.columns
    values: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}

    for field, value in mapping.to_persisted(body).items():
        if field in _READ_ONLY or field not in columns:
            continue
        try:
            values[field] = _coerce_value(columns[field], value)
        except ValueError as exc:
            errors.setdefault(mapping.display_name(field), []).append(str(exc))

    if errors:
        raise ValidationException(errors)
    return values


def _missing_required(
    entity: str,
    model: type[Base],
    values: Mapping[str, Any],
) -> dict[str, list[str]]:
    mapping = get_mapping(entity)
    missing: dict[str, list[str]] = {}
    for column in model.__table__.columns:
        if column.key in _READ_ONLY or column.nullable or column.default is not None:
            continue
        if values.get(column.key) is None:
            missing[mapping.display_name(column.key)] = ["Field required."]
    return missing


class RecordService:
    """Business logic shared by every record type."""

    # ── Internal helpers ──────────────────────────────────────────────

    @staticmethod
    async def _load(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
    ) -> Base:
        model = get_model(entity)
        result = await db.execute(select(model).where(model.id == record_id))
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundException(model.__name__, str(record_id))
        return row

    @staticmethod
    async def _check_unique(
        db: AsyncSession,
        entity: str,
        values: Mapping[str, Any],
        *,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        model = get_model(entity)
        for column in model.__table__.columns:
            if not column.unique or values.get(column.key) is None:
                continue
            stmt = select(model.id).where(column == values[column.key])
            if exclude_id is not None:
                stmt = stmt.where(model.id != exclude_id)
            if (await db.execute(stmt)).first() is not None:
                raise ConflictError(
                    get_mapping(entity).display_name(column.key),
                    values[column.key],
                )

    @staticmethod
    async def _save(db: AsyncSession, entity: str, row: Base) -> dict[str, Any]:
        await db.flush()
        await db.refresh(row)
        return get_mapping(entity).to_display(row_to_dict(row))

    # ── Read ──────────────────────────────────────────────────────────

    @staticmethod
    async def list_records(
        db: AsyncSession,
        entity: str,
        params: PaginationParams,
        *,
        status: Optional[str] = None,
        employee_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> tuple[list[dict[str, Any]], PaginationMeta]:
        """Paginated display-form list, newest first unless *sort* says otherwise."""
        model = get_model(entity)
        mapping = get_mapping(entity)

        filters: dict[str, Any] = {"employee_id": employee_id}
        if status:
            table = mapping.enums.get("status")
            labels = [s.strip() for s in status.split(",") if s.strip()]
            # Unknown labels filter as-is (and match nothing)
            filters["status__in"] = [
                table.values.get(label, label) if table else label for label in labels
            ] or None
        date_column = DATE_COLUMNS.get(entity)
        if date_column:
            filters[f"{date_column}__from"] = date_from
            filters[f"{date_column}__to"] = date_to

        stmt = apply_filters(select(model), model, filters)
        stmt = apply_search(stmt, model, search, SEARCH_COLUMNS.get(entity, ()))

        sort = None
        if params.sort:
            prefix = "-" if params.sort.startswith("-") else ""
            sort = prefix + mapping.persisted_name(params.sort.lstrip("-"))
        stmt = apply_sorting(stmt, model, sort, default="-created_at")

        rows, meta = await paginate(db, stmt, params)
        return [mapping.to_display(row_to_dict(row)) for row in rows], meta

    @staticmethod
    async def get_record(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
    ) -> dict[str, Any]:
        row = await RecordService._load(db, entity, record_id)
        return get_mapping(entity).to_display(row_to_dict(row))

    # ── Create / update / delete ─────────────────────────────────────

    @staticmethod
    async def create_record(
        db: AsyncSession,
        entity: str,
        body: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Create a record from a display-form body."""
        model = get_model(entity)
        values = _to_columns(entity, model, body)

        missing = _missing_required(entity, model, values)
        if missing:
            raise ValidationException(missing)
        await RecordService._check_unique(db, entity, values)

        row = model(**values)
        db.add(row)
        created = await RecordService._save(db, entity, row)
        logger.info("Created %s %s", entity, row.id)
        return created

    @staticmethod
    async def update_record(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
        body: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Apply the fields present in *body*; absent fields are left alone."""
        model = get_model(entity)
        row = await RecordService._load(db, entity, record_id)
        values = _to_columns(entity, model, body)

        columns = model.__table__.columns
        missing = {
            get_mapping(entity).display_name(field): ["Field required."]
            for field, value in values.items()
            if value is None and not columns[field].nullable
        }
        if missing:
            raise ValidationException(missing)
        await RecordService._check_unique(db, entity, values, exclude_id=record_id)

        for field, value in values.items():
            setattr(row, field, value)
        return await RecordService._save(db, entity, row)

    @staticmethod
    async def delete_record(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
    ) -> None:
        row = await RecordService._load(db, entity, record_id)
        await db.delete(row)
        await db.flush()
        logger.info("Deleted %s %s", entity, record_id)

    @staticmethod
    async def set_status(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
        status: str,
    ) -> dict[str, Any]:
        """Set the status from a display label (or persisted value)."""
        model = get_model(entity)
        if "status" not in model.__table__.columns:
            raise ValidationException({"status": [f"{model.__name__} has no status."]})
        row = await RecordService._load(db, entity, record_id)
        row.status = get_mapping(entity).status_value(status)
        return await RecordService._save(db, entity, row)

    # ── Workflow actions ─────────────────────────────────────────────

    @staticmethod
    async def _transition(
        db: AsyncSession,
        entity: str,
        record_id: uuid.UUID,
        *,
        allowed_from: tuple[str, ...],
        to: str,
        **changes: Any,
    ) -> dict[str, Any]:
        row = await RecordService._load(db, entity, record_id)
        current = getattr(row.status, "value", row.status)
        if current not in allowed_from:
            mapping = get_mapping(entity)
            raise ValidationException({
                "status": [
                    f"Cannot change status from '{mapping.status_label(current)}' "
                    f"to '{mapping.status_label(to)}'."
                ],
            })
        row.status = to
        for field, value in changes.items():
            setattr(row, field, value)
        logger.info("%s %s: %s -> %s", entity, record_id, current, to)
        return await RecordService._save(db, entity, row)

    @staticmethod
    async def approve_leave(db: AsyncSession, leave_id: uuid.UUID) -> dict[str, Any]:
        return await RecordService._transition(
            db, "leaves", leave_id,
            allowed_from=(LeaveStatus.pending.value,),
            to=LeaveStatus.approved.value,
        )

    @staticmethod
    async def reject_leave(db: AsyncSession, leave_id: uuid.UUID) -> dict[str, Any]:
        return await RecordService._transition(
            db, "leaves", leave_id,
            allowed_from=(LeaveStatus.pending.value,),
            to=LeaveStatus.rejected.value,
        )

    @staticmethod
    async def approve_expense(
        db: AsyncSession,
        expense_id: uuid.UUID,
        approved_by: Optional[uuid.UUID] = None,
    ) -> dict[str, Any]:
        return await RecordService._transition(
            db, "expenses", expense_id,
            allowed_from=(ExpenseStatus.pending.value,),
            to=ExpenseStatus.approved.value,
            approved_by=approved_by,
        )

    @staticmethod
    async def reject_expense(
        db: AsyncSession,
        expense_id: uuid.UUID,
        approved_by: Optional[uuid.UUID] = None,
    ) -> dict[str, Any]:
        return await RecordService._transition(
            db, "expenses", expense_id,
            allowed_from=(ExpenseStatus.pending.value,),
            to=ExpenseStatus.rejected.value,
            approved_by=approved_by,
        )

    @staticmethod
    async def process_payroll(
        db: AsyncSession,
        payroll_id: uuid.UUID,
        transaction_ref: Optional[str] = None,
    ) -> dict[str, Any]:
        changes: dict[str, Any] = {"payment_date": date.today()}
        if transaction_ref:
            changes["transaction_ref"] = transaction_ref
        return await RecordService._transition(
            db, "payrolls", payroll_id,
            allowed_from=(PayrollStatus.pending.value,),
            to=PayrollStatus.processed.value,
            **changes,
        )

    @staticmethod
    async def assign_asset(
        db: AsyncSession,
        asset_id: uuid.UUID,
        employee_id: Optional[uuid.UUID],
    ) -> dict[str, Any]:
        """Assign to *employee_id* (status In Use) or clear (status Available)."""
        row = await RecordService._load(db, "assets", asset_id)
        if employee_id is not None:
            await RecordService._load(db, "employees", employee_id)
        row.assigned_to = employee_id
        row.status = (
            AssetStatus.assigned.value if employee_id else AssetStatus.available.value
        )
        return await RecordService._save(db, "assets", row)


# ── Collection fetchers ─────────────────────────────────────────────

class RecordFetchers:
    """Async fetchers returning persisted-form collections.

    Each call opens its own session, so the fetchers can run concurrently
    under ``asyncio.gather``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _fetch_all(self, entity: str) -> list[dict[str, Any]]:
        model = get_model(entity)
        async with self._session_factory() as session:
            result = await session.execute(select(model).order_by(model.created_at))
            return [row_to_dict(row) for row in result.scalars().all()]

    async def fetch_leaves(self) -> list[dict[str, Any]]:
        return await self._fetch_all("leaves")

    async def fetch_visas(self) -> list[dict[str, Any]]:
        return await self._fetch_all("visas")

    async def fetch_driving_licences(self) -> list[dict[str, Any]]:
        return await self._fetch_all("driving-licences")

    async def fetch_employees(self) -> list[dict[str, Any]]:
        return await self._fetch_all("employees")


async def gather_collections(
    *fetchers: Callable[[], Awaitable[Sequence[dict[str, Any]]]],
) -> list[Sequence[dict[str, Any]]]:
    """Run *fetchers* concurrently; a failing fetcher yields ``[]``."""
    results = await asyncio.gather(*(fetch() for fetch in fetchers), return_exceptions=True)
    collections: list[Sequence[dict[str, Any]]] = []
    for fetch, result in zip(fetchers, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.warning(
                "Fetch %s failed: %s", getattr(fetch, "__name__", fetch), result,
            )
            collections.append([])
        else:
            collections.append(result)
    return collections
