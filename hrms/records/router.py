"""Records router — CRUD + status endpoints for every HR record type.

``build_record_router`` creates the same six endpoints for one record type;
the leave, expense, payroll and asset routers additionally carry their
workflow actions. All bodies and responses are display form.
"""

import uuid
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.pagination import PaginationParams
from hrms.database import get_db
from hrms.records.schemas import (
    AssetAssign,
    ExpenseDecision,
    PayrollProcess,
    RecordListResponse,
    StatusUpdate,
)
from hrms.records.service import MODELS, RecordService


def build_record_router(entity: str) -> APIRouter:
    """Return an ``APIRouter`` with list/get/create/update/delete/status for *entity*."""
    router = APIRouter()

    @router.get("/", response_model=RecordListResponse)
    async def list_records(
        status: Optional[str] = Query(
            default=None,
            description='Display labels or persisted values, comma-separated, e.g. "Pending,Approved"',
        ),
        employee_id: Optional[uuid.UUID] = Query(default=None, alias="employeeId"),
        search: Optional[str] = Query(default=None, max_length=200),
        date_from: Optional[date] = Query(default=None, alias="dateFrom"),
        date_to: Optional[date] = Query(default=None, alias="dateTo"),
        pagination: PaginationParams = Depends(),
        db: AsyncSession = Depends(get_db),
    ):
        data, meta = await RecordService.list_records(
            db,
            entity,
            pagination,
            status=status,
            employee_id=employee_id,
            search=search,
            date_from=date_from,
            date_to=date_to,
        )
        return RecordListResponse(data=data, meta=meta)

    @router.get("/{record_id}")
    async def get_record(
        record_id: uuid.UUID,
        db: AsyncSession = Depends(get_db),
    ) -> dict[str, Any]:
        return await RecordService.get_record(db, entity, record_id)

    @router.post("/", status_code=201)
    async def create_record(
        body: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
    ) -> dict[str, Any]:
        return await RecordService.create_record(db, entity, body)

    @router.put("/{record_id}")
    async def update_record(
        record_id: uuid.UUID,
        body: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
    ) -> dict[str, Any]:
        return await RecordService.update_record(db, entity, record_id, body)

    @router.delete("/{record_id}", status_code=204)
    async def delete_record(
        record_id: uuid.UUID,
        db: AsyncSession = Depends(get_db),
    ) -> None:
        await RecordService.delete_record(db, entity, record_id)

    @router.patch("/{record_id}/status")
    async def set_status(
        record_id: uuid.UUID,
        body: StatusUpdate,
        db: AsyncSession = Depends(get_db),
    ) -> dict[str, Any]:
        return await RecordService.set_status(db, entity, record_id, body.status)

    return router


RECORD_ROUTERS: Mapping[str, APIRouter] = MappingProxyType(
    {entity: build_record_router(entity) for entity in MODELS}
)


# ── Leave actions ───────────────────────────────────────────────────

@RECORD_ROUTERS["leaves"].patch("/{record_id}/approve")
async def approve_leave(record_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await RecordService.approve_leave(db, record_id)


@RECORD_ROUTERS["leaves"].patch("/{record_id}/reject")
async def reject_leave(record_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await RecordService.reject_leave(db, record_id)


# ── Expense actions ─────────────────────────────────────────────────

@RECORD_ROUTERS["expenses"].patch("/{record_id}/approve")
async def approve_expense(
    record_id: uuid.UUID,
    body: Optional[ExpenseDecision] = None,
    db: AsyncSession = Depends(get_db),
):
    return await RecordService.approve_expense(
        db, record_id, body.approved_by if body else None,
    )


@RECORD_ROUTERS["expenses"].patch("/{record_id}/reject")
async def reject_expense(
    record_id: uuid.UUID,
    body: Optional[ExpenseDecision] = None,
    db: AsyncSession = Depends(get_db),
):
    return await RecordService.reject_expense(
        db, record_id, body.approved_by if body else None,
    )


# ── Payroll / asset actions ─────────────────────────────────────────

@RECORD_ROUTERS["payrolls"].put("/{record_id}/process")
async def process_payroll(
    record_id: uuid.UUID,
    body: Optional[PayrollProcess] = None,
    db: AsyncSession = Depends(get_db),
):
    return await RecordService.process_payroll(
        db, record_id, body.transaction_ref if body else None,
    )


@RECORD_ROUTERS["assets"].patch("/{record_id}/assign")
async def assign_asset(
    record_id: uuid.UUID,
    body: AssetAssign,
    db: AsyncSession = Depends(get_db),
):
    """Assign to an employee (``In Use``) or clear the assignment (``Available``)."""
    return await RecordService.assign_asset(db, record_id, body.assigned_to)
