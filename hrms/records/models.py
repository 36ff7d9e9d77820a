"""HR record ORM models.

SQLAlchemy 2.0 async-compatible models. Columns are snake_case and enum
columns hold the lowercase persisted values from ``hrms.common.constants``.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.constants import (
    AssetStatus,
    AssetType,
    AttendanceStatus,
    BenefitStatus,
    ComplianceStatus,
    DisciplinaryStatus,
    DisciplinaryType,
    DocumentStatus,
    EmploymentStatus,
    ExpenseCategory,
    ExpenseStatus,
    LeaveStatus,
    PayrollStatus,
    ReviewStatus,
    VehicleStatus,
    VehicleType,
    VisaType,
)
from hrms.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _employee_fk(*, nullable: bool = False, ondelete: str = "CASCADE") -> Mapped:
    return mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete=ondelete),
        nullable=nullable,
    )


class RecordMixin:
    """Primary key plus created/updated timestamps shared by every record."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )


# ── Employee ────────────────────────────────────────────────────────

class Employee(RecordMixin, Base):
    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(sa.String(50))
    position: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    department: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    hire_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    salary: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    status: Mapped[EmploymentStatus] = mapped_column(
        sa.Enum(EmploymentStatus, name="employment_status"),
        default=EmploymentStatus.active,
    )

    def __repr__(self) -> str:
        return f"<Employee {self.email}>"


# ── Leave / visas / licences ────────────────────────────────────────

class LeaveRequest(RecordMixin, Base):
    __tablename__ = "leave_requests"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    type: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    days: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    status: Mapped[LeaveStatus] = mapped_column(
        sa.Enum(LeaveStatus, name="leave_status"), default=LeaveStatus.pending,
    )

    employee: Mapped[Employee] = relationship(lazy="joined")


class Visa(RecordMixin, Base):
    __tablename__ = "visas"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    type: Mapped[VisaType] = mapped_column(
        sa.Enum(VisaType, name="visa_type"), nullable=False,
    )
    visa_number: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    issue_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[DocumentStatus] = mapped_column(
        sa.Enum(DocumentStatus, name="document_status"),
        default=DocumentStatus.active,
    )

    employee: Mapped[Employee] = relationship(lazy="joined")


class DrivingLicence(RecordMixin, Base):
    __tablename__ = "driving_licences"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    licence_no: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    category: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    issue_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[DocumentStatus] = mapped_column(
        sa.Enum(DocumentStatus, name="document_status"),
        default=DocumentStatus.active,
    )

    employee: Mapped[Employee] = relationship(lazy="joined")


# ── Money ───────────────────────────────────────────────────────────

class Expense(RecordMixin, Base):
    __tablename__ = "expenses"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    category: Mapped[ExpenseCategory] = mapped_column(
        sa.Enum(ExpenseCategory, name="expense_category"), nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    receipt_url: Mapped[Optional[str]] = mapped_column(sa.String(500))
    expense_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[ExpenseStatus] = mapped_column(
        sa.Enum(ExpenseStatus, name="expense_status"),
        default=ExpenseStatus.pending,
    )
    approved_by: Mapped[Optional[uuid.UUID]] = _employee_fk(
        nullable=True, ondelete="SET NULL",
    )

    employee: Mapped[Employee] = relationship(
        foreign_keys=[employee_id], lazy="joined",
    )


class Asset(RecordMixin, Base):
    __tablename__ = "assets"

    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    serial_number: Mapped[Optional[str]] = mapped_column(
        sa.String(100), unique=True,
    )
    type: Mapped[Optional[AssetType]] = mapped_column(
        sa.Enum(AssetType, name="asset_type"),
    )
    purchase_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    value: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(10, 2))
    assigned_to: Mapped[Optional[uuid.UUID]] = _employee_fk(
        nullable=True, ondelete="SET NULL",
    )
    status: Mapped[AssetStatus] = mapped_column(
        sa.Enum(AssetStatus, name="asset_status"),
        default=AssetStatus.available,
    )

    employee: Mapped[Optional[Employee]] = relationship(lazy="joined")


class Benefit(RecordMixin, Base):
    __tablename__ = "benefits"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    years_of_service: Mapped[Decimal] = mapped_column(
        sa.Numeric(4, 2), default=0,
    )
    basic_salary: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    gratuity_amount: Mapped[Decimal] = mapped_column(sa.Numeric(15, 2), default=0)
    status: Mapped[BenefitStatus] = mapped_column(
        sa.Enum(BenefitStatus, name="benefit_status"),
        default=BenefitStatus.accruing,
    )
    last_calculated: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True),
    )

    employee: Mapped[Employee] = relationship(lazy="joined")


class Payroll(RecordMixin, Base):
    __tablename__ = "payrolls"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    month: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    bonus: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), default=0)
    deductions: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), default=0)
    tax: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), default=0)
    net_salary: Mapped[Decimal] = mapped_column(sa.Numeric(10, 2), nullable=False)
    status: Mapped[PayrollStatus] = mapped_column(
        sa.Enum(PayrollStatus, name="payroll_status"),
        default=PayrollStatus.pending,
    )
    payment_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    transaction_ref: Mapped[Optional[str]] = mapped_column(sa.String(100))

    employee: Mapped[Employee] = relationship(lazy="joined")


# ── Conduct / compliance ────────────────────────────────────────────

class DisciplinaryAction(RecordMixin, Base):
    __tablename__ = "disciplinary_actions"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    type: Mapped[DisciplinaryType] = mapped_column(
        sa.Enum(DisciplinaryType, name="disciplinary_type"), nullable=False,
    )
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    incident_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    issued_by: Mapped[Optional[uuid.UUID]] = _employee_fk(
        nullable=True, ondelete="SET NULL",
    )
    status: Mapped[DisciplinaryStatus] = mapped_column(
        sa.Enum(DisciplinaryStatus, name="disciplinary_status"),
        default=DisciplinaryStatus.active,
    )

    employee: Mapped[Employee] = relationship(
        foreign_keys=[employee_id], lazy="joined",
    )


class HealthInsurancePolicy(RecordMixin, Base):
    __tablename__ = "health_insurance_policies"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    policy_number: Mapped[str] = mapped_column(
        sa.String(100), unique=True, nullable=False,
    )
    provider_name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    plan_name: Mapped[str] = mapped_column(sa.String(100), default="Basic")
    dependents_count: Mapped[int] = mapped_column(sa.Integer, default=0)
    premium_amount: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(10, 2))
    expiry_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    status: Mapped[DocumentStatus] = mapped_column(
        sa.Enum(DocumentStatus, name="document_status"),
        default=DocumentStatus.active,
    )

    employee: Mapped[Employee] = relationship(lazy="joined")


class ComplianceAudit(RecordMixin, Base):
    __tablename__ = "compliance_audits"

    area: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    last_audit_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    next_audit_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    findings_count: Mapped[int] = mapped_column(sa.Integer, default=0)
    score: Mapped[int] = mapped_column(sa.Integer, default=0)
    status: Mapped[ComplianceStatus] = mapped_column(
        sa.Enum(ComplianceStatus, name="compliance_status"),
        default=ComplianceStatus.pending_review,
    )
    auditor_name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    report_url: Mapped[Optional[str]] = mapped_column(sa.String(500))


class PerformanceReview(RecordMixin, Base):
    __tablename__ = "performance_reviews"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    reviewer_id: Mapped[uuid.UUID] = _employee_fk(ondelete="NO ACTION")
    review_period_start: Mapped[Optional[date]] = mapped_column(sa.Date)
    review_period_end: Mapped[Optional[date]] = mapped_column(sa.Date)
    rating: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(2, 1))
    comments: Mapped[Optional[str]] = mapped_column(sa.Text)
    status: Mapped[ReviewStatus] = mapped_column(
        sa.Enum(ReviewStatus, name="review_status"),
        default=ReviewStatus.scheduled,
    )

    employee: Mapped[Employee] = relationship(
        foreign_keys=[employee_id], lazy="joined",
    )


# ── Organisation / attendance / fleet ───────────────────────────────

class Department(RecordMixin, Base):
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(sa.String(150), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.String(500))
    head: Mapped[Optional[str]] = mapped_column(sa.String(200))
    open_positions: Mapped[int] = mapped_column(sa.Integer, default=0)
    color: Mapped[str] = mapped_column(sa.String(50), default="bg-primary")

    def __repr__(self) -> str:
        return f"<Department {self.name}>"


class AttendanceRecord(RecordMixin, Base):
    __tablename__ = "attendance_records"

    employee_id: Mapped[uuid.UUID] = _employee_fk()
    attendance_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    check_in: Mapped[Optional[time]] = mapped_column(sa.Time)
    check_out: Mapped[Optional[time]] = mapped_column(sa.Time)
    status: Mapped[AttendanceStatus] = mapped_column(
        sa.Enum(AttendanceStatus, name="attendance_status"),
        default=AttendanceStatus.absent,
    )
    work_hours: Mapped[Optional[Decimal]] = mapped_column(sa.Numeric(5, 2))
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)

    employee: Mapped[Employee] = relationship(lazy="joined")


class Vehicle(RecordMixin, Base):
    __tablename__ = "vehicles"

    make: Mapped[str] = mapped_column(sa.String(100), default="Unknown")
    model: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    year: Mapped[Optional[str]] = mapped_column(sa.String(4))
    plate_number: Mapped[str] = mapped_column(
        sa.String(50), unique=True, nullable=False,
    )
    type: Mapped[VehicleType] = mapped_column(
        sa.Enum(VehicleType, name="vehicle_type"), default=VehicleType.car,
    )
    status: Mapped[VehicleStatus] = mapped_column(
        sa.Enum(VehicleStatus, name="vehicle_status"),
        default=VehicleStatus.active,
    )
    next_service: Mapped[Optional[date]] = mapped_column(sa.Date)
    assigned_driver_id: Mapped[Optional[uuid.UUID]] = _employee_fk(
        nullable=True, ondelete="SET NULL",
    )

    employee: Mapped[Optional[Employee]] = relationship(lazy="joined")
