"""Enums and constants for HRMS — persisted (lowercase) enum values."""

from __future__ import annotations

import enum


# ── Employee ────────────────────────────────────────────────────────

class EmploymentStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    terminated = "terminated"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# ── Visas / driving licences / health insurance ─────────────────────

class DocumentStatus(str, enum.Enum):
    active = "active"
    expiring_soon = "expiring_soon"
    expired = "expired"


class VisaType(str, enum.Enum):
    work = "work"
    residence = "residence"
    visit = "visit"


# ── Expenses ────────────────────────────────────────────────────────

class ExpenseCategory(str, enum.Enum):
    travel = "travel"
    meals = "meals"
    supplies = "supplies"
    internet = "internet"
    other = "other"


class ExpenseStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    paid = "paid"


# ── Assets ──────────────────────────────────────────────────────────

class AssetType(str, enum.Enum):
    electronics = "electronics"
    furniture = "furniture"
    vehicle = "vehicle"
    other = "other"


class AssetStatus(str, enum.Enum):
    available = "available"
    assigned = "assigned"
    maintenance = "maintenance"
    scrapped = "scrapped"


# ── Benefits / payroll ──────────────────────────────────────────────

class BenefitStatus(str, enum.Enum):
    accruing = "accruing"
    paid_out = "paid_out"


class PayrollStatus(str, enum.Enum):
    pending = "pending"
    processed = "processed"
    paid = "paid"


# ── Disciplinary ────────────────────────────────────────────────────

class DisciplinaryType(str, enum.Enum):
    verbal_warning = "verbal_warning"
    written_warning = "written_warning"
    final_warning = "final_warning"
    suspension = "suspension"
    termination = "termination"


class DisciplinaryStatus(str, enum.Enum):
    active = "active"
    under_review = "under_review"
    resolved = "resolved"


# ── Compliance / performance ────────────────────────────────────────

class ComplianceStatus(str, enum.Enum):
    compliant = "compliant"
    needs_improvement = "needs_improvement"
    pending_review = "pending_review"
    non_compliant = "non_compliant"


class ReviewStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    acknowledged = "acknowledged"


# ── Attendance ──────────────────────────────────────────────────────

class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    late = "late"
    half_day = "half_day"
    on_leave = "on_leave"


# ── Vehicles ────────────────────────────────────────────────────────

class VehicleType(str, enum.Enum):
    car = "car"
    truck = "truck"
    bike = "bike"
    van = "van"


class VehicleStatus(str, enum.Enum):
    active = "active"
    maintenance = "maintenance"
    out_of_service = "out_of_service"


# ── Alerts / activity ───────────────────────────────────────────────

class AlertType(str, enum.Enum):
    leave = "leave"
    expiry = "expiry"
    other = "other"


class AlertPriority(str, enum.Enum):
    high = "high"
    normal = "normal"


class ActivityType(str, enum.Enum):
    onboarding = "onboarding"
    leave = "leave"


# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%d-%b-%Y"          # 01-Jun-2024
EXPIRY_WINDOW_DAYS = 30
RECENT_ACTIVITY_LIMIT = 5
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50

# Relative-age thresholds, in seconds
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_MONTH = 2592000
SECONDS_PER_YEAR = 31536000
