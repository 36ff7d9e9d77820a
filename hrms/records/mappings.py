"""Per-record persisted ⇄ display tables.

Keys of ``RECORD_MAPPINGS`` double as the URL segment of each record API
(``/api/v1/<key>``). Field renames listed here are the ones the frontend
uses; every other column is converted mechanically (``expiry_date`` →
``expiryDate``).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

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
from hrms.common.exceptions import UnknownEntityException
from hrms.common.normalizer import EnumTable, RecordMapping

_DOCUMENT_STATUS = EnumTable(DocumentStatus, fallback=DocumentStatus.active)


RECORD_MAPPINGS: Mapping[str, RecordMapping] = MappingProxyType({
    "employees": RecordMapping(
        "employees",
        enums={
            "status": EnumTable(EmploymentStatus, fallback=EmploymentStatus.active),
        },
        numeric=("salary",),
    ),
    "leaves": RecordMapping(
        "leaves",
        enums={"status": EnumTable(LeaveStatus, fallback=LeaveStatus.pending)},
        numeric=("days",),
    ),
    "visas": RecordMapping(
        "visas",
        fields={"visa_number": "number"},
        enums={
            "type": EnumTable(
                VisaType,
                fallback=VisaType.work,
                overrides={
                    "work": "Work Visa",
                    "residence": "Residence Visa",
                    "visit": "Visit Visa",
                },
            ),
            "status": _DOCUMENT_STATUS,
        },
    ),
    "driving-licences": RecordMapping(
        "driving-licences",
        enums={"status": _DOCUMENT_STATUS},
    ),
    "expenses": RecordMapping(
        "expenses",
        fields={
            "expense_date": "date",
            "receipt_url": "receipt",
            "approved_by": "approvedById",
        },
        enums={
            "category": EnumTable(ExpenseCategory, fallback=ExpenseCategory.other),
            "status": EnumTable(ExpenseStatus, fallback=ExpenseStatus.pending),
        },
        numeric=("amount",),
    ),
    "assets": RecordMapping(
        "assets",
        fields={
            "serial_number": "assetTag",
            "type": "category",
            "assigned_to": "assignedToId",
        },
        enums={
            "type": EnumTable(AssetType, fallback=AssetType.other),
            "status": EnumTable(
                AssetStatus,
                fallback=AssetStatus.available,
                overrides={"assigned": "In Use", "scrapped": "Retired"},
            ),
        },
        numeric=("value",),
    ),
    "benefits": RecordMapping(
        "benefits",
        enums={"status": EnumTable(BenefitStatus, fallback=BenefitStatus.accruing)},
        numeric=("years_of_service", "basic_salary", "gratuity_amount"),
    ),
    "payrolls": RecordMapping(
        "payrolls",
        enums={"status": EnumTable(PayrollStatus, fallback=PayrollStatus.pending)},
        numeric=("base_salary", "bonus", "deductions", "tax", "net_salary"),
    ),
    "disciplinary": RecordMapping(
        "disciplinary",
        fields={"incident_date": "date", "issued_by": "issuedById"},
        enums={
            "type": EnumTable(
                DisciplinaryType, fallback=DisciplinaryType.verbal_warning,
            ),
            "status": EnumTable(
                DisciplinaryStatus, fallback=DisciplinaryStatus.active,
            ),
        },
    ),
    "health-insurance": RecordMapping(
        "health-insurance",
        fields={
            "policy_number": "policyNo",
            "provider_name": "provider",
            "plan_name": "plan",
            "dependents_count": "dependents",
            "premium_amount": "premium",
        },
        enums={"status": _DOCUMENT_STATUS},
        numeric=("dependents_count", "premium_amount"),
    ),
    "compliance": RecordMapping(
        "compliance",
        fields={
            "last_audit_date": "lastAudit",
            "next_audit_date": "nextAudit",
            "findings_count": "findings",
        },
        enums={
            "status": EnumTable(
                ComplianceStatus, fallback=ComplianceStatus.pending_review,
            ),
        },
        numeric=("findings_count", "score"),
    ),
    "performance": RecordMapping(
        "performance",
        enums={"status": EnumTable(ReviewStatus, fallback=ReviewStatus.scheduled)},
        numeric=("rating",),
    ),
    "departments": RecordMapping(
        "departments",
        numeric=("open_positions",),
    ),
    "attendance": RecordMapping(
        "attendance",
        fields={"attendance_date": "date"},
        enums={
            "status": EnumTable(AttendanceStatus, fallback=AttendanceStatus.absent),
        },
        numeric=("work_hours",),
    ),
    "vehicles": RecordMapping(
        "vehicles",
        fields={"plate_number": "plateNo"},
        enums={
            "type": EnumTable(VehicleType, fallback=VehicleType.car),
            "status": EnumTable(
                VehicleStatus,
                fallback=VehicleStatus.active,
                overrides={"maintenance": "In Service"},
            ),
        },
    ),
})


def get_mapping(entity: str) -> RecordMapping:
    """Return the mapping for *entity* or raise ``UnknownEntityException``."""
    try:
        return RECORD_MAPPINGS[entity]
    except KeyError:
        raise UnknownEntityException(entity) from None


def to_display(entity: str, record: Mapping[str, Any]) -> dict[str, Any]:
    return get_mapping(entity).to_display(record)


def to_persisted(entity: str, record: Mapping[str, Any]) -> dict[str, Any]:
    return get_mapping(entity).to_persisted(record)
