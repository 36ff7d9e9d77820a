"""Tests for the field normalizer and the per-record display mappings."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from hrms.common.constants import (
    AssetStatus,
    AttendanceStatus,
    ComplianceStatus,
    DocumentStatus,
    ExpenseStatus,
    LeaveStatus,
    VehicleStatus,
)
from hrms.common.exceptions import UnknownEntityException
from hrms.common.normalizer import (
    EnumTable,
    as_datetime,
    camel_to_snake,
    humanize,
    parse_date,
    parse_number,
    snake_to_camel,
)
from hrms.records.mappings import RECORD_MAPPINGS, get_mapping, to_display, to_persisted


# ═════════════════════════════════════════════════════════════════════
# STRING / VALUE HELPERS
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "value, label",
    [
        ("needs_improvement", "Needs Improvement"),
        ("pending", "Pending"),
        ("PAID_OUT", "Paid Out"),
        ("expiring_soon", "Expiring Soon"),
    ],
)
def test_humanize(value, label):
    assert humanize(value) == label


def test_snake_camel_conversions():
    assert snake_to_camel("expiry_date") == "expiryDate"
    assert snake_to_camel("id") == "id"
    assert camel_to_snake("expiryDate") == "expiry_date"
    assert camel_to_snake("employeeId") == "employee_id"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,250.50", 1250.5),
        (Decimal("99.90"), 99.9),
        (7, 7.0),
        ("abc", 0.0),
        (None, 0.0),
        ("", 0.0),
        ("NaN", 0.0),
        (True, 0.0),
    ],
)
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_parse_date_variants():
    assert parse_date("2024-06-20") == date(2024, 6, 20)
    assert parse_date("2024-06-20T10:00:00Z") == datetime(2024, 6, 20, 10, tzinfo=timezone.utc)
    assert parse_date("not a date") is None
    assert parse_date(None) is None
    assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)


def test_as_datetime_aligns_with_reference():
    aware_now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    naive_now = datetime(2024, 6, 1)

    assert as_datetime(date(2024, 6, 20), aware_now) == datetime(2024, 6, 20, tzinfo=timezone.utc)
    assert as_datetime(datetime(2024, 6, 2, 8), aware_now).tzinfo == timezone.utc
    assert as_datetime("2024-06-02T08:00:00+00:00", naive_now) == datetime(2024, 6, 2, 8)
    assert as_datetime("", aware_now) is None


# ═════════════════════════════════════════════════════════════════════
# ENUM TABLES
# ═════════════════════════════════════════════════════════════════════


class TestEnumTable:
    """Bidirectional status lookup."""

    def test_round_trip_every_entity_status(self):
        """Every persisted value survives display → persisted unchanged."""
        for mapping in RECORD_MAPPINGS.values():
            for table in mapping.enums.values():
                for value in table.labels:
                    assert table.persisted(table.display(value)) == value

    def test_needs_improvement_round_trip(self):
        compliance = get_mapping("compliance")
        label = compliance.status_label("needs_improvement")
        assert label == "Needs Improvement"
        assert compliance.status_value(label) == "needs_improvement"

    def test_unknown_value_passes_through_on_display(self):
        table = get_mapping("leaves").enums["status"]
        assert table.display("on_hold") == "on_hold"

    def test_enum_members_display(self):
        table = get_mapping("leaves").enums["status"]
        assert table.display(LeaveStatus.approved) == "Approved"

    def test_asset_overrides(self):
        assets = get_mapping("assets")
        assert assets.status_label(AssetStatus.assigned) == "In Use"
        assert assets.status_label("scrapped") == "Retired"
        assert assets.status_value("In Use") == "assigned"
        assert assets.status_value("Retired") == "scrapped"

    @pytest.mark.parametrize(
        "entity, fallback",
        [
            ("assets", AssetStatus.available.value),
            ("compliance", ComplianceStatus.pending_review.value),
            ("expenses", ExpenseStatus.pending.value),
            ("visas", DocumentStatus.active.value),
            ("attendance", AttendanceStatus.absent.value),
            ("vehicles", VehicleStatus.active.value),
        ],
    )
    def test_unmapped_label_falls_back(self, entity, fallback):
        assert get_mapping(entity).status_value("Definitely Not A Status") == fallback

    @pytest.mark.parametrize("label", [["Pending"], {"x": 1}, 3, None, True])
    def test_non_string_label_falls_back(self, label):
        assert get_mapping("leaves").status_value(label) == LeaveStatus.pending.value

    def test_vehicle_and_attendance_labels(self):
        vehicles = get_mapping("vehicles")
        assert vehicles.status_label("maintenance") == "In Service"
        assert vehicles.status_value("In Service") == "maintenance"
        assert vehicles.status_value("Out Of Service") == "out_of_service"
        assert vehicles.enums["type"].display("van") == "Van"

        attendance = get_mapping("attendance")
        assert attendance.status_label("on_leave") == "On Leave"
        assert attendance.status_value("Half Day") == "half_day"

    def test_persisted_value_is_accepted_in_reverse(self):
        assert get_mapping("compliance").status_value("non_compliant") == "non_compliant"

    def test_duplicate_labels_rejected(self):
        with pytest.raises(ValueError):
            EnumTable(["a", "b"], fallback="a", overrides={"b": "A"})

    def test_tables_are_read_only(self):
        table = get_mapping("assets").enums["status"]
        with pytest.raises(TypeError):
            table.labels["assigned"] = "Borrowed"  # type: ignore[index]


# ═════════════════════════════════════════════════════════════════════
# RECORD CONVERSION
# ═════════════════════════════════════════════════════════════════════


class TestRecordConversion:
    """to_display / to_persisted on whole records."""

    def test_to_display_renames_and_recases(self):
        record_id = uuid.uuid4()
        out = to_display("health-insurance", {
            "id": record_id,
            "policy_number": "POL-1",
            "provider_name": "Acme Health",
            "dependents_count": 2,
            "premium_amount": Decimal("120.50"),
            "expiry_date": date(2025, 1, 31),
            "status": "expiring_soon",
        })
        assert out == {
            "id": str(record_id),
            "policyNo": "POL-1",
            "provider": "Acme Health",
            "dependents": 2.0,
            "premium": 120.5,
            "expiryDate": "2025-01-31",
            "status": "Expiring Soon",
        }

    def test_missing_numeric_fields_default_to_zero(self):
        out = to_display("payrolls", {"status": "pending"})
        for key in ("baseSalary", "bonus", "deductions", "tax", "netSalary"):
            assert out[key] == 0.0

    def test_nested_employee_is_camelized(self):
        out = to_display("leaves", {
            "type": "Sick Leave",
            "employee": {"first_name": "Jane", "last_name": "Doe"},
        })
        assert out["employee"] == {"firstName": "Jane", "lastName": "Doe"}

    def test_to_persisted_inverts_fields(self):
        out = to_persisted("assets", {
            "name": "Laptop",
            "assetTag": "SN-1",
            "category": "Electronics",
            "status": "In Use",
            "value": "1,499.99",
            "employee": {"id": "ignored"},
        })
        assert out == {
            "name": "Laptop",
            "serial_number": "SN-1",
            "type": "electronics",
            "status": "assigned",
            "value": 1499.99,
        }

    def test_visa_type_labels(self):
        assert to_display("visas", {"type": "work"})["type"] == "Work Visa"
        assert to_persisted("visas", {"type": "Residence Visa"})["type"] == "residence"

    def test_to_persisted_never_raises_on_list_values(self):
        out = to_persisted("compliance", {"area": "Payroll", "status": ["x"]})
        assert out["status"] == ComplianceStatus.pending_review.value

    def test_attendance_times_and_renames(self):
        out = to_display("attendance", {
            "attendance_date": date(2024, 6, 3),
            "check_in": time(9, 5),
            "status": "late",
        })
        assert out["date"] == "2024-06-03"
        assert out["checkIn"] == "09:05:00"
        assert out["status"] == "Late"
        assert out["workHours"] == 0.0

    def test_bad_numeric_becomes_zero(self):
        assert to_persisted("expenses", {"amount": "twelve"})["amount"] == 0.0

    def test_unknown_entity(self):
        with pytest.raises(UnknownEntityException):
            to_display("spaceships", {})
