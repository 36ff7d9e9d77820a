"""Field normalizer — persisted (snake_case) ⇄ display (camelCase) records.

Persisted rows use snake_case keys and lowercase enum values
(``needs_improvement``); the display form used by the frontend uses camelCase
keys and title-cased labels (``Needs Improvement``).

Normalization never fails: unknown enum values pass through unchanged on the
way out, unknown display labels fall back to a per-field default on the way
in, and numeric fields that do not parse become ``0``.
"""

from __future__ import annotations

import enum
import math
import re
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# ── String helpers ──────────────────────────────────────────────────

def humanize(value: str) -> str:
    """``needs_improvement`` → ``Needs Improvement``."""
    return " ".join(
        word[:1].upper() + word[1:].lower()
        for word in value.split("_")
        if word
    )


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


# ── Value helpers ───────────────────────────────────────────────────

def parse_number(value: Any) -> float:
    """Parse money amounts / counts to float; anything unparseable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        try:
            number = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_date(value: Any) -> Optional[Union[date, datetime]]:
    """Read a raw date / datetime / ISO string. Returns None when unreadable."""
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def as_datetime(value: Any, reference: datetime) -> Optional[datetime]:
    """Read *value* as a datetime comparable with *reference*.

    Plain dates become midnight in the reference's timezone. Naive
    timestamps are taken as UTC when the reference is aware, and aware ones
    are shifted to naive UTC when it is not.
    """
    parsed = parse_date(value)
    if parsed is None:
        return None
    if not isinstance(parsed, datetime):
        return datetime.combine(parsed, time.min, tzinfo=reference.tzinfo)
    if reference.tzinfo is not None and parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    if reference.tzinfo is None and parsed.tzinfo is not None:
        return parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _display_scalar(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


# ── Lookup tables ───────────────────────────────────────────────────

class EnumTable:
    """Bidirectional lookup for one enum-valued field.

    Labels default to ``humanize(value)``; *overrides* replace individual
    labels (e.g. ``assigned`` → ``In Use``). The mapping must stay a
    bijection, so duplicate labels are rejected at construction time.
    """

    def __init__(
        self,
        values: Iterable[Any],
        *,
        fallback: Any,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> None:
        labels = {}
        for value in values:
            raw = value.value if isinstance(value, enum.Enum) else str(value)
            labels[raw] = humanize(raw)
        labels.update(overrides or {})

        inverse = {label: raw for raw, label in labels.items()}
        if len(inverse) != len(labels):
            raise ValueError(f"Duplicate display labels in {sorted(labels.values())}")

        self.labels: Mapping[str, str] = MappingProxyType(labels)
        self.values: Mapping[str, str] = MappingProxyType(inverse)
        self.fallback: str = fallback.value if isinstance(fallback, enum.Enum) else fallback

    def display(self, value: Any) -> Any:
        """Persisted value → label; unknown values pass through unchanged."""
        if isinstance(value, enum.Enum):
            value = value.value
        if isinstance(value, str):
            return self.labels.get(value, value)
        return value

    def persisted(self, label: Any) -> str:
        """Label → persisted value; unrecognised labels become the fallback."""
        if isinstance(label, enum.Enum):
            label = label.value
        if not isinstance(label, str):
            return self.fallback
        if label in self.values:
            return self.values[label]
        if label in self.labels:
            # Already in persisted form
            return label
        return self.fallback


class RecordMapping:
    """Static persisted ⇄ display mapping for one record type."""

    def __init__(
        self,
        entity: str,
        *,
        fields: Optional[Mapping[str, str]] = None,
        enums: Optional[Mapping[str, EnumTable]] = None,
        numeric: Iterable[str] = (),
    ) -> None:
        self.entity = entity
        self.fields: Mapping[str, str] = MappingProxyType(dict(fields or {}))
        self.inverse_fields: Mapping[str, str] = MappingProxyType(
            {display: persisted for persisted, display in self.fields.items()}
        )
        self.enums: Mapping[str, EnumTable] = MappingProxyType(dict(enums or {}))
        self.numeric: frozenset[str] = frozenset(numeric)

    def __repr__(self) -> str:
        return f"<RecordMapping {self.entity}>"

    # ── field names ─────────────────────────────────────────────────

    def display_name(self, field: str) -> str:
        return self.fields.get(field) or snake_to_camel(field)

    def persisted_name(self, key: str) -> str:
        return self.inverse_fields.get(key) or camel_to_snake(key)

    # ── enum helpers ────────────────────────────────────────────────

    def status_label(self, value: Any) -> Any:
        table = self.enums.get("status")
        return table.display(value) if table else value

    def status_value(self, label: Any) -> Any:
        table = self.enums.get("status")
        return table.persisted(label) if table else label

    # ── conversions ─────────────────────────────────────────────────

    def to_display(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Persisted row → display record."""
        out: dict[str, Any] = {}
        for field, value in record.items():
            if field in self.enums:
                value = self.enums[field].display(value)
            elif field in self.numeric:
                value = parse_number(value)
            elif isinstance(value, Mapping):
                # Joined rows (e.g. the owning employee) keep their own keys
                value = {snake_to_camel(k): _display_scalar(v) for k, v in value.items()}
            else:
                value = _display_scalar(value)
            out[self.display_name(field)] = value

        for field in self.numeric:
            out.setdefault(self.display_name(field), 0.0)
        return out

    def to_persisted(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Display record → persisted attributes. Nested objects are dropped."""
        out: dict[str, Any] = {}
        for key, value in record.items():
            if isinstance(value, Mapping):
                continue
            field = self.persisted_name(key)
            if field in self.enums:
                value = self.enums[field].persisted(value)
            elif field in self.numeric:
                value = parse_number(value)
            out[field] = value
        return out
