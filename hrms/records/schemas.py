"""Record Pydantic schemas for request / response validation.

Record bodies themselves are free-form display-form objects (see
``hrms.records.mappings``); only the action payloads are typed here.
"""

import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from hrms.common.pagination import PaginationMeta


# ── Responses ───────────────────────────────────────────────────────

class RecordListResponse(BaseModel):
    """Paginated list of display-form records."""

    data: list[dict[str, Any]]
    meta: PaginationMeta


# ── Action payloads ─────────────────────────────────────────────────

class StatusUpdate(BaseModel):
    """Display label (``"In Use"``) or persisted value (``"assigned"``)."""

    status: str = Field(..., min_length=1)


class AssetAssign(BaseModel):
    """``assignedToId: null`` returns the asset to the pool."""

    model_config = ConfigDict(populate_by_name=True)

    assigned_to: Optional[uuid.UUID] = Field(default=None, alias="assignedToId")


class ExpenseDecision(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    approved_by: Optional[uuid.UUID] = Field(default=None, alias="approvedById")


class PayrollProcess(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transaction_ref: Optional[str] = Field(
        default=None, max_length=100, alias="transactionRef",
    )
