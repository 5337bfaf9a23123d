from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field

from repairflow.services.phases import Phase


class RequiredPart(BaseModel):
    part_number: str
    description: str = ""
    quantity: int = Field(default=1, ge=1)
    estimated_cost: float | None = Field(default=None, ge=0)  # None prices from the catalog


class ApprovalRequest(BaseModel):
    work_order_id: str
    phase_completed: Phase
    next_phase: Phase
    findings_summary: str = ""
    required_parts: list[RequiredPart] = []
    estimated_cost: float | None = Field(default=None, ge=0)
    estimated_hours: float | None = Field(default=None, ge=0)


class ApprovalDecision(BaseModel):
    decision: Literal["approved", "rejected"]
    notes: str = ""
    reason: str = ""


class ApprovalRead(BaseModel):
    id: str
    work_order_id: str
    phase_completed: str
    next_phase: str
    requested_by: str
    requested_at: datetime
    approved_by: str | None = None
    approved_at: datetime | None = None
    status: str
    findings_summary: str
    required_parts: list[dict[str, Any]]
    estimated_cost: float | None = None
    estimated_hours: float | None = None
    approval_notes: str
    rejection_reason: str

    model_config = {"from_attributes": True}
