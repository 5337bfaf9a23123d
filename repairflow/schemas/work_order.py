from __future__ import annotations
from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field

from repairflow.services.phases import Phase

WorkType = Literal["repair", "inspection", "rebuild", "pm"]
Priority = Literal["low", "medium", "high", "emergency"]
WorkOrderStatus = Literal[
    "pending", "in_progress", "on_hold", "completed", "cancelled", "awaiting_parts", "invoiced",
]


class WorkOrderCreate(BaseModel):
    equipment_unit_id: str
    customer_id: str | None = None
    work_type: WorkType = "repair"
    priority: Priority = "medium"
    scheduled_date: date | None = None
    reported_issue: str = ""
    customer_po: str = ""
    estimated_hours: float | None = Field(default=None, ge=0)


class WorkOrderUpdate(BaseModel):
    """Editable fields. ``status`` is checked for membership only."""
    priority: Priority | None = None
    status: WorkOrderStatus | None = None
    scheduled_date: date | None = None
    reported_issue: str | None = None
    customer_po: str | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)


class AssignmentRead(BaseModel):
    id: str
    work_order_id: str
    assigned_to: str
    assigned_by: str | None = None
    phase: str
    status: str
    assigned_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    notes: str = ""

    model_config = {"from_attributes": True}


class AssignRequest(BaseModel):
    technician_id: str
    phase: Phase | None = None
    notes: str = ""


class PhaseCompleteRequest(BaseModel):
    phase: Phase


class CancelRequest(BaseModel):
    reason: str = ""


class WorkOrderRead(BaseModel):
    id: str
    work_order_number: str
    equipment_unit_id: str
    customer_id: str | None = None
    assigned_to: str | None = None
    work_type: str
    priority: str
    status: str
    current_phase: str
    scheduled_date: date | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    reported_issue: str
    customer_po: str
    estimated_hours: float | None = None
    actual_hours: float | None = None
    created_by: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
