from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel


class PhaseReportSubmit(BaseModel):
    summary: str | None = None
    technician_notes: str = ""


class PhaseReportSend(BaseModel):
    to: str | None = None


class PhaseReportRead(BaseModel):
    id: str
    work_order_id: str
    work_session_id: str
    phase: str
    procedure_name: str
    equipment_details: dict[str, Any]
    step_completions: list[dict[str, Any]]
    photos: list[dict[str, Any]]
    summary: str
    technician_notes: str
    failed_steps: int
    status: str
    created_by: str
    approved_by: str | None = None
    approved_at: datetime | None = None
    sent_to: str = ""
    sent_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
