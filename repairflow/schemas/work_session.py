from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field

from repairflow.services.phases import Phase


class SessionStart(BaseModel):
    work_order_id: str
    assignment_id: str
    phase: Phase
    procedure_template_id: str | None = None


class StepCompleteRequest(BaseModel):
    step_id: str
    result: Literal["pass", "fail", "na"]
    measurements: dict[str, Any] = {}
    observations: str = ""
    issues_found: str = ""
    time_spent_minutes: int | None = Field(default=None, ge=0)


class StepCompletionRead(BaseModel):
    id: str
    work_session_id: str
    step_id: str
    status: str
    result: str
    measurements: dict[str, Any]
    observations: str
    issues_found: str
    completed_by: str
    completed_at: datetime
    time_spent_minutes: int | None = None

    model_config = {"from_attributes": True}


class StepProgress(BaseModel):
    completion: StepCompletionRead
    progress_percentage: int
    current_step_id: str | None = None
    all_steps_complete: bool


class EquipmentDetailsUpdate(BaseModel):
    equipment_details: dict[str, Any]


class WorkSessionRead(BaseModel):
    id: str
    work_order_id: str
    assignment_id: str | None = None
    procedure_template_id: str
    technician_id: str
    phase: str
    status: str
    current_step_id: str | None = None
    progress_percentage: int
    started_at: datetime
    completed_at: datetime | None = None
    equipment_details: dict[str, Any]
    completions: list[StepCompletionRead] = []

    model_config = {"from_attributes": True}
