from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field, field_validator

from repairflow.services.phases import Phase, working_phases

StepType = Literal["action", "inspection", "measurement", "decision"]
ProcedureType = Literal["teardown", "inspection", "rebuild", "test", "cleaning"]


class MeasurementSpec(BaseModel):
    name: str
    unit: str = ""
    min: float | None = None
    max: float | None = None
    target: float | None = None


class ProcedureStepCreate(BaseModel):
    step_number: int | None = Field(default=None, ge=1)
    title: str
    description: str = ""
    instructions: str = ""
    step_type: StepType = "action"
    acceptance_criteria: str = ""
    measurements_required: list[MeasurementSpec] = []
    photo_required: bool = False
    estimated_time_minutes: int | None = None
    safety_notes: str = ""
    reference_documents: list[str] = []


class ProcedureStepRead(BaseModel):
    id: str
    step_number: int
    title: str
    description: str
    instructions: str
    step_type: str
    acceptance_criteria: str
    measurements_required: list[dict[str, Any]]
    photo_required: bool
    estimated_time_minutes: int | None = None
    safety_notes: str

    model_config = {"from_attributes": True}


class ProcedureTemplateCreate(BaseModel):
    name: str
    version: str = "1.0"
    procedure_type: ProcedureType
    phase: Phase
    equipment_type_id: str | None = None
    estimated_duration_minutes: int | None = None
    required_tools: list[str] = []
    safety_requirements: list[str] = []
    steps: list[ProcedureStepCreate] = Field(min_length=1)

    @field_validator("phase")
    @classmethod
    def _working_phase(cls, v: Phase) -> Phase:
        if v not in working_phases():
            raise ValueError(f"procedures cannot be bound to phase {v.value}")
        return v

    @field_validator("steps")
    @classmethod
    def _unique_step_numbers(cls, v: list[ProcedureStepCreate]) -> list[ProcedureStepCreate]:
        numbers = [s.step_number for s in v if s.step_number is not None]
        if numbers and len(numbers) != len(v):
            raise ValueError("number every step or none of them")
        if len(numbers) != len(set(numbers)):
            raise ValueError("step numbers must be unique")
        return v


class ProcedureTemplateUpdate(BaseModel):
    name: str | None = None
    version: str | None = None
    estimated_duration_minutes: int | None = None
    required_tools: list[str] | None = None
    safety_requirements: list[str] | None = None
    is_active: bool | None = None


class ProcedureTemplateRead(BaseModel):
    id: str
    name: str
    version: str
    procedure_type: str
    phase: str
    equipment_type_id: str | None = None
    estimated_duration_minutes: int | None = None
    required_tools: list[str]
    safety_requirements: list[str]
    is_active: bool
    created_at: datetime
    steps: list[ProcedureStepRead] = []

    model_config = {"from_attributes": True}
