from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

PhotoType = Literal["before", "during", "after", "issue", "reference"]
FindingType = Literal["wear", "damage", "out_of_spec", "contamination", "other"]
Severity = Literal["minor", "moderate", "major", "critical"]


class PhotoRead(BaseModel):
    id: str
    work_session_id: str
    step_completion_id: str | None = None
    storage_path: str
    thumbnail_path: str
    photo_type: str
    caption: str
    taken_by: str
    taken_at: datetime

    model_config = {"from_attributes": True}


class FindingCreate(BaseModel):
    finding_type: FindingType
    severity: Severity
    description: str = Field(min_length=1)
    component: str = ""
    recommended_action: str = ""
    step_completion_id: str | None = None
    photo_ids: list[str] = []


class FindingRead(BaseModel):
    id: str
    work_session_id: str
    step_completion_id: str | None = None
    finding_type: str
    severity: str
    component: str
    description: str
    recommended_action: str
    photo_ids: list[str]
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PartsUsedCreate(BaseModel):
    part_number: str
    description: str = ""
    quantity: int = Field(default=1, ge=1)
    serial_numbers: list[str] = []
    installation_notes: str = ""


class PartsUsedRead(BaseModel):
    id: str
    work_session_id: str
    part_number: str
    description: str
    quantity: int
    serial_numbers: list[str]
    installation_notes: str
    installed_by: str
    installed_at: datetime

    model_config = {"from_attributes": True}


class AIInteractionRate(BaseModel):
    helpful: bool | None = None
    feedback: str | None = None
