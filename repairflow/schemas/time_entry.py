from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class ClockIn(BaseModel):
    work_order_id: str
    work_session_id: str | None = None
    notes: str = ""


class ClockOut(BaseModel):
    break_minutes: int = Field(default=0, ge=0)
    notes: str | None = None


class TimeEntryRead(BaseModel):
    id: str
    user_id: str
    work_order_id: str
    work_session_id: str | None = None
    clock_in_time: datetime
    clock_out_time: datetime | None = None
    break_duration_minutes: int
    total_hours: float | None = None
    billable_hours: float | None = None
    status: str
    notes: str
    approved_by: str | None = None
    approved_at: datetime | None = None

    model_config = {"from_attributes": True}


class HoursSummary(BaseModel):
    today_hours: float
    week_hours: float
    month_hours: float
    active_entry_id: str | None = None
