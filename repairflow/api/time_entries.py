"""Time clock API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import time_tracking
from repairflow.schemas import ClockIn, ClockOut, TimeEntryRead, HoursSummary

router = APIRouter(prefix="/api/time-entries", tags=["time_entries"])


@router.post("/clock-in", response_model=TimeEntryRead, status_code=201)
async def clock_in(
    body: ClockIn,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await time_tracking.clock_in(
        db, auth.user_id, body.work_order_id, work_session_id=body.work_session_id, notes=body.notes,
    )


@router.post("/{entry_id}/clock-out", response_model=TimeEntryRead)
async def clock_out(
    entry_id: str,
    body: ClockOut,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await time_tracking.clock_out(
        db, entry_id, auth.user_id, break_minutes=body.break_minutes, notes=body.notes,
    )


@router.get("/summary", response_model=HoursSummary)
async def my_hours(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await time_tracking.summarize_hours(db, auth.user_id)


@router.get("", response_model=list[TimeEntryRead])
async def list_entries(
    work_order_id: str | None = None,
    user_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Technicians see their own entries; supervisors may filter by anyone."""
    if not auth.is_supervisor:
        if user_id and user_id != auth.user_id:
            raise HTTPException(403, "Insufficient permissions")
        user_id = auth.user_id
    return await crud.list_time_entries(db, work_order_id=work_order_id, user_id=user_id)


@router.post("/{entry_id}/approve", response_model=TimeEntryRead)
async def approve_entry(
    entry_id: str,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await time_tracking.approve_time_entry(db, entry_id, auth.user_id)
