"""Work session API: start a phase procedure, record steps, submit the phase report."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth
from repairflow.services.auth import AuthContext
from repairflow.services import work_sessions, phase_reports
from repairflow.schemas import (
    SessionStart, WorkSessionRead, StepCompleteRequest, StepProgress,
    EquipmentDetailsUpdate, ProcedureTemplateRead, PhaseReportSubmit, PhaseReportRead,
)

router = APIRouter(prefix="/api/work-sessions", tags=["work_sessions"])


async def load_session(db: AsyncSession, session_id: str, auth: AuthContext):
    """Fetch a session the caller may act on: its technician or a manager."""
    ws = await crud.get_work_session(db, session_id)
    if not ws:
        raise HTTPException(404, "Work session not found")
    if ws.technician_id != auth.user_id and not auth.is_supervisor:
        raise HTTPException(403, "This work session belongs to another technician")
    return ws


@router.post("", response_model=WorkSessionRead, status_code=201)
async def start_session(
    body: SessionStart,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await work_sessions.start_session(
        db,
        work_order_id=body.work_order_id,
        assignment_id=body.assignment_id,
        phase=body.phase.value,
        technician_id=auth.user_id,
        procedure_template_id=body.procedure_template_id,
    )


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Session with its procedure steps and the completions recorded so far."""
    ws = await crud.get_work_session(db, session_id)
    if not ws:
        raise HTTPException(404, "Work session not found")
    data = WorkSessionRead.model_validate(ws).model_dump()
    data["procedure"] = ProcedureTemplateRead.model_validate(ws.template).model_dump()
    return data


@router.post("/{session_id}/steps", response_model=StepProgress, status_code=201)
async def complete_step(
    session_id: str,
    body: StepCompleteRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    return await work_sessions.complete_step(
        db, session_id, body.step_id, body.result, auth.user_id,
        measurements=body.measurements,
        observations=body.observations,
        issues_found=body.issues_found,
        time_spent_minutes=body.time_spent_minutes,
    )


@router.post("/{session_id}/pause", response_model=WorkSessionRead)
async def pause_session(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    ws = await load_session(db, session_id, auth)
    return await work_sessions.set_paused(db, ws, True)


@router.post("/{session_id}/resume", response_model=WorkSessionRead)
async def resume_session(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    ws = await load_session(db, session_id, auth)
    return await work_sessions.set_paused(db, ws, False)


@router.put("/{session_id}/equipment-details", response_model=WorkSessionRead)
async def update_equipment_details(
    session_id: str,
    body: EquipmentDetailsUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    ws = await load_session(db, session_id, auth)
    return await work_sessions.record_equipment_details(db, ws, body.equipment_details)


# ── Phase report ──────────────────────────────────────────

@router.get("/{session_id}/report-preview")
async def preview_report(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    return await phase_reports.preview_phase_report(db, session_id)


@router.post("/{session_id}/report", response_model=PhaseReportRead, status_code=201)
async def submit_report(
    session_id: str,
    body: PhaseReportSubmit,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    return await phase_reports.submit_phase_report(
        db, session_id, auth.user_id,
        summary=body.summary,
        technician_notes=body.technician_notes,
    )
