"""Work session lifecycle and step completion recording.

A session is one technician running one procedure template against one work
order phase. Steps are completed strictly in ``step_number`` order, each at
most once.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import ProcedureTemplate, StepCompletion, WorkSession
from repairflow.services.errors import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationError,
)
from repairflow.services.phases import is_terminal, parse_phase

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "Not Applicable"
STEP_RESULTS = ("pass", "fail", "na")


async def ensure_work_order_open(db: AsyncSession, work_order_id: str) -> None:
    """Refuse session writes once the owning work order is completed or cancelled."""
    wo = await crud.get_work_order(db, work_order_id)
    if not wo:
        raise NotFoundError("Work order not found")
    if is_terminal(wo.current_phase):
        raise ConflictError(f"Work order is {wo.current_phase}")


def step_progress(index: int, total: int) -> int:
    """Percent complete after finishing the zero-based step ``index`` of ``total``.

    Halves round up, so 1 of 8 steps is 13%.
    """
    if total <= 0:
        return 0
    return min(100, math.floor((index + 1) / total * 100 + 0.5))


def _pick_template(
    templates: list[ProcedureTemplate], phase: str, procedure_template_id: str | None,
) -> ProcedureTemplate:
    if not templates:
        raise ValidationError("No procedure available for this phase")
    if procedure_template_id:
        for t in templates:
            if t.id == procedure_template_id:
                return t
        raise ValidationError(f"Procedure template is not active for phase {phase}")
    if len(templates) > 1:
        names = ", ".join(t.name for t in templates)
        raise ValidationError(f"Multiple procedures available for this phase; select one of: {names}")
    return templates[0]


async def start_session(
    db: AsyncSession,
    work_order_id: str,
    assignment_id: str,
    phase: str,
    technician_id: str,
    procedure_template_id: str | None = None,
) -> WorkSession:
    """Open a work session and mark the assignment in progress, in one commit."""
    try:
        phase = parse_phase(phase).value
    except ValueError as e:
        raise ValidationError(str(e)) from None

    wo = await crud.get_work_order(db, work_order_id)
    if not wo:
        raise NotFoundError("Work order not found")
    if wo.current_phase != phase:
        raise ConflictError(f"Work order is in phase {wo.current_phase}, not {phase}")

    assignment = await crud.get_assignment(db, assignment_id)
    if not assignment or assignment.work_order_id != wo.id:
        raise NotFoundError("Assignment not found for this work order")
    if assignment.phase != phase:
        raise ValidationError(f"Assignment is for phase {assignment.phase}, not {phase}")
    if assignment.assigned_to != technician_id:
        raise PermissionDeniedError("Assignment belongs to another technician")
    if assignment.status not in ("assigned", "in_progress"):
        raise ConflictError(f"Assignment is {assignment.status}")

    for existing in await crud.list_sessions_for_work_order(db, wo.id):
        if existing.assignment_id == assignment.id and existing.status in ("in_progress", "paused"):
            raise ConflictError("A work session is already open for this assignment")

    templates = await crud.list_procedure_templates(db, phase=phase, active_only=True)
    template = _pick_template(templates, phase, procedure_template_id)
    if not template.steps:
        raise ValidationError(f"Procedure {template.name} has no steps")

    now = datetime.now(timezone.utc)
    ws = WorkSession(
        work_order_id=wo.id,
        assignment_id=assignment.id,
        procedure_template_id=template.id,
        technician_id=technician_id,
        phase=phase,
        status="in_progress",
        progress_percentage=0,
        current_step_id=template.steps[0].id,
        started_at=now,
    )
    try:
        db.add(ws)
        assignment.status = "in_progress"
        if assignment.started_at is None:
            assignment.started_at = now
        if wo.started_at is None:
            wo.started_at = now
        if wo.status == "pending":
            wo.status = "in_progress"
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Started session %s on work order %s (%s, %s)", ws.id, wo.id, phase, template.name)
    return await crud.get_work_session(db, ws.id)


async def complete_step(
    db: AsyncSession,
    session_id: str,
    step_id: str,
    result: str,
    completed_by: str,
    measurements: dict | None = None,
    observations: str = "",
    issues_found: str = "",
    time_spent_minutes: int | None = None,
) -> dict:
    """Record the outcome of the session's current step and advance progress.

    A ``fail`` result is recorded and progression continues. ``na`` is stored
    as a pass with the observation "Not Applicable".
    """
    if result not in STEP_RESULTS:
        raise ValidationError(f"result must be one of {', '.join(STEP_RESULTS)}")

    ws = await crud.get_work_session(db, session_id)
    if not ws:
        raise NotFoundError("Work session not found")
    if ws.status != "in_progress":
        raise ConflictError(f"Work session is {ws.status}")
    await ensure_work_order_open(db, ws.work_order_id)

    steps = list(ws.template.steps)
    index = next((i for i, s in enumerate(steps) if s.id == step_id), None)
    if index is None:
        raise ValidationError("Step does not belong to this session's procedure")
    if await crud.find_step_completion(db, ws.id, step_id):
        raise ConflictError(f"Step {steps[index].step_number} is already completed")
    if ws.current_step_id != step_id:
        raise ConflictError("Steps must be completed in order")

    if result == "na":
        result = "pass"
        observations = NOT_APPLICABLE

    completion = StepCompletion(
        work_session_id=ws.id,
        step_id=step_id,
        status="completed",
        result=result,
        measurements=measurements or {},
        observations=observations,
        issues_found=issues_found,
        completed_by=completed_by,
        time_spent_minutes=time_spent_minutes,
    )
    next_step = steps[index + 1] if index + 1 < len(steps) else None
    try:
        db.add(completion)
        ws.progress_percentage = step_progress(index, len(steps))
        ws.current_step_id = next_step.id if next_step else None
        ws.last_synced_at = datetime.now(timezone.utc)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"Step {steps[index].step_number} is already completed") from None
    except Exception:
        await db.rollback()
        raise

    await db.refresh(completion)
    logger.info(
        "Session %s step %d/%d %s (%d%%)",
        ws.id, index + 1, len(steps), result, ws.progress_percentage,
    )
    return {
        "completion": completion,
        "progress_percentage": ws.progress_percentage,
        "current_step_id": ws.current_step_id,
        "all_steps_complete": next_step is None,
    }


async def set_paused(db: AsyncSession, ws: WorkSession, paused: bool) -> WorkSession:
    expected = "in_progress" if paused else "paused"
    if ws.status != expected:
        raise ConflictError(f"Work session is {ws.status}")
    if not paused:
        await ensure_work_order_open(db, ws.work_order_id)
    return await crud.update_work_session(db, ws, status="paused" if paused else "in_progress")


async def record_equipment_details(db: AsyncSession, ws: WorkSession, details: dict) -> WorkSession:
    """Merge nameplate/identification data into the session."""
    if ws.status in ("completed", "cancelled"):
        raise ConflictError(f"Work session is {ws.status}")
    merged = dict(ws.equipment_details or {})
    merged.update(details)
    return await crud.update_work_session(db, ws, equipment_details=merged)
