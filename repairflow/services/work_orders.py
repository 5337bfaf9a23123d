"""Work order transitions: assignment, phase completion, cancellation.

``current_phase`` is only ever written here (and through ``advance_phase`` by
the approval service). Apart from cancellation it only moves along the
``NEXT_PHASE`` table.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import WorkOrder, WorkOrderAssignment
from repairflow.services.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from repairflow.services.phases import (
    Phase, next_phase, parse_phase, previous_phases, requires_approval, is_terminal,
)
from repairflow.services.time_tracking import close_open_entries

logger = logging.getLogger(__name__)

OPEN_SESSION_STATUSES = ("in_progress", "paused")


def _parse(value: str) -> Phase:
    try:
        return parse_phase(value)
    except ValueError as e:
        raise ValidationError(str(e)) from None


async def advance_phase(db: AsyncSession, wo: WorkOrder, from_phase: Phase) -> Phase:
    """Move ``wo`` from ``from_phase`` to its successor without committing.

    Open assignments of the phase being left are closed. Reaching a terminal
    phase completes the work order.
    """
    if wo.current_phase != from_phase.value:
        raise ConflictError(
            f"Work order is in phase {wo.current_phase}, not {from_phase.value}"
        )
    target = next_phase(from_phase)
    if target is None:
        raise ConflictError(f"Phase {from_phase.value} has no next phase")

    now = datetime.now(timezone.utc)
    for assignment in await crud.list_open_assignments_for_phase(db, wo.id, from_phase.value):
        assignment.status = "completed"
        assignment.completed_at = now

    wo.current_phase = target.value
    if target == Phase.COMPLETED:
        wo.status = "completed"
        wo.completed_at = now
    else:
        wo.status = "in_progress"

    logger.info("Work order %s advanced %s -> %s", wo.id, from_phase.value, target.value)
    return target


async def assign_work_order(
    db: AsyncSession,
    wo: WorkOrder,
    technician_id: str,
    assigned_by: str,
    phase: str | None = None,
    notes: str = "",
) -> WorkOrderAssignment:
    """Assign a technician to the work order's current phase.

    A work order still waiting for assignment moves to ``initial_testing`` first
    and the assignment is made for that phase.
    """
    if is_terminal(wo.current_phase):
        raise ConflictError(f"Work order is {wo.current_phase}")

    tech = await crud.get_user(db, technician_id)
    if not tech or not tech.is_active:
        raise NotFoundError("Technician not found")

    starting = wo.current_phase == Phase.PENDING_ASSIGNMENT.value
    effective = next_phase(Phase.PENDING_ASSIGNMENT) if starting else parse_phase(wo.current_phase)
    target = _parse(phase) if phase else effective
    if target != effective:
        raise ConflictError(
            f"Work order is in phase {effective.value}; cannot assign {target.value}"
        )

    try:
        if starting:
            await advance_phase(db, wo, Phase.PENDING_ASSIGNMENT)

        assignment = WorkOrderAssignment(
            work_order_id=wo.id,
            assigned_to=technician_id,
            assigned_by=assigned_by,
            phase=target.value,
            notes=notes,
        )
        db.add(assignment)
        wo.assigned_to = technician_id
        wo.status = "in_progress"
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(assignment)
    logger.info("Assigned %s to work order %s (%s)", technician_id, wo.id, assignment.phase)
    return assignment


async def claim_current_phase(db: AsyncSession, wo: WorkOrder, user_id: str) -> WorkOrderAssignment:
    """Let the technician who finished the previous phase pick up the current one.

    Returns the caller's existing open assignment for the phase when there is one.
    """
    phase = parse_phase(wo.current_phase)
    if is_terminal(phase) or phase == Phase.PENDING_ASSIGNMENT:
        raise ConflictError(f"Work order is {phase.value}; nothing to claim")

    for assignment in await crud.list_open_assignments_for_phase(db, wo.id, phase.value):
        if assignment.assigned_to == user_id:
            return assignment

    earlier = {p.value for p in previous_phases(phase)}
    if not any(
        a.assigned_to == user_id and a.status == "completed" and a.phase in earlier
        for a in wo.assignments
    ):
        raise PermissionDeniedError("Only the technician who completed the previous phase can claim it")

    assignment = WorkOrderAssignment(
        work_order_id=wo.id,
        assigned_to=user_id,
        assigned_by=user_id,
        phase=phase.value,
    )
    db.add(assignment)
    wo.assigned_to = user_id
    await db.commit()
    await db.refresh(assignment)
    return assignment


async def complete_phase(db: AsyncSession, wo: WorkOrder, phase: str) -> Phase:
    """Advance a phase that does not need sign-off.

    The phase must have at least one submitted report on this work order.
    """
    current = _parse(phase)
    if current.value != wo.current_phase:
        raise ConflictError(f"Work order is in phase {wo.current_phase}, not {current.value}")
    if current == Phase.PENDING_ASSIGNMENT:
        raise ValidationError("Assign a technician to start the work order")
    if requires_approval(current):
        raise ValidationError(f"Phase {current.value} requires approval before advancing")

    reports = await crud.list_phase_reports(db, work_order_id=wo.id)
    if not any(r.phase == current.value for r in reports):
        raise ValidationError("Submit the phase report before completing the phase")

    try:
        target = await advance_phase(db, wo, current)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return target


async def cancel_work_order(db: AsyncSession, wo: WorkOrder, reason: str = "") -> WorkOrder:
    """Cancel the work order with its open assignments, sessions, time entries and pending approvals."""
    if is_terminal(wo.current_phase):
        raise ConflictError(f"Work order is already {wo.current_phase}")

    now = datetime.now(timezone.utc)
    for assignment in wo.assignments:
        if assignment.status in ("assigned", "in_progress"):
            assignment.status = "cancelled"
            assignment.completed_at = now
            if reason:
                assignment.notes = reason
    for approval in wo.approvals:
        if approval.status == "pending":
            approval.status = "cancelled"
    for ws in await crud.list_sessions_for_work_order(db, wo.id):
        if ws.status in OPEN_SESSION_STATUSES:
            ws.status = "cancelled"
            ws.completed_at = now

    wo.current_phase = Phase.CANCELLED.value
    wo.status = "cancelled"
    try:
        await close_open_entries(db, await crud.list_active_entries_for_work_order(db, wo.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Work order %s cancelled", wo.id)
    return await crud.get_work_order(db, wo.id)
