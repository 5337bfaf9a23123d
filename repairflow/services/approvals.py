"""Approval gate between phases.

A decision is written with ``UPDATE ... WHERE status = 'pending'`` so two
approvers racing on the same request cannot both win. Approving advances the
work order in the same transaction as the decision.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import WorkOrderApproval
from repairflow.services.auth import AuthContext
from repairflow.services.errors import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationError,
)
from repairflow.services.phases import next_phase, parse_phase, requires_approval
from repairflow.services.work_orders import advance_phase

logger = logging.getLogger(__name__)

DECISIONS = ("approved", "rejected")


def parts_total(required_parts: list[dict]) -> float:
    """Sum of quantity * estimated_cost over the requested parts."""
    total = 0.0
    for part in required_parts:
        total += float(part.get("quantity") or 0) * float(part.get("estimated_cost") or 0)
    return round(total, 2)


async def request_approval(
    db: AsyncSession,
    work_order_id: str,
    phase_completed: str,
    next_phase_value: str,
    requested_by: str,
    findings_summary: str = "",
    required_parts: list[dict] | None = None,
    estimated_cost: float | None = None,
    estimated_hours: float | None = None,
) -> WorkOrderApproval:
    """Open a pending approval for a gated phase. The work order's phase is left as it is."""
    try:
        completed = parse_phase(phase_completed)
        requested_next = parse_phase(next_phase_value)
    except ValueError as e:
        raise ValidationError(str(e)) from None

    wo = await crud.get_work_order(db, work_order_id)
    if not wo:
        raise NotFoundError("Work order not found")
    if wo.current_phase != completed.value:
        raise ConflictError(f"Work order is in phase {wo.current_phase}, not {completed.value}")

    if not requires_approval(completed):
        raise ValidationError(f"Phase {completed.value} does not require approval")

    expected = next_phase(completed)
    if expected is None:
        raise ValidationError(f"Phase {completed.value} has no next phase")
    if requested_next != expected:
        raise ValidationError(f"Next phase after {completed.value} is {expected.value}")

    if await crud.get_pending_approval(db, wo.id):
        raise ConflictError("An approval is already pending for this work order")

    parts = list(required_parts or [])
    approval = WorkOrderApproval(
        work_order_id=wo.id,
        phase_completed=completed.value,
        next_phase=expected.value,
        requested_by=requested_by,
        status="pending",
        findings_summary=findings_summary,
        required_parts=parts,
        estimated_cost=estimated_cost if estimated_cost is not None else parts_total(parts),
        estimated_hours=estimated_hours,
    )
    db.add(approval)
    await db.commit()
    logger.info("Approval %s requested for %s -> %s on %s", approval.id, completed.value, expected.value, wo.id)
    return await crud.get_approval(db, approval.id)


async def _claim_pending(db: AsyncSession, approval_id: str, **values) -> bool:
    result = await db.execute(
        update(WorkOrderApproval)
        .where(WorkOrderApproval.id == approval_id, WorkOrderApproval.status == "pending")
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def decide_approval(
    db: AsyncSession,
    approval_id: str,
    decision: str,
    approver_id: str,
    notes: str = "",
    reason: str = "",
) -> WorkOrderApproval:
    """Approve or reject a pending approval.

    Approval moves the work order to ``next_phase``; rejection puts it on hold
    in its current phase and requires a reason.
    """
    if decision not in DECISIONS:
        raise ValidationError(f"decision must be one of {', '.join(DECISIONS)}")
    reason = (reason or "").strip()
    if decision == "rejected" and not reason:
        raise ValidationError("Rejection reason is required")

    approval = await crud.get_approval(db, approval_id)
    if not approval:
        raise NotFoundError("Approval not found")
    if approval.status != "pending":
        raise ConflictError(f"Approval is already {approval.status}")

    now = datetime.now(timezone.utc)
    values = {"status": decision, "approved_by": approver_id, "approved_at": now}
    if decision == "approved":
        values["approval_notes"] = notes or ""
    else:
        values["rejection_reason"] = reason

    try:
        if not await _claim_pending(db, approval.id, **values):
            raise ConflictError("Approval has already been decided")

        wo = await crud.get_work_order(db, approval.work_order_id)
        if decision == "approved":
            await advance_phase(db, wo, parse_phase(approval.phase_completed))
        else:
            wo.status = "on_hold"
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Approval %s %s by %s", approval.id, decision, approver_id)
    return await crud.get_approval(db, approval.id)


async def cancel_approval(db: AsyncSession, approval_id: str, auth: AuthContext) -> WorkOrderApproval:
    """Withdraw a pending request. Only the requester or a supervisor may cancel."""
    approval = await crud.get_approval(db, approval_id)
    if not approval:
        raise NotFoundError("Approval not found")
    if approval.requested_by != auth.user_id and not auth.is_supervisor:
        raise PermissionDeniedError("Only the requester or a manager can cancel this approval")

    try:
        if not await _claim_pending(db, approval.id, status="cancelled"):
            raise ConflictError(f"Approval is already {approval.status}")
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return await crud.get_approval(db, approval.id)
