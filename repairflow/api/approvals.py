"""Approval API: request sign-off to leave a gated phase, decide, withdraw."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import approvals
from repairflow.schemas import ApprovalRequest, ApprovalDecision, ApprovalRead

router = APIRouter(prefix="/api/approvals", tags=["approvals"])

APPROVAL_STATUSES = ("pending", "approved", "rejected", "cancelled")


@router.post("", response_model=ApprovalRead, status_code=201)
async def request_approval(
    body: ApprovalRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await approvals.request_approval(
        db,
        work_order_id=body.work_order_id,
        phase_completed=body.phase_completed.value,
        next_phase_value=body.next_phase.value,
        requested_by=auth.user_id,
        findings_summary=body.findings_summary,
        required_parts=[p.model_dump() for p in body.required_parts],
        estimated_cost=body.estimated_cost,
        estimated_hours=body.estimated_hours,
    )


@router.get("", response_model=list[ApprovalRead])
async def list_approvals(
    status: str | None = None,
    work_order_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if status and status not in APPROVAL_STATUSES:
        raise HTTPException(400, f"status must be one of {', '.join(APPROVAL_STATUSES)}")
    return await crud.list_approvals(db, status=status, work_order_id=work_order_id)


@router.get("/{approval_id}", response_model=ApprovalRead)
async def get_approval(
    approval_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    approval = await crud.get_approval(db, approval_id)
    if not approval:
        raise HTTPException(404, "Approval not found")
    return approval


@router.post("/{approval_id}/decision", response_model=ApprovalRead)
async def decide_approval(
    approval_id: str,
    body: ApprovalDecision,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await approvals.decide_approval(
        db, approval_id, body.decision, auth.user_id,
        notes=body.notes, reason=body.reason,
    )


@router.post("/{approval_id}/cancel", response_model=ApprovalRead)
async def cancel_approval(
    approval_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await approvals.cancel_approval(db, approval_id, auth)
