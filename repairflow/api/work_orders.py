"""Work order API: create, list, assign, claim, complete a phase, cancel."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import work_orders as wo_service
from repairflow.services.phases import parse_phase, phase_label
from repairflow.schemas import (
    WorkOrderCreate, WorkOrderUpdate, WorkOrderRead,
    AssignmentRead, AssignRequest, PhaseCompleteRequest, CancelRequest,
    WorkSessionRead, PhaseReportRead, ApprovalRead,
)

router = APIRouter(prefix="/api/work-orders", tags=["work_orders"])


async def _load(db: AsyncSession, wo_id: str):
    wo = await crud.get_work_order(db, wo_id)
    if not wo:
        raise HTTPException(404, "Work order not found")
    return wo


def _summary(wo) -> dict:
    data = WorkOrderRead.model_validate(wo).model_dump()
    data["phase_label"] = phase_label(wo.current_phase)
    return data


@router.post("", status_code=201)
async def create_work_order(
    body: WorkOrderCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    unit = await crud.get_equipment_unit(db, body.equipment_unit_id)
    if not unit:
        raise HTTPException(404, "Equipment unit not found")
    if body.customer_id and not await crud.get_customer(db, body.customer_id):
        raise HTTPException(404, "Customer not found")

    fields = body.model_dump(exclude={"equipment_unit_id", "customer_id"})
    wo = await crud.create_work_order(
        db, unit.id,
        created_by=auth.user_id,
        customer_id=body.customer_id or unit.customer_id,
        **fields,
    )
    return _summary(wo)


@router.get("")
async def list_work_orders(
    status: str | None = None,
    phase: str | None = None,
    assigned_to: str | None = None,
    equipment_unit_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if phase:
        try:
            phase = parse_phase(phase).value
        except ValueError as e:
            raise HTTPException(400, str(e))
    orders = await crud.list_work_orders(
        db, status=status, phase=phase,
        assigned_to=assigned_to, equipment_unit_id=equipment_unit_id,
    )
    return [_summary(wo) for wo in orders]


@router.get("/{wo_id}")
async def get_work_order(
    wo_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    wo = await _load(db, wo_id)
    sessions = await crud.list_sessions_for_work_order(db, wo.id)
    reports = await crud.list_phase_reports(db, work_order_id=wo.id)

    data = _summary(wo)
    data["equipment_unit"] = {
        "id": wo.equipment_unit.id,
        "serial_number": wo.equipment_unit.serial_number,
        "model_number": wo.equipment_unit.equipment_model.model_number,
    } if wo.equipment_unit else None
    data["customer"] = {
        "id": wo.customer.id,
        "company_name": wo.customer.company_name,
    } if wo.customer else None
    data["assignments"] = [AssignmentRead.model_validate(a).model_dump() for a in wo.assignments]
    data["sessions"] = [
        WorkSessionRead.model_validate(s).model_dump(exclude={"completions"}) for s in sessions
    ]
    data["approvals"] = [ApprovalRead.model_validate(a).model_dump() for a in wo.approvals]
    data["reports"] = [
        PhaseReportRead.model_validate(r).model_dump(include={"id", "phase", "status", "failed_steps", "created_at"})
        for r in reports
    ]
    return data


@router.patch("/{wo_id}")
async def update_work_order(
    wo_id: str,
    body: WorkOrderUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    wo = await _load(db, wo_id)
    updates = body.model_dump(exclude_none=True)
    if updates.get("status") == "cancelled":
        raise HTTPException(400, "Use the cancel endpoint to cancel a work order")
    if updates:
        wo = await crud.update_work_order(db, wo, **updates)
    return _summary(wo)


# ── Phase workflow ────────────────────────────────────────

@router.post("/{wo_id}/assign", response_model=AssignmentRead, status_code=201)
async def assign_work_order(
    wo_id: str,
    body: AssignRequest,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    wo = await _load(db, wo_id)
    return await wo_service.assign_work_order(
        db, wo, body.technician_id, auth.user_id,
        phase=body.phase.value if body.phase else None,
        notes=body.notes,
    )


@router.post("/{wo_id}/claim", response_model=AssignmentRead, status_code=201)
async def claim_work_order_phase(
    wo_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Start the next phase yourself after finishing the previous one."""
    wo = await _load(db, wo_id)
    return await wo_service.claim_current_phase(db, wo, auth.user_id)


@router.post("/{wo_id}/complete-phase")
async def complete_work_order_phase(
    wo_id: str,
    body: PhaseCompleteRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    wo = await _load(db, wo_id)
    if not auth.is_supervisor:
        open_for_phase = await crud.list_open_assignments_for_phase(db, wo.id, body.phase.value)
        if not any(a.assigned_to == auth.user_id for a in open_for_phase):
            raise HTTPException(403, "Only the assigned technician or a manager can complete this phase")
    await wo_service.complete_phase(db, wo, body.phase.value)
    return _summary(await crud.get_work_order(db, wo.id))


@router.post("/{wo_id}/cancel")
async def cancel_work_order(
    wo_id: str,
    body: CancelRequest,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    wo = await _load(db, wo_id)
    wo = await wo_service.cancel_work_order(db, wo, reason=body.reason)
    return _summary(wo)
