"""Dashboard API: shop-wide counts and the caller's own queue."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth
from repairflow.models import WorkOrder
from repairflow.services.auth import AuthContext
from repairflow.services.phases import phase_label

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary")
async def dashboard_summary(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    by_status = await crud.count_work_orders_by(db, WorkOrder.status)
    return {
        "work_orders_by_status": by_status,
        "work_orders_by_phase": await crud.count_work_orders_by(db, WorkOrder.current_phase),
        "open_by_priority": await crud.count_open_work_orders_by_priority(db),
        "pending_approvals": await crud.count_pending_approvals(db),
        "active_sessions": await crud.count_sessions_by_status(db, "in_progress"),
        "low_stock_items": await crud.count_low_stock_items(db),
        "clocked_in": await crud.count_active_time_entries(db),
        "total_work_orders": sum(by_status.values()),
    }


@router.get("/my-work")
async def my_work(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Open assignments for the caller, oldest first."""
    items = []
    for a in await crud.list_open_assignments_for_user(db, auth.user_id):
        wo = await crud.get_work_order(db, a.work_order_id)
        if not wo:
            continue
        items.append({
            "assignment_id": a.id,
            "assignment_status": a.status,
            "phase": a.phase,
            "phase_label": phase_label(a.phase),
            "work_order_id": wo.id,
            "work_order_number": wo.work_order_number,
            "work_order_phase": wo.current_phase,
            "priority": wo.priority,
            "serial_number": wo.equipment_unit.serial_number if wo.equipment_unit else "",
            "assigned_at": a.assigned_at.isoformat(),
        })
    return {"assignments": items}
