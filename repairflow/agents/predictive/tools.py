"""Predictive maintenance tools: history loading and answer parsing."""

from __future__ import annotations

import json
import re

from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import WorkOrder

_RISK_SCORE_RE = re.compile(r"risk score[:\s]+(\d+)", re.IGNORECASE)


def parse_risk_score(analysis: str) -> int | None:
    """First "risk score: N" in the text, or None. The value is not range-checked."""
    match = _RISK_SCORE_RE.search(analysis)
    return int(match.group(1)) if match else None


def confidence_for(data_points: int, threshold: int = 10) -> str:
    return "high" if data_points > threshold else "medium"


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def work_order_summary(wo: WorkOrder) -> dict:
    return {
        "work_order_number": wo.work_order_number,
        "work_type": wo.work_type,
        "priority": wo.priority,
        "status": wo.status,
        "current_phase": wo.current_phase,
        "reported_issue": wo.reported_issue,
        "estimated_hours": wo.estimated_hours,
        "actual_hours": wo.actual_hours,
        "started_at": _iso(wo.started_at),
        "completed_at": _iso(wo.completed_at),
    }


async def load_unit_history(db: AsyncSession, unit_id: str, limit: int = 20) -> dict:
    """Most recent work orders for one unit, each with its work sessions and installed parts."""
    work_orders = await crud.list_work_orders_for_units(db, [unit_id], limit=limit)
    recent = []
    for wo in work_orders:
        entry = work_order_summary(wo)
        entry["work_sessions"] = [
            {
                "phase": ws.phase,
                "status": ws.status,
                "progress_percentage": ws.progress_percentage,
                "started_at": _iso(ws.started_at),
                "completed_at": _iso(ws.completed_at),
            }
            for ws in await crud.list_sessions_for_work_order(db, wo.id)
        ]
        entry["work_order_parts"] = [
            {
                "part_number": p.item.part_number if p.item else "",
                "description": p.item.description if p.item else "",
                "category": p.item.category if p.item else "",
                "quantity_used": p.quantity_used,
                "unit_cost": p.unit_cost,
                "installed_at": _iso(p.installed_at),
            }
            for p in await crud.list_parts_for_work_order(db, wo.id)
        ]
        recent.append(entry)
    return {
        "equipmentUnitId": unit_id,
        "totalWorkOrders": len(work_orders),
        "recentWorkOrders": recent,
    }


async def load_model_history(db: AsyncSession, model_id: str) -> dict:
    """All work orders across every unit of an equipment model."""
    units = await crud.list_equipment_units(db, equipment_model_id=model_id)
    work_orders = await crud.list_work_orders_for_units(db, [u.id for u in units])
    return {
        "equipmentModelId": model_id,
        "totalUnits": len(units),
        "totalWorkOrders": len(work_orders),
        "recentWorkOrders": [work_order_summary(wo) for wo in work_orders],
    }


def history_json(history: dict) -> str:
    return json.dumps(history, indent=2, default=str)
