"""Phase report compilation, review and delivery."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import PhaseReport, WorkSession
from repairflow.services.errors import ConflictError, DeliveryError, NotFoundError, ValidationError
from repairflow.services.time_tracking import close_open_entries
from repairflow.services.work_sessions import ensure_work_order_open

logger = logging.getLogger(__name__)

REPORT_STATUSES = ("draft", "submitted", "approved", "sent")


def default_summary(completed: int, total: int, procedure_name: str) -> str:
    return f"Completed {completed} of {total} steps in {procedure_name}."


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


async def build_report_payload(db: AsyncSession, ws: WorkSession) -> dict:
    """Denormalize a session's completions and photos into report fields."""
    template = ws.template
    steps = list(template.steps)
    by_step = {c.step_id: c for c in ws.completions}

    rows = []
    for step in steps:
        c = by_step.get(step.id)
        if not c:
            continue
        rows.append({
            "step_number": step.step_number,
            "step_title": step.title,
            "measurements": c.measurements or {},
            "observations": c.observations,
            "result": c.result,
            "completed_at": _iso(c.completed_at),
        })

    photos = [
        {
            "storage_path": p.storage_path,
            "caption": p.caption,
            "photo_type": p.photo_type,
            "taken_at": _iso(p.taken_at),
        }
        for p in await crud.list_photos_for_session(db, ws.id)
    ]

    return {
        "work_order_id": ws.work_order_id,
        "work_session_id": ws.id,
        "phase": ws.phase,
        "procedure_name": template.name,
        "equipment_details": ws.equipment_details or {},
        "step_completions": rows,
        "photos": photos,
        "failed_steps": sum(1 for r in rows if r["result"] == "fail"),
        "total_steps": len(steps),
        "summary": default_summary(len(rows), len(steps), template.name),
    }


async def preview_phase_report(db: AsyncSession, session_id: str) -> dict:
    ws = await crud.get_work_session(db, session_id)
    if not ws:
        raise NotFoundError("Work session not found")
    return await build_report_payload(db, ws)


async def submit_phase_report(
    db: AsyncSession,
    session_id: str,
    created_by: str,
    summary: str | None = None,
    technician_notes: str = "",
) -> PhaseReport:
    """Persist the report as submitted and close the session with its open time entries, in one commit.

    Only one report is accepted per session.
    """
    ws = await crud.get_work_session(db, session_id)
    if not ws:
        raise NotFoundError("Work session not found")
    if await crud.get_report_for_session(db, ws.id):
        raise ConflictError("A phase report already exists for this session")
    if ws.status == "cancelled":
        raise ConflictError("Work session is cancelled")
    await ensure_work_order_open(db, ws.work_order_id)

    payload = await build_report_payload(db, ws)
    if ws.current_step_id is not None or len(payload["step_completions"]) < payload["total_steps"]:
        raise ValidationError("All procedure steps must be completed before submitting the report")

    report = PhaseReport(
        work_order_id=ws.work_order_id,
        work_session_id=ws.id,
        phase=ws.phase,
        procedure_name=payload["procedure_name"],
        equipment_details=payload["equipment_details"],
        step_completions=payload["step_completions"],
        photos=payload["photos"],
        failed_steps=payload["failed_steps"],
        summary=summary.strip() if summary and summary.strip() else payload["summary"],
        technician_notes=technician_notes,
        status="submitted",
        created_by=created_by,
    )
    try:
        db.add(report)
        ws.status = "completed"
        ws.completed_at = datetime.now(timezone.utc)
        ws.progress_percentage = 100
        await close_open_entries(db, await crud.list_active_entries_for_session(db, ws.id))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("A phase report already exists for this session") from None
    except Exception:
        await db.rollback()
        raise

    await db.refresh(report)
    logger.info("Phase report %s submitted for session %s (%s)", report.id, ws.id, ws.phase)
    return report


async def approve_phase_report(db: AsyncSession, report: PhaseReport, approver_id: str) -> PhaseReport:
    if report.status != "submitted":
        raise ConflictError(f"Report is {report.status}")
    return await crud.update_phase_report(
        db, report,
        status="approved",
        approved_by=approver_id,
        approved_at=datetime.now(timezone.utc),
    )


async def send_phase_report(db: AsyncSession, report: PhaseReport, to: str | None = None) -> PhaseReport:
    """E-mail the rendered PDF to the customer and mark the report sent.

    Falls back to the work order's customer address when ``to`` is not given.
    """
    from repairflow.services.email import send_phase_report_email
    from repairflow.services.pdf_generator import generate_phase_report_pdf

    if report.status not in ("submitted", "approved"):
        raise ConflictError(f"Report is {report.status}")

    wo = await crud.get_work_order(db, report.work_order_id)
    recipient = to or (wo.customer.email if wo and wo.customer else "")
    if not recipient:
        raise ValidationError("No recipient e-mail address for this report")

    pdf = await generate_phase_report_pdf(db, report.id)
    if not send_phase_report_email(recipient, wo.work_order_number, report, pdf):
        raise DeliveryError("Report e-mail could not be delivered")

    return await crud.update_phase_report(
        db, report, status="sent", sent_to=recipient, sent_at=datetime.now(timezone.utc),
    )
