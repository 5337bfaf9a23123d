from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import phase_reports
from repairflow.schemas import PhaseReportRead, PhaseReportSend

router = APIRouter(prefix="/api/phase-reports", tags=["phase_reports"])


async def _load(db: AsyncSession, report_id: str):
    report = await crud.get_phase_report(db, report_id)
    if not report:
        raise HTTPException(404, "Phase report not found")
    return report


@router.get("", response_model=list[PhaseReportRead])
async def list_reports(
    work_order_id: str | None = None,
    status: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if status and status not in phase_reports.REPORT_STATUSES:
        raise HTTPException(400, f"status must be one of {', '.join(phase_reports.REPORT_STATUSES)}")
    return await crud.list_phase_reports(db, work_order_id=work_order_id, status=status)


@router.get("/{report_id}", response_model=PhaseReportRead)
async def get_report(
    report_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _load(db, report_id)


@router.post("/{report_id}/approve", response_model=PhaseReportRead)
async def approve_report(
    report_id: str,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    report = await _load(db, report_id)
    return await phase_reports.approve_phase_report(db, report, auth.user_id)


@router.get("/{report_id}/pdf")
async def report_pdf(
    report_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await _load(db, report_id)
    from repairflow.services.pdf_generator import generate_phase_report_pdf
    pdf_bytes = await generate_phase_report_pdf(db, report_id)

    filename = f"phase_report_{report_id[:8]}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/{report_id}/send", response_model=PhaseReportRead)
async def send_report(
    report_id: str,
    body: PhaseReportSend,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    """E-mail the report PDF to the customer, or to ``to`` when given."""
    report = await _load(db, report_id)
    return await phase_reports.send_phase_report(db, report, to=body.to)
