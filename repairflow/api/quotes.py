"""Quote API: generate from an approval, track status, download the PDF."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import quotes
from repairflow.schemas import QuoteGenerate, QuoteStatusUpdate, QuoteRead

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


async def _load(db: AsyncSession, quote_id: str):
    quote = await crud.get_quote(db, quote_id)
    if not quote:
        raise HTTPException(404, "Quote not found")
    return quote


@router.post("", response_model=QuoteRead, status_code=201)
async def generate_quote(
    body: QuoteGenerate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await quotes.generate_quote_from_approval(
        db, body.approval_id, auth.user_id,
        labor_rate=body.labor_rate, discount_amount=body.discount_amount, notes=body.notes,
    )


@router.get("", response_model=list[QuoteRead])
async def list_quotes(
    work_order_id: str | None = None,
    status: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if status and status not in quotes.QUOTE_STATUSES:
        raise HTTPException(400, f"status must be one of {', '.join(quotes.QUOTE_STATUSES)}")
    return await crud.list_quotes(db, work_order_id=work_order_id, status=status)


@router.get("/{quote_id}", response_model=QuoteRead)
async def get_quote(
    quote_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _load(db, quote_id)


@router.post("/{quote_id}/status", response_model=QuoteRead)
async def set_status(
    quote_id: str,
    body: QuoteStatusUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await quotes.set_quote_status(db, quote_id, body.status)


@router.get("/{quote_id}/pdf")
async def quote_pdf(
    quote_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    quote = await _load(db, quote_id)
    from repairflow.services.pdf_generator import generate_quote_pdf
    pdf_bytes = await generate_quote_pdf(db, quote_id)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={quote.quote_number}.pdf"},
    )
