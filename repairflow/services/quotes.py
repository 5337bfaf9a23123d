"""Customer quotes built from an approval request.

Parts come from the approval's ``required_parts``; a part without an
estimated cost is priced from the inventory catalog. The approval's estimated
hours become a labor line at the configured rate.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.config import get_settings
from repairflow.db import crud
from repairflow.models import Quote, QuoteLineItem
from repairflow.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

QUOTE_STATUSES = ("draft", "sent", "accepted", "rejected", "expired")

_TRANSITIONS = {
    "draft": ("sent", "expired"),
    "sent": ("accepted", "rejected", "expired"),
}


def line_total(quantity: float, unit_price: float, discount_percent: float = 0.0) -> float:
    return round(quantity * unit_price * (1 - discount_percent / 100), 2)


def quote_totals(lines: list[QuoteLineItem], tax_rate: float, discount_amount: float = 0.0) -> dict:
    """Tax is charged on the subtotal; the discount comes off after tax."""
    subtotal = round(sum(line.line_total for line in lines), 2)
    tax_amount = round(subtotal * tax_rate / 100, 2)
    return {
        "subtotal": subtotal,
        "tax_rate": tax_rate,
        "tax_amount": tax_amount,
        "discount_amount": round(discount_amount, 2),
        "total_amount": round(subtotal + tax_amount - discount_amount, 2),
    }


async def _part_lines(db: AsyncSession, required_parts: list[dict]) -> list[QuoteLineItem]:
    lines = []
    for part in required_parts:
        quantity = float(part.get("quantity") or 0)
        if quantity <= 0:
            continue
        part_number = str(part.get("part_number") or "").strip()
        item = await crud.get_inventory_item_by_part_number(db, part_number) if part_number else None
        price = part.get("estimated_cost")
        if price is None:
            price = item.unit_cost if item else 0.0
        description = part.get("description") or (item.description if item else part_number)
        lines.append(QuoteLineItem(
            item_type="part",
            inventory_item_id=item.id if item else None,
            part_number=part_number,
            description=description,
            quantity=quantity,
            unit_price=float(price),
            line_total=line_total(quantity, float(price)),
        ))
    return lines


async def generate_quote_from_approval(
    db: AsyncSession,
    approval_id: str,
    created_by: str,
    labor_rate: float | None = None,
    discount_amount: float = 0.0,
    notes: str = "",
) -> Quote:
    approval = await crud.get_approval(db, approval_id)
    if not approval:
        raise NotFoundError("Approval not found")
    if approval.status in ("rejected", "cancelled"):
        raise ConflictError(f"Approval is {approval.status}")
    if discount_amount < 0:
        raise ValidationError("Discount cannot be negative")

    wf = get_settings().workflow
    rate = wf.labor_rate if labor_rate is None else labor_rate
    lines = await _part_lines(db, approval.required_parts or [])
    if approval.estimated_hours:
        lines.append(QuoteLineItem(
            item_type="labor",
            description="Repair labor",
            quantity=approval.estimated_hours,
            unit_price=rate,
            line_total=line_total(approval.estimated_hours, rate),
        ))
    if not lines:
        raise ValidationError("Approval has no parts or labor to quote")
    for position, line in enumerate(lines, start=1):
        line.position = position

    totals = quote_totals(lines, wf.quote_tax_rate, discount_amount)
    if totals["total_amount"] < 0:
        raise ValidationError("Discount exceeds the quote total")

    wo = await crud.get_work_order(db, approval.work_order_id)
    quote = Quote(
        quote_number=await crud.next_quote_number(db),
        work_order_id=wo.id,
        approval_id=approval.id,
        customer_id=wo.customer_id,
        status="draft",
        valid_until=datetime.now(timezone.utc).date() + timedelta(days=wf.quote_valid_days),
        notes=notes,
        created_by=created_by,
        line_items=lines,
        **totals,
    )
    try:
        db.add(quote)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Quote %s generated from approval %s (%.2f)", quote.quote_number, approval.id, quote.total_amount)
    return await crud.get_quote(db, quote.id)


async def set_quote_status(db: AsyncSession, quote_id: str, status: str, today: date | None = None) -> Quote:
    """Move a quote along draft -> sent -> accepted | rejected. Open quotes may expire."""
    if status not in QUOTE_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(QUOTE_STATUSES)}")
    quote = await crud.get_quote(db, quote_id)
    if not quote:
        raise NotFoundError("Quote not found")
    if status not in _TRANSITIONS.get(quote.status, ()):
        raise ConflictError(f"Quote is {quote.status}; cannot mark {status}")

    today = today or datetime.now(timezone.utc).date()
    if status == "accepted" and quote.valid_until < today:
        await crud.update_quote(db, quote, status="expired")
        raise ConflictError(f"Quote expired on {quote.valid_until.isoformat()}")

    now = datetime.now(timezone.utc)
    stamps = {"sent": {"sent_at": now}, "accepted": {"accepted_at": now}}.get(status, {})
    return await crud.update_quote(db, quote, status=status, **stamps)
