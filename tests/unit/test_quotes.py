from datetime import datetime, timedelta, timezone

import pytest

from repairflow.db import crud
from repairflow.services.approvals import decide_approval, request_approval
from repairflow.services.errors import ConflictError, ValidationError
from repairflow.services.pdf_generator import build_quote_context, render_quote_html
from repairflow.services.quotes import (
    generate_quote_from_approval,
    line_total,
    set_quote_status,
)
from repairflow.services.work_orders import complete_phase

PARTS = [
    {"part_number": "6309-2Z", "description": "DE bearing", "quantity": 2, "estimated_cost": 42.5},
    {"part_number": "GSK-256", "quantity": 1},
]


@pytest.fixture
def scope_approval(db, shop, work_order, run_phase):
    async def _request(parts=PARTS, hours=4):
        for phase in ("initial_testing", "teardown"):
            await run_phase(work_order.id)
            await complete_phase(db, await crud.get_work_order(db, work_order.id), phase)
        await run_phase(work_order.id)
        return await request_approval(
            db, work_order.id, "repair_scope", "rebuild", shop.tech.id,
            required_parts=parts, estimated_hours=hours,
        )
    return _request


def test_line_total():
    assert line_total(2, 42.5) == 85.0
    assert line_total(3, 10.0, discount_percent=10) == 27.0


async def test_quote_from_approval(db, shop, stock, work_order, scope_approval):
    approval = await scope_approval()

    quote = await generate_quote_from_approval(db, approval.id, shop.manager.id)

    assert quote.quote_number.startswith("Q-")
    assert quote.quote_number.endswith("-0001")
    assert quote.status == "draft"
    assert quote.work_order_id == work_order.id
    assert quote.customer_id == shop.customer.id
    lines = [(li.item_type, li.part_number, li.quantity, li.unit_price, li.line_total) for li in quote.line_items]
    assert lines == [
        ("part", "6309-2Z", 2, 42.5, 85.0),
        ("part", "GSK-256", 1, 12.0, 12.0),
        ("labor", "", 4, 95.0, 380.0),
    ]
    assert quote.line_items[1].inventory_item_id == stock.gasket.id
    assert quote.line_items[1].description == "End bell gasket"
    assert quote.subtotal == 477.0
    assert quote.tax_rate == 8.0
    assert quote.tax_amount == 38.16
    assert quote.total_amount == 515.16
    assert quote.valid_until == datetime.now(timezone.utc).date() + timedelta(days=30)


async def test_discount_and_labor_rate(db, shop, stock, scope_approval):
    approval = await scope_approval()
    quote = await generate_quote_from_approval(
        db, approval.id, shop.manager.id, labor_rate=100.0, discount_amount=20.0,
    )
    assert quote.subtotal == 497.0
    assert quote.total_amount == round(497.0 + 39.76 - 20.0, 2)


async def test_nothing_to_quote(db, shop, scope_approval):
    approval = await scope_approval(parts=[], hours=None)
    with pytest.raises(ValidationError, match="no parts or labor"):
        await generate_quote_from_approval(db, approval.id, shop.manager.id)


async def test_rejected_approval_cannot_be_quoted(db, shop, stock, scope_approval):
    approval = await scope_approval()
    await decide_approval(db, approval.id, "rejected", shop.manager.id, reason="customer declined")
    with pytest.raises(ConflictError, match="rejected"):
        await generate_quote_from_approval(db, approval.id, shop.manager.id)


async def test_status_flow(db, shop, stock, scope_approval):
    approval = await scope_approval()
    quote = await generate_quote_from_approval(db, approval.id, shop.manager.id)

    with pytest.raises(ConflictError):
        await set_quote_status(db, quote.id, "accepted")

    sent = await set_quote_status(db, quote.id, "sent")
    assert sent.sent_at is not None
    accepted = await set_quote_status(db, quote.id, "accepted")
    assert accepted.status == "accepted"
    assert accepted.accepted_at is not None

    with pytest.raises(ConflictError):
        await set_quote_status(db, quote.id, "rejected")


async def test_late_acceptance_expires_quote(db, shop, stock, scope_approval):
    approval = await scope_approval()
    quote = await generate_quote_from_approval(db, approval.id, shop.manager.id)
    await set_quote_status(db, quote.id, "sent")

    with pytest.raises(ConflictError, match="expired"):
        await set_quote_status(db, quote.id, "accepted", today=quote.valid_until + timedelta(days=1))
    assert (await crud.get_quote(db, quote.id)).status == "expired"


async def test_quote_html(db, shop, stock, scope_approval):
    approval = await scope_approval()
    quote = await generate_quote_from_approval(db, approval.id, shop.manager.id, notes="Net 30")

    html = render_quote_html(await build_quote_context(db, quote.id))

    assert quote.quote_number in html
    assert "Acme Water Works" in html
    assert "End bell gasket" in html
    assert "$515.16" in html
    assert "Net 30" in html
