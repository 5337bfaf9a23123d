from __future__ import annotations
from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field


class QuoteGenerate(BaseModel):
    approval_id: str
    labor_rate: float | None = Field(default=None, ge=0)
    discount_amount: float = Field(default=0.0, ge=0)
    notes: str = ""


class QuoteStatusUpdate(BaseModel):
    status: Literal["sent", "accepted", "rejected", "expired"]


class QuoteLineItemRead(BaseModel):
    position: int
    item_type: str
    inventory_item_id: str | None = None
    part_number: str
    description: str
    quantity: float
    unit_price: float
    discount_percent: float
    line_total: float

    model_config = {"from_attributes": True}


class QuoteRead(BaseModel):
    id: str
    quote_number: str
    work_order_id: str
    approval_id: str | None = None
    customer_id: str | None = None
    status: str
    valid_until: date
    subtotal: float
    tax_rate: float
    tax_amount: float
    discount_amount: float
    total_amount: float
    notes: str
    created_by: str
    created_at: datetime
    sent_at: datetime | None = None
    accepted_at: datetime | None = None
    line_items: list[QuoteLineItemRead] = []

    model_config = {"from_attributes": True}
