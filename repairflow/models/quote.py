"""Customer quotes priced from an approval's required parts plus labor."""

from __future__ import annotations

from datetime import datetime, date

from sqlalchemy import String, Integer, Float, Date, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin


class Quote(Base, ULIDMixin):
    __tablename__ = "quotes"

    quote_number: Mapped[str] = mapped_column(String(40), unique=True, index=True)
    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    approval_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("work_order_approvals.id"), nullable=True
    )
    customer_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("customers.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft | sent | accepted | rejected | expired
    valid_until: Mapped[date] = mapped_column(Date)
    subtotal: Mapped[float] = mapped_column(Float, default=0.0)
    tax_rate: Mapped[float] = mapped_column(Float, default=0.0)  # percent
    tax_amount: Mapped[float] = mapped_column(Float, default=0.0)
    discount_amount: Mapped[float] = mapped_column(Float, default=0.0)
    total_amount: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[str] = mapped_column(String(4000), default="")
    created_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    line_items = relationship(
        "QuoteLineItem", back_populates="quote",
        lazy="selectin", order_by="QuoteLineItem.position", cascade="all, delete-orphan",
    )


class QuoteLineItem(Base, ULIDMixin):
    __tablename__ = "quote_line_items"

    quote_id: Mapped[str] = mapped_column(String(26), ForeignKey("quotes.id"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)
    item_type: Mapped[str] = mapped_column(String(20))  # part | labor | service | other
    inventory_item_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("inventory_items.id"), nullable=True
    )
    part_number: Mapped[str] = mapped_column(String(100), default="")
    description: Mapped[str] = mapped_column(String(1000))
    quantity: Mapped[float] = mapped_column(Float, default=1.0)
    unit_price: Mapped[float] = mapped_column(Float, default=0.0)
    discount_percent: Mapped[float] = mapped_column(Float, default=0.0)
    line_total: Mapped[float] = mapped_column(Float, default=0.0)

    quote = relationship("Quote", back_populates="line_items")
