"""Parts inventory: catalog items, stock per warehouse, movements and parts installed on work orders."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Float, Boolean, ForeignKey, JSON, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin, utcnow


class Warehouse(Base, ULIDMixin):
    __tablename__ = "warehouses"

    name: Mapped[str] = mapped_column(String(255), unique=True)
    address: Mapped[dict] = mapped_column(JSON, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class InventoryItem(Base, ULIDMixin):
    __tablename__ = "inventory_items"

    part_number: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str] = mapped_column(String(1000))
    # bearings | seals | gaskets | windings | impellers | shafts | couplings | fasteners
    # | lubricants | electrical | tools | consumables | other
    category: Mapped[str] = mapped_column(String(20), default="other")
    unit_of_measure: Mapped[str] = mapped_column(String(20), default="EA")
    unit_cost: Mapped[float] = mapped_column(Float, default=0.0)
    reorder_level: Mapped[int] = mapped_column(Integer, default=0)
    reorder_quantity: Mapped[int] = mapped_column(Integer, default=0)
    specifications: Mapped[dict] = mapped_column(JSON, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    stock = relationship("WarehouseStock", back_populates="item", lazy="selectin")


class WarehouseStock(Base, ULIDMixin):
    __tablename__ = "warehouse_stock"
    __table_args__ = (UniqueConstraint("inventory_item_id", "warehouse_id"),)

    inventory_item_id: Mapped[str] = mapped_column(String(26), ForeignKey("inventory_items.id"), index=True)
    warehouse_id: Mapped[str] = mapped_column(String(26), ForeignKey("warehouses.id"))
    quantity_on_hand: Mapped[int] = mapped_column(Integer, default=0)
    quantity_reserved: Mapped[int] = mapped_column(Integer, default=0)
    last_counted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    item = relationship("InventoryItem", back_populates="stock")

    @property
    def quantity_available(self) -> int:
        return self.quantity_on_hand - self.quantity_reserved


class StockTransaction(Base, ULIDMixin):
    """Append-only ledger of every stock movement."""

    __tablename__ = "stock_transactions"

    inventory_item_id: Mapped[str] = mapped_column(String(26), ForeignKey("inventory_items.id"), index=True)
    warehouse_id: Mapped[str] = mapped_column(String(26), ForeignKey("warehouses.id"))
    # purchase | usage | adjustment | return | damaged
    transaction_type: Mapped[str] = mapped_column(String(20))
    quantity: Mapped[int] = mapped_column(Integer)  # signed: negative when stock leaves
    reference_type: Mapped[str] = mapped_column(String(30), default="")
    reference_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    performed_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    notes: Mapped[str] = mapped_column(String(2000), default="")


class WorkOrderPart(Base, ULIDMixin):
    __tablename__ = "work_order_parts"

    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    work_session_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("work_sessions.id"), nullable=True
    )
    inventory_item_id: Mapped[str] = mapped_column(String(26), ForeignKey("inventory_items.id"))
    warehouse_id: Mapped[str] = mapped_column(String(26), ForeignKey("warehouses.id"))
    quantity_used: Mapped[int] = mapped_column(Integer)
    unit_cost: Mapped[float] = mapped_column(Float, default=0.0)  # item cost when installed
    serial_numbers: Mapped[list] = mapped_column(JSON, default=list)
    installed_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    installed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    notes: Mapped[str] = mapped_column(String(2000), default="")

    item = relationship("InventoryItem", lazy="selectin")
