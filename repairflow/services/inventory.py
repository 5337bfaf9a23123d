"""Stock movements and parts installed on work orders.

Every change to ``quantity_on_hand`` is written together with a
``StockTransaction`` row in the same commit.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import InventoryItem, StockTransaction, WarehouseStock, WorkOrderPart
from repairflow.services.errors import ConflictError, NotFoundError, ValidationError
from repairflow.services.phases import is_terminal

logger = logging.getLogger(__name__)

CATEGORIES = (
    "bearings", "seals", "gaskets", "windings", "impellers", "shafts", "couplings",
    "fasteners", "lubricants", "electrical", "tools", "consumables", "other",
)
ADJUSTMENT_TYPES = ("purchase", "adjustment", "return", "damaged")


def quantity_on_hand(item: InventoryItem) -> int:
    return sum(s.quantity_on_hand for s in item.stock)


def is_low_stock(item: InventoryItem) -> bool:
    return item.reorder_level > 0 and quantity_on_hand(item) <= item.reorder_level


async def create_item(db: AsyncSession, part_number: str, description: str, **fields) -> InventoryItem:
    part_number = (part_number or "").strip()
    if not part_number:
        raise ValidationError("Part number is required")
    category = fields.get("category") or "other"
    if category not in CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(CATEGORIES)}")
    if await crud.get_inventory_item_by_part_number(db, part_number):
        raise ConflictError(f"Part number {part_number} already exists")
    fields["category"] = category
    return await crud.create_inventory_item(db, part_number, description, **fields)


async def adjust_stock(
    db: AsyncSession,
    item_id: str,
    warehouse_id: str,
    quantity: int,
    transaction_type: str,
    performed_by: str | None = None,
    notes: str = "",
) -> WarehouseStock:
    """Apply a signed quantity change. Stock never goes below zero."""
    if transaction_type not in ADJUSTMENT_TYPES:
        raise ValidationError(f"transaction_type must be one of {', '.join(ADJUSTMENT_TYPES)}")
    if quantity == 0:
        raise ValidationError("Quantity must not be zero")
    if transaction_type in ("purchase", "return") and quantity < 0:
        raise ValidationError(f"A {transaction_type} must add stock")
    if transaction_type == "damaged" and quantity > 0:
        raise ValidationError("Damaged stock must be removed")
    if not await crud.get_inventory_item(db, item_id):
        raise NotFoundError("Inventory item not found")
    if not await crud.get_warehouse(db, warehouse_id):
        raise NotFoundError("Warehouse not found")

    stock = await crud.get_stock(db, item_id, warehouse_id)
    on_hand = stock.quantity_on_hand if stock else 0
    if on_hand + quantity < 0:
        raise ConflictError(f"Only {on_hand} on hand")

    try:
        if stock is None:
            stock = WarehouseStock(inventory_item_id=item_id, warehouse_id=warehouse_id, quantity_reserved=0)
            db.add(stock)
        stock.quantity_on_hand = on_hand + quantity
        db.add(StockTransaction(
            inventory_item_id=item_id,
            warehouse_id=warehouse_id,
            transaction_type=transaction_type,
            quantity=quantity,
            performed_by=performed_by,
            notes=notes,
        ))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Stock %s %+d for item %s at %s", transaction_type, quantity, item_id, warehouse_id)
    return await crud.get_stock(db, item_id, warehouse_id)


async def record_work_order_part(
    db: AsyncSession,
    work_order_id: str,
    inventory_item_id: str,
    warehouse_id: str,
    quantity: int,
    installed_by: str,
    work_session_id: str | None = None,
    serial_numbers: list[str] | None = None,
    notes: str = "",
) -> WorkOrderPart:
    """Install parts from stock on a work order.

    Draws ``quantity`` from the warehouse, logs a usage transaction and keeps
    the item's unit cost at the time of install.
    """
    if quantity <= 0:
        raise ValidationError("Quantity must be positive")
    wo = await crud.get_work_order(db, work_order_id)
    if not wo:
        raise NotFoundError("Work order not found")
    if is_terminal(wo.current_phase):
        raise ConflictError(f"Work order is {wo.current_phase}")
    if work_session_id:
        ws = await crud.get_work_session(db, work_session_id)
        if not ws or ws.work_order_id != wo.id:
            raise ValidationError("Work session does not belong to this work order")
    item = await crud.get_inventory_item(db, inventory_item_id)
    if not item:
        raise NotFoundError("Inventory item not found")

    stock = await crud.get_stock(db, item.id, warehouse_id)
    available = stock.quantity_available if stock else 0
    if available < quantity:
        raise ConflictError(f"Insufficient stock for {item.part_number}: {available} available")

    part = WorkOrderPart(
        work_order_id=wo.id,
        work_session_id=work_session_id,
        inventory_item_id=item.id,
        warehouse_id=warehouse_id,
        quantity_used=quantity,
        unit_cost=item.unit_cost,
        serial_numbers=list(serial_numbers or []),
        installed_by=installed_by,
        notes=notes,
    )
    try:
        db.add(part)
        stock.quantity_on_hand -= quantity
        db.add(StockTransaction(
            inventory_item_id=item.id,
            warehouse_id=warehouse_id,
            transaction_type="usage",
            quantity=-quantity,
            reference_type="work_order",
            reference_id=wo.id,
            performed_by=installed_by,
        ))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(part)
    logger.info("Installed %d x %s on work order %s", quantity, item.part_number, wo.id)
    return part


async def list_low_stock(db: AsyncSession) -> list[InventoryItem]:
    return [i for i in await crud.list_inventory_items(db) if is_low_stock(i)]
