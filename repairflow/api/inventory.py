"""Inventory API: warehouses, catalog, stock adjustments and parts installed on work orders."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services import inventory
from repairflow.schemas import (
    WarehouseCreate, WarehouseRead, InventoryItemCreate, InventoryItemUpdate, InventoryItemRead,
    StockAdjustment, StockRead, StockTransactionRead, WorkOrderPartCreate, WorkOrderPartRead,
)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


async def _load_item(db: AsyncSession, item_id: str):
    item = await crud.get_inventory_item(db, item_id)
    if not item:
        raise HTTPException(404, "Inventory item not found")
    return item


@router.post("/warehouses", response_model=WarehouseRead, status_code=201)
async def create_warehouse(
    body: WarehouseCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_warehouse(db, body.name, body.address)


@router.get("/warehouses", response_model=list[WarehouseRead])
async def list_warehouses(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_warehouses(db)


@router.post("/items", response_model=InventoryItemRead, status_code=201)
async def create_item(
    body: InventoryItemCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await inventory.create_item(db, **body.model_dump())


@router.get("/items", response_model=list[InventoryItemRead])
async def list_items(
    category: str | None = None,
    low_stock: bool = False,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if low_stock:
        return await inventory.list_low_stock(db)
    return await crud.list_inventory_items(db, category=category)


@router.get("/items/{item_id}", response_model=InventoryItemRead)
async def get_item(
    item_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await _load_item(db, item_id)


@router.patch("/items/{item_id}", response_model=InventoryItemRead)
async def update_item(
    item_id: str,
    body: InventoryItemUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    item = await _load_item(db, item_id)
    return await crud.update_inventory_item(db, item, **body.model_dump(exclude_unset=True))


@router.post("/items/{item_id}/stock", response_model=StockRead)
async def adjust_stock(
    item_id: str,
    body: StockAdjustment,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await inventory.adjust_stock(
        db, item_id, body.warehouse_id, body.quantity, body.transaction_type,
        performed_by=auth.user_id, notes=body.notes,
    )


@router.get("/items/{item_id}/transactions", response_model=list[StockTransactionRead])
async def list_transactions(
    item_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await _load_item(db, item_id)
    return await crud.list_stock_transactions(db, item_id)


@router.post("/work-orders/{wo_id}/parts", response_model=WorkOrderPartRead, status_code=201)
async def install_part(
    wo_id: str,
    body: WorkOrderPartCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await inventory.record_work_order_part(
        db, wo_id, body.inventory_item_id, body.warehouse_id, body.quantity,
        installed_by=auth.user_id,
        work_session_id=body.work_session_id,
        serial_numbers=body.serial_numbers,
        notes=body.notes,
    )


@router.get("/work-orders/{wo_id}/parts", response_model=list[WorkOrderPartRead])
async def list_work_order_parts(
    wo_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if not await crud.get_work_order(db, wo_id):
        raise HTTPException(404, "Work order not found")
    return await crud.list_parts_for_work_order(db, wo_id)
