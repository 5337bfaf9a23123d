from __future__ import annotations
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, Field


class WarehouseCreate(BaseModel):
    name: str
    address: dict[str, Any] = {}


class WarehouseRead(BaseModel):
    id: str
    name: str
    address: dict[str, Any]
    is_active: bool

    model_config = {"from_attributes": True}


class InventoryItemCreate(BaseModel):
    part_number: str
    description: str
    category: str = "other"
    unit_of_measure: str = "EA"
    unit_cost: float = Field(default=0.0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    reorder_quantity: int = Field(default=0, ge=0)
    specifications: dict[str, Any] = {}


class InventoryItemUpdate(BaseModel):
    description: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)
    reorder_level: int | None = Field(default=None, ge=0)
    reorder_quantity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class StockRead(BaseModel):
    warehouse_id: str
    quantity_on_hand: int
    quantity_reserved: int
    quantity_available: int

    model_config = {"from_attributes": True}


class InventoryItemRead(BaseModel):
    id: str
    part_number: str
    description: str
    category: str
    unit_of_measure: str
    unit_cost: float
    reorder_level: int
    reorder_quantity: int
    specifications: dict[str, Any]
    is_active: bool
    stock: list[StockRead] = []

    model_config = {"from_attributes": True}


class StockAdjustment(BaseModel):
    warehouse_id: str
    quantity: int
    transaction_type: Literal["purchase", "adjustment", "return", "damaged"] = "purchase"
    notes: str = ""


class StockTransactionRead(BaseModel):
    id: str
    warehouse_id: str
    transaction_type: str
    quantity: int
    reference_type: str
    reference_id: str | None = None
    performed_by: str | None = None
    notes: str
    created_at: datetime

    model_config = {"from_attributes": True}


class WorkOrderPartCreate(BaseModel):
    inventory_item_id: str
    warehouse_id: str
    quantity: int = Field(ge=1)
    work_session_id: str | None = None
    serial_numbers: list[str] = []
    notes: str = ""


class WorkOrderPartRead(BaseModel):
    id: str
    work_order_id: str
    work_session_id: str | None = None
    inventory_item_id: str
    warehouse_id: str
    quantity_used: int
    unit_cost: float
    serial_numbers: list[str]
    installed_by: str
    installed_at: datetime
    notes: str

    model_config = {"from_attributes": True}
