from __future__ import annotations
from datetime import date, datetime
from typing import Any, Literal
from pydantic import BaseModel

EquipmentCategory = Literal["motor", "pump", "gearbox", "other"]
UnitStatus = Literal["active", "in_repair", "retired"]


class ManufacturerCreate(BaseModel):
    name: str
    contact_info: dict[str, Any] = {}
    support_url: str = ""


class ManufacturerRead(BaseModel):
    id: str
    name: str
    contact_info: dict[str, Any]
    support_url: str

    model_config = {"from_attributes": True}


class EquipmentTypeCreate(BaseModel):
    name: str
    category: EquipmentCategory = "other"
    description: str = ""


class EquipmentTypeRead(BaseModel):
    id: str
    name: str
    category: str
    description: str

    model_config = {"from_attributes": True}


class EquipmentModelCreate(BaseModel):
    manufacturer_id: str
    equipment_type_id: str
    model_number: str
    description: str = ""
    specifications: dict[str, Any] = {}
    torque_specs: dict[str, Any] = {}
    tolerances: dict[str, Any] = {}
    documentation_links: list[str] = []


class EquipmentModelRead(BaseModel):
    id: str
    manufacturer_id: str
    equipment_type_id: str
    model_number: str
    description: str
    specifications: dict[str, Any]
    torque_specs: dict[str, Any]
    tolerances: dict[str, Any]
    documentation_links: list[str]
    manufacturer: ManufacturerRead | None = None
    equipment_type: EquipmentTypeRead | None = None

    model_config = {"from_attributes": True}


class EquipmentUnitCreate(BaseModel):
    equipment_model_id: str
    serial_number: str
    customer_id: str | None = None
    asset_tag: str = ""
    installation_date: date | None = None
    location: str = ""
    operational_hours: float = 0.0


class EquipmentUnitUpdate(BaseModel):
    customer_id: str | None = None
    asset_tag: str | None = None
    location: str | None = None
    operational_hours: float | None = None
    status: UnitStatus | None = None


class EquipmentUnitRead(BaseModel):
    id: str
    equipment_model_id: str
    customer_id: str | None = None
    serial_number: str
    asset_tag: str
    installation_date: date | None = None
    location: str
    operational_hours: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
