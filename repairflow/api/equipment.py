"""Equipment reference data: manufacturers, types, models and serialized units."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.schemas import (
    ManufacturerCreate, ManufacturerRead,
    EquipmentTypeCreate, EquipmentTypeRead,
    EquipmentModelCreate, EquipmentModelRead,
    EquipmentUnitCreate, EquipmentUnitUpdate, EquipmentUnitRead,
    WorkOrderRead,
)

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


# ── Manufacturers ─────────────────────────────────────────

@router.post("/manufacturers", response_model=ManufacturerRead, status_code=201)
async def create_manufacturer(
    body: ManufacturerCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_manufacturer(db, body.name, body.contact_info, body.support_url)


@router.get("/manufacturers", response_model=list[ManufacturerRead])
async def list_manufacturers(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_manufacturers(db)


# ── Types ─────────────────────────────────────────────────

@router.post("/types", response_model=EquipmentTypeRead, status_code=201)
async def create_equipment_type(
    body: EquipmentTypeCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_equipment_type(db, body.name, body.category, body.description)


@router.get("/types", response_model=list[EquipmentTypeRead])
async def list_equipment_types(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_equipment_types(db)


# ── Models ────────────────────────────────────────────────

@router.post("/models", response_model=EquipmentModelRead, status_code=201)
async def create_equipment_model(
    body: EquipmentModelCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    if not await crud.get_manufacturer(db, body.manufacturer_id):
        raise HTTPException(404, "Manufacturer not found")
    if not await crud.get_equipment_type(db, body.equipment_type_id):
        raise HTTPException(404, "Equipment type not found")
    fields = body.model_dump(exclude={"manufacturer_id", "equipment_type_id", "model_number"})
    em = await crud.create_equipment_model(
        db, body.manufacturer_id, body.equipment_type_id, body.model_number, **fields,
    )
    return await crud.get_equipment_model(db, em.id)


@router.get("/models", response_model=list[EquipmentModelRead])
async def list_equipment_models(
    equipment_type_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_equipment_models(db, equipment_type_id=equipment_type_id)


@router.get("/models/{model_id}", response_model=EquipmentModelRead)
async def get_equipment_model(
    model_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    em = await crud.get_equipment_model(db, model_id)
    if not em:
        raise HTTPException(404, "Equipment model not found")
    return em


# ── Units ─────────────────────────────────────────────────

@router.post("/units", response_model=EquipmentUnitRead, status_code=201)
async def create_equipment_unit(
    body: EquipmentUnitCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    if not await crud.get_equipment_model(db, body.equipment_model_id):
        raise HTTPException(404, "Equipment model not found")
    if body.customer_id and not await crud.get_customer(db, body.customer_id):
        raise HTTPException(404, "Customer not found")
    if await crud.get_equipment_unit_by_serial(db, body.serial_number):
        raise HTTPException(409, "A unit with this serial number already exists")
    fields = body.model_dump(exclude={"equipment_model_id", "serial_number"})
    return await crud.create_equipment_unit(db, body.equipment_model_id, body.serial_number, **fields)


@router.get("/units", response_model=list[EquipmentUnitRead])
async def list_equipment_units(
    customer_id: str | None = None,
    equipment_model_id: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_equipment_units(
        db, customer_id=customer_id, equipment_model_id=equipment_model_id,
    )


@router.get("/units/{unit_id}", response_model=EquipmentUnitRead)
async def get_equipment_unit(
    unit_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    unit = await crud.get_equipment_unit(db, unit_id)
    if not unit:
        raise HTTPException(404, "Equipment unit not found")
    return unit


@router.patch("/units/{unit_id}", response_model=EquipmentUnitRead)
async def update_equipment_unit(
    unit_id: str,
    body: EquipmentUnitUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    unit = await crud.get_equipment_unit(db, unit_id)
    if not unit:
        raise HTTPException(404, "Equipment unit not found")
    return await crud.update_equipment_unit(db, unit, **body.model_dump(exclude_none=True))


@router.get("/units/{unit_id}/history", response_model=list[WorkOrderRead])
async def equipment_unit_history(
    unit_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Work orders raised against this unit, most recently completed first."""
    if not await crud.get_equipment_unit(db, unit_id):
        raise HTTPException(404, "Equipment unit not found")
    return await crud.list_work_orders_for_units(db, [unit_id])
