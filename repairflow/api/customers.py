from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.schemas import CustomerCreate, CustomerUpdate, CustomerRead

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.post("", response_model=CustomerRead, status_code=201)
async def create_customer(
    body: CustomerCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    return await crud.create_customer(db, **body.model_dump())


@router.get("", response_model=list[CustomerRead])
async def list_customers(
    include_inactive: bool = False,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_customers(db, active_only=not include_inactive)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    customer = await crud.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer


@router.patch("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    customer = await crud.get_customer(db, customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return await crud.update_customer(db, customer, **body.model_dump(exclude_none=True))
