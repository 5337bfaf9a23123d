from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel


class CustomerCreate(BaseModel):
    company_name: str
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    address: dict[str, Any] = {}


class CustomerUpdate(BaseModel):
    company_name: str | None = None
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: dict[str, Any] | None = None
    is_active: bool | None = None


class CustomerRead(BaseModel):
    id: str
    company_name: str
    contact_person: str
    email: str
    phone: str
    address: dict[str, Any]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
