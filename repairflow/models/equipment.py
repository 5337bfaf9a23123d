"""Equipment registry: manufacturers, types, models and serialized units."""

from __future__ import annotations

from datetime import date

from sqlalchemy import String, Float, Date, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin


class Manufacturer(Base, ULIDMixin):
    __tablename__ = "manufacturers"

    name: Mapped[str] = mapped_column(String(255), unique=True)
    contact_info: Mapped[dict] = mapped_column(JSON, default=dict)
    support_url: Mapped[str] = mapped_column(String(500), default="")


class EquipmentType(Base, ULIDMixin):
    __tablename__ = "equipment_types"

    name: Mapped[str] = mapped_column(String(255), unique=True)
    category: Mapped[str] = mapped_column(String(20), default="other")  # motor | pump | gearbox | other
    description: Mapped[str] = mapped_column(String(2000), default="")


class EquipmentModel(Base, ULIDMixin):
    __tablename__ = "equipment_models"

    manufacturer_id: Mapped[str] = mapped_column(String(26), ForeignKey("manufacturers.id"))
    equipment_type_id: Mapped[str] = mapped_column(String(26), ForeignKey("equipment_types.id"))
    model_number: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(2000), default="")
    specifications: Mapped[dict] = mapped_column(JSON, default=dict)
    torque_specs: Mapped[dict] = mapped_column(JSON, default=dict)
    tolerances: Mapped[dict] = mapped_column(JSON, default=dict)
    documentation_links: Mapped[list] = mapped_column(JSON, default=list)

    manufacturer = relationship("Manufacturer", lazy="selectin")
    equipment_type = relationship("EquipmentType", lazy="selectin")


class EquipmentUnit(Base, ULIDMixin):
    __tablename__ = "equipment_units"

    equipment_model_id: Mapped[str] = mapped_column(String(26), ForeignKey("equipment_models.id"))
    customer_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("customers.id"), nullable=True)
    serial_number: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    asset_tag: Mapped[str] = mapped_column(String(100), default="")
    installation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str] = mapped_column(String(255), default="")
    operational_hours: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="active")  # active | in_repair | retired
    extra: Mapped[dict] = mapped_column("metadata", JSON, default=dict)

    equipment_model = relationship("EquipmentModel", lazy="selectin")
