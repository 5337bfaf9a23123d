"""Procedure templates and their ordered steps."""

from __future__ import annotations

from sqlalchemy import String, Integer, Boolean, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin


class ProcedureTemplate(Base, ULIDMixin):
    __tablename__ = "procedure_templates"

    equipment_type_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("equipment_types.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255))
    version: Mapped[str] = mapped_column(String(20), default="1.0")
    procedure_type: Mapped[str] = mapped_column(String(20))  # teardown | inspection | rebuild | test | cleaning
    phase: Mapped[str] = mapped_column(String(30), index=True)
    estimated_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    required_tools: Mapped[list] = mapped_column(JSON, default=list)
    safety_requirements: Mapped[list] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)

    steps = relationship(
        "ProcedureStep",
        back_populates="template",
        lazy="selectin",
        order_by="ProcedureStep.step_number",
        cascade="all, delete-orphan",
    )


class ProcedureStep(Base, ULIDMixin):
    __tablename__ = "procedure_steps"
    __table_args__ = (UniqueConstraint("procedure_template_id", "step_number"),)

    procedure_template_id: Mapped[str] = mapped_column(String(26), ForeignKey("procedure_templates.id"))
    step_number: Mapped[int] = mapped_column(Integer)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(String(4000), default="")
    instructions: Mapped[str] = mapped_column(String(4000), default="")
    step_type: Mapped[str] = mapped_column(String(20), default="action")  # action | inspection | measurement | decision
    acceptance_criteria: Mapped[str] = mapped_column(String(2000), default="")
    # [{name, unit, min, max, target}]
    measurements_required: Mapped[list] = mapped_column(JSON, default=list)
    photo_required: Mapped[bool] = mapped_column(Boolean, default=False)
    estimated_time_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    safety_notes: Mapped[str] = mapped_column(String(2000), default="")
    reference_documents: Mapped[list] = mapped_column(JSON, default=list)

    template = relationship("ProcedureTemplate", back_populates="steps")
