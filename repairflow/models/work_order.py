"""Work order aggregate: the order itself, phase assignments and approval requests."""

from __future__ import annotations

from datetime import datetime, date

from sqlalchemy import String, Float, Date, ForeignKey, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin, utcnow


class WorkOrder(Base, ULIDMixin):
    __tablename__ = "work_orders"

    work_order_number: Mapped[str] = mapped_column(String(40), unique=True, index=True)
    equipment_unit_id: Mapped[str] = mapped_column(String(26), ForeignKey("equipment_units.id"))
    customer_id: Mapped[str | None] = mapped_column(String(26), ForeignKey("customers.id"), nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    work_type: Mapped[str] = mapped_column(String(20), default="repair")  # repair | inspection | rebuild | pm
    priority: Mapped[str] = mapped_column(String(20), default="medium")  # low | medium | high | emergency
    # pending | in_progress | on_hold | completed | cancelled | awaiting_parts | invoiced
    status: Mapped[str] = mapped_column(String(20), default="pending")
    current_phase: Mapped[str] = mapped_column(String(30), default="pending_assignment", index=True)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reported_issue: Mapped[str] = mapped_column(String(4000), default="")
    customer_po: Mapped[str] = mapped_column(String(100), default="")
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    equipment_unit = relationship("EquipmentUnit", lazy="selectin")
    customer = relationship("Customer", lazy="selectin")
    assignments = relationship(
        "WorkOrderAssignment", back_populates="work_order",
        lazy="selectin", order_by="WorkOrderAssignment.assigned_at",
    )
    approvals = relationship(
        "WorkOrderApproval", back_populates="work_order",
        lazy="selectin", order_by="WorkOrderApproval.requested_at",
    )


class WorkOrderAssignment(Base, ULIDMixin):
    __tablename__ = "work_order_assignments"

    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    assigned_to: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    assigned_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    phase: Mapped[str] = mapped_column(String(30))
    status: Mapped[str] = mapped_column(String(20), default="assigned")  # assigned | in_progress | completed | cancelled
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str] = mapped_column(String(2000), default="")

    work_order = relationship("WorkOrder", back_populates="assignments")


class WorkOrderApproval(Base, ULIDMixin):
    __tablename__ = "work_order_approvals"

    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    phase_completed: Mapped[str] = mapped_column(String(30))
    next_phase: Mapped[str] = mapped_column(String(30))
    requested_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    approved_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending | approved | rejected | cancelled
    findings_summary: Mapped[str] = mapped_column(String(4000), default="")
    # [{part_number, description, quantity, estimated_cost}]
    required_parts: Mapped[list] = mapped_column(JSON, default=list)
    estimated_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    approval_notes: Mapped[str] = mapped_column(String(4000), default="")
    rejection_reason: Mapped[str] = mapped_column(String(4000), default="")

    work_order = relationship("WorkOrder", back_populates="approvals")
