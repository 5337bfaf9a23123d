"""Phase report: the snapshot compiled when a work session's steps are done."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, ForeignKey, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from repairflow.models.base import Base, ULIDMixin


class PhaseReport(Base, ULIDMixin):
    __tablename__ = "phase_reports"

    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    # One report per session.
    work_session_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_sessions.id"), unique=True)
    phase: Mapped[str] = mapped_column(String(30))
    procedure_name: Mapped[str] = mapped_column(String(255), default="")
    equipment_details: Mapped[dict] = mapped_column(JSON, default=dict)
    # [{step_number, step_title, measurements, observations, result, completed_at}]
    step_completions: Mapped[list] = mapped_column(JSON, default=list)
    # [{storage_path, caption, photo_type, taken_at}]
    photos: Mapped[list] = mapped_column(JSON, default=list)
    summary: Mapped[str] = mapped_column(String(4000), default="")
    technician_notes: Mapped[str] = mapped_column(String(4000), default="")
    failed_steps: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft | submitted | approved | sent
    created_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    approved_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_to: Mapped[str] = mapped_column(String(255), default="")
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
