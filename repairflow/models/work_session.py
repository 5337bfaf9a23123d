"""Work sessions and the per-step completion records they accumulate."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, ForeignKey, JSON, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repairflow.models.base import Base, ULIDMixin, utcnow


class WorkSession(Base, ULIDMixin):
    __tablename__ = "work_sessions"

    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    assignment_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("work_order_assignments.id"), nullable=True
    )
    procedure_template_id: Mapped[str] = mapped_column(String(26), ForeignKey("procedure_templates.id"))
    technician_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    phase: Mapped[str] = mapped_column(String(30))
    status: Mapped[str] = mapped_column(String(20), default="in_progress")  # in_progress | paused | completed | cancelled
    current_step_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("procedure_steps.id"), nullable=True
    )
    progress_percentage: Mapped[int] = mapped_column(Integer, default=0)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # nameplate data captured during equipment identification
    equipment_details: Mapped[dict] = mapped_column(JSON, default=dict)

    template = relationship("ProcedureTemplate", lazy="selectin")
    completions = relationship(
        "StepCompletion", back_populates="session",
        lazy="selectin", order_by="StepCompletion.completed_at",
    )


class StepCompletion(Base, ULIDMixin):
    __tablename__ = "step_completions"
    __table_args__ = (UniqueConstraint("work_session_id", "step_id"),)

    work_session_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_sessions.id"), index=True)
    step_id: Mapped[str] = mapped_column(String(26), ForeignKey("procedure_steps.id"))
    status: Mapped[str] = mapped_column(String(20), default="completed")  # pending | in_progress | completed | skipped | failed
    result: Mapped[str] = mapped_column(String(10))  # pass | fail
    measurements: Mapped[dict] = mapped_column(JSON, default=dict)
    observations: Mapped[str] = mapped_column(String(4000), default="")
    issues_found: Mapped[str] = mapped_column(String(4000), default="")
    completed_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    time_spent_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    session = relationship("WorkSession", back_populates="completions")
    step = relationship("ProcedureStep", lazy="selectin")
