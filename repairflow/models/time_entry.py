"""Technician clock-in/clock-out records against a work order."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Float, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from repairflow.models.base import Base, ULIDMixin, utcnow


class TimeEntry(Base, ULIDMixin):
    __tablename__ = "time_entries"

    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"), index=True)
    work_order_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_orders.id"), index=True)
    work_session_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("work_sessions.id"), nullable=True
    )
    clock_in_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    clock_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    break_duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    total_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    billable_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")  # active | completed | approved
    notes: Mapped[str] = mapped_column(String(2000), default="")
    approved_by: Mapped[str | None] = mapped_column(String(26), ForeignKey("users.id"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
