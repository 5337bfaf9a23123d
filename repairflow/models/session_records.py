"""Append-only records attached to a work session.

Photos, findings and installed parts are never edited once written. An AI
interaction only ever gains the technician's ``helpful``/``feedback`` rating.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, ForeignKey, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from repairflow.models.base import Base, ULIDMixin, utcnow


class Photo(Base, ULIDMixin):
    __tablename__ = "photos"

    work_session_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_sessions.id"), index=True)
    step_completion_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("step_completions.id"), nullable=True
    )
    storage_path: Mapped[str] = mapped_column(String(500))
    thumbnail_path: Mapped[str] = mapped_column(String(500), default="")
    photo_type: Mapped[str] = mapped_column(String(20), default="during")  # before | during | after | issue | reference
    caption: Mapped[str] = mapped_column(String(1000), default="")
    annotations: Mapped[list] = mapped_column(JSON, default=list)
    ai_analysis: Mapped[dict] = mapped_column(JSON, default=dict)
    extra: Mapped[dict] = mapped_column("metadata", JSON, default=dict)
    taken_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    taken_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class InspectionFinding(Base, ULIDMixin):
    __tablename__ = "inspection_findings"

    work_session_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_sessions.id"), index=True)
    step_completion_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("step_completions.id"), nullable=True
    )
    finding_type: Mapped[str] = mapped_column(String(20))  # wear | damage | out_of_spec | contamination | other
    severity: Mapped[str] = mapped_column(String(20))  # minor | moderate | major | critical
    component: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str] = mapped_column(String(4000))
    recommended_action: Mapped[str] = mapped_column(String(4000), default="")
    photo_ids: Mapped[list] = mapped_column(JSON, default=list)
    created_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))


class PartsUsed(Base, ULIDMixin):
    __tablename__ = "parts_used"

    work_session_id: Mapped[str] = mapped_column(String(26), ForeignKey("work_sessions.id"), index=True)
    part_number: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(1000), default="")
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    serial_numbers: Mapped[list] = mapped_column(JSON, default=list)
    installation_notes: Mapped[str] = mapped_column(String(2000), default="")
    installed_by: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    installed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class AIInteraction(Base, ULIDMixin):
    __tablename__ = "ai_interactions"

    work_session_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("work_sessions.id"), nullable=True, index=True
    )
    user_id: Mapped[str] = mapped_column(String(26), ForeignKey("users.id"))
    query: Mapped[str] = mapped_column(String(4000))
    context: Mapped[dict] = mapped_column(JSON, default=dict)
    response: Mapped[str] = mapped_column(String(8000), default="")
    helpful: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    feedback: Mapped[str] = mapped_column(String(2000), default="")
