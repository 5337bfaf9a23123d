"""Technician time clock against work orders.

A technician has at most one active entry. Closing an entry fills in total and
billable hours and rolls the work order's ``actual_hours`` up from the billable
hours of its closed entries.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.models import TimeEntry
from repairflow.services.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from repairflow.services.phases import is_terminal

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def close_entry(entry: TimeEntry, clock_out: datetime, break_minutes: int | None = None) -> TimeEntry:
    """Stamp ``clock_out`` and compute hours in place without committing."""
    if break_minutes is not None:
        entry.break_duration_minutes = break_minutes
    start = _as_utc(entry.clock_in_time)
    end = _as_utc(clock_out)
    if end < start:
        raise ValidationError("Clock-out time is before clock-in time")
    total = (end - start).total_seconds() / 3600
    entry.clock_out_time = end
    entry.total_hours = round(total, 2)
    entry.billable_hours = round(max(0.0, total - (entry.break_duration_minutes or 0) / 60), 2)
    entry.status = "completed"
    return entry


async def _roll_up_hours(db: AsyncSession, work_order_id: str) -> None:
    wo = await crud.get_work_order(db, work_order_id)
    entries = await crud.list_time_entries(db, work_order_id=work_order_id)
    wo.actual_hours = round(sum(e.billable_hours or 0 for e in entries if e.status != "active"), 2)


async def clock_in(
    db: AsyncSession,
    user_id: str,
    work_order_id: str,
    work_session_id: str | None = None,
    notes: str = "",
) -> TimeEntry:
    if await crud.get_active_time_entry(db, user_id):
        raise ConflictError("Already clocked in; clock out first")
    wo = await crud.get_work_order(db, work_order_id)
    if not wo:
        raise NotFoundError("Work order not found")
    if is_terminal(wo.current_phase):
        raise ConflictError(f"Work order is {wo.current_phase}")
    if work_session_id:
        ws = await crud.get_work_session(db, work_session_id)
        if not ws or ws.work_order_id != wo.id:
            raise ValidationError("Work session does not belong to this work order")

    entry = TimeEntry(
        user_id=user_id, work_order_id=wo.id, work_session_id=work_session_id, notes=notes,
    )
    db.add(entry)
    await db.commit()
    logger.info("User %s clocked in on work order %s", user_id, wo.id)
    return await crud.get_time_entry(db, entry.id)


async def clock_out(
    db: AsyncSession, entry_id: str, user_id: str, break_minutes: int = 0, notes: str | None = None,
) -> TimeEntry:
    entry = await crud.get_time_entry(db, entry_id)
    if not entry:
        raise NotFoundError("Time entry not found")
    if entry.user_id != user_id:
        raise PermissionDeniedError("Only the technician who clocked in can clock out")
    if entry.status != "active":
        raise ConflictError(f"Time entry is {entry.status}")
    if break_minutes < 0:
        raise ValidationError("Break minutes cannot be negative")

    try:
        close_entry(entry, datetime.now(timezone.utc), break_minutes)
        if notes:
            entry.notes = notes
        await _roll_up_hours(db, entry.work_order_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("User %s clocked out of work order %s (%.2fh)", user_id, entry.work_order_id, entry.total_hours)
    return await crud.get_time_entry(db, entry.id)


async def close_open_entries(db: AsyncSession, entries: list[TimeEntry]) -> None:
    """Close the given active entries now. Part of the caller's transaction."""
    if not entries:
        return
    now = datetime.now(timezone.utc)
    for entry in entries:
        close_entry(entry, now)
    for work_order_id in {e.work_order_id for e in entries}:
        await _roll_up_hours(db, work_order_id)


async def approve_time_entry(db: AsyncSession, entry_id: str, approver_id: str) -> TimeEntry:
    entry = await crud.get_time_entry(db, entry_id)
    if not entry:
        raise NotFoundError("Time entry not found")
    if entry.status != "completed":
        raise ConflictError(f"Time entry is {entry.status}")
    entry.status = "approved"
    entry.approved_by = approver_id
    entry.approved_at = datetime.now(timezone.utc)
    await db.commit()
    return await crud.get_time_entry(db, entry.id)


async def summarize_hours(db: AsyncSession, user_id: str, now: datetime | None = None) -> dict:
    """Closed hours for today, this week (from Monday) and this month, plus the active entry."""
    now = _as_utc(now or datetime.now(timezone.utc))
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = day_start - timedelta(days=day_start.weekday())
    month_start = day_start.replace(day=1)

    entries = await crud.list_time_entries(db, user_id=user_id, since=min(week_start, month_start))
    closed = [e for e in entries if e.status != "active"]

    def total(since: datetime) -> float:
        return round(sum(e.total_hours or 0 for e in closed if _as_utc(e.clock_in_time) >= since), 2)

    active = await crud.get_active_time_entry(db, user_id)
    return {
        "today_hours": total(day_start),
        "week_hours": total(week_start),
        "month_hours": total(month_start),
        "active_entry_id": active.id if active else None,
    }
