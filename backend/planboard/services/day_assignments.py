from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment import Assignment
from planboard.models.day_assignment import DayAssignment
from planboard.services.date_ranges import day_key, parse_day
from planboard.services.errors import NotFoundError, ValidationError
from planboard.services.group_merge import sync_assignment_groups


logger = logging.getLogger(__name__)


async def require_assignment(db: AsyncSession, assignment_id: uuid.UUID) -> Assignment:
    assignment = (
        await db.execute(select(Assignment).where(Assignment.id == assignment_id))
    ).scalar_one_or_none()
    if assignment is None:
        raise ValidationError("Assignment not found")
    return assignment


async def list_day_assignments(
    db: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    assignment_id: uuid.UUID | None = None,
) -> list[DayAssignment]:
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValidationError("start_date must be <= end_date")
    stmt = select(DayAssignment)
    if start_date is not None:
        stmt = stmt.where(DayAssignment.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(DayAssignment.date <= end_date)
    if assignment_id is not None:
        stmt = stmt.where(DayAssignment.assignment_id == assignment_id)
    stmt = stmt.order_by(DayAssignment.assignment_id, DayAssignment.date)
    return list((await db.execute(stmt)).scalars().all())


async def _existing_days(
    db: AsyncSession, assignment_id: uuid.UUID, days: Iterable[date]
) -> dict[str, DayAssignment]:
    days = list(days)
    if not days:
        return {}
    rows = (
        await db.execute(
            select(DayAssignment).where(
                DayAssignment.assignment_id == assignment_id,
                DayAssignment.date.in_(days),
            )
        )
    ).scalars().all()
    return {day_key(row.date): row for row in rows}


async def create_day_assignment(
    db: AsyncSession, *, assignment_id: uuid.UUID, day: date
) -> tuple[DayAssignment, bool]:
    """Schedule one day. Returns the record and whether it was newly created.

    Creating a day that already exists changes nothing.
    """
    await require_assignment(db, assignment_id)
    existing = (await _existing_days(db, assignment_id, [day])).get(day_key(day))
    if existing is not None:
        return existing, False

    record = DayAssignment(assignment_id=assignment_id, date=day)
    db.add(record)
    await sync_assignment_groups(db, assignment_id)
    return record, True


async def create_day_assignments(
    db: AsyncSession, *, assignment_id: uuid.UUID, days: Iterable[date]
) -> list[DayAssignment]:
    """Schedule several days at once and return the newly created records."""
    keys = sorted({day_key(d) for d in days})
    if not keys:
        raise ValidationError("dates required")
    await require_assignment(db, assignment_id)

    existing = await _existing_days(db, assignment_id, [parse_day(k) for k in keys])
    created = [DayAssignment(assignment_id=assignment_id, date=parse_day(k)) for k in keys if k not in existing]
    db.add_all(created)
    await sync_assignment_groups(db, assignment_id)
    logger.debug("Batch created %d of %d days for assignment %s", len(created), len(keys), assignment_id)
    return created


async def get_day_assignment(db: AsyncSession, day_assignment_id: uuid.UUID) -> DayAssignment:
    record = (
        await db.execute(select(DayAssignment).where(DayAssignment.id == day_assignment_id))
    ).scalar_one_or_none()
    if record is None:
        raise NotFoundError("Day assignment not found")
    return record


async def update_day_comment(
    db: AsyncSession, *, day_assignment_id: uuid.UUID, comment: str | None
) -> DayAssignment:
    record = await get_day_assignment(db, day_assignment_id)
    record.comment = comment or None
    await db.flush()
    return record


async def delete_day_assignment(db: AsyncSession, *, day_assignment_id: uuid.UUID) -> DayAssignment:
    record = await get_day_assignment(db, day_assignment_id)
    await db.delete(record)
    await sync_assignment_groups(db, record.assignment_id)
    return record


async def delete_day_assignments(
    db: AsyncSession, *, day_assignment_ids: Iterable[uuid.UUID]
) -> list[DayAssignment]:
    """Delete several days. Nothing is deleted when any id is unknown."""
    ids = set(day_assignment_ids)
    if not ids:
        raise ValidationError("ids required")
    rows = (
        await db.execute(select(DayAssignment).where(DayAssignment.id.in_(ids)))
    ).scalars().all()
    if len(rows) != len(ids):
        raise NotFoundError("Day assignment not found")

    for row in rows:
        await db.delete(row)
    for assignment_id in sorted({row.assignment_id for row in rows}, key=str):
        await sync_assignment_groups(db, assignment_id)
    return list(rows)
