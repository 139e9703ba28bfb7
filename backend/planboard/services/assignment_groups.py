from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment_group import AssignmentGroup
from planboard.models.enums import AssignmentPriority
from planboard.services.date_ranges import day_span
from planboard.services.day_assignments import require_assignment
from planboard.services.errors import GroupConflictError, NotFoundError, ValidationError
from planboard.services.group_merge import load_assignment_days, sync_assignment_groups


_UNSET = object()


async def list_groups(
    db: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    assignment_id: uuid.UUID | None = None,
) -> list[AssignmentGroup]:
    """Groups whose range overlaps the window (open ends allowed)."""
    stmt = select(AssignmentGroup)
    if end_date is not None:
        stmt = stmt.where(AssignmentGroup.start_date <= end_date)
    if start_date is not None:
        stmt = stmt.where(AssignmentGroup.end_date >= start_date)
    if assignment_id is not None:
        stmt = stmt.where(AssignmentGroup.assignment_id == assignment_id)
    stmt = stmt.order_by(AssignmentGroup.assignment_id, AssignmentGroup.start_date)
    return list((await db.execute(stmt)).scalars().all())


async def get_group(db: AsyncSession, group_id: uuid.UUID) -> AssignmentGroup:
    group = (
        await db.execute(select(AssignmentGroup).where(AssignmentGroup.id == group_id))
    ).scalar_one_or_none()
    if group is None:
        raise NotFoundError("Assignment group not found")
    return group


async def create_group(
    db: AsyncSession,
    *,
    assignment_id: uuid.UUID,
    start_date: date,
    end_date: date,
    priority: AssignmentPriority = AssignmentPriority.normal,
    comment: str | None = None,
) -> AssignmentGroup:
    """Attach metadata to a run of scheduled days.

    Overlapping an existing group of the same assignment raises
    :class:`GroupConflictError`; the caller is expected to update that group
    instead. The new group is widened to the whole run it sits in.
    """
    if end_date < start_date:
        raise ValidationError("end_date must be >= start_date")
    await require_assignment(db, assignment_id)

    overlapping = (
        await db.execute(
            select(AssignmentGroup)
            .where(
                AssignmentGroup.assignment_id == assignment_id,
                AssignmentGroup.start_date <= end_date,
                AssignmentGroup.end_date >= start_date,
            )
            .order_by(AssignmentGroup.start_date)
        )
    ).scalars().first()
    if overlapping is not None:
        raise GroupConflictError(overlapping.id)

    days = await load_assignment_days(db, assignment_id)
    missing = [d for d in day_span(start_date, end_date) if d not in days]
    if missing:
        raise ValidationError(f"Group covers unassigned days: {', '.join(missing)}")

    group = AssignmentGroup(
        assignment_id=assignment_id,
        start_date=start_date,
        end_date=end_date,
        priority=priority,
        comment=comment or None,
    )
    db.add(group)
    await sync_assignment_groups(db, assignment_id)
    return group


async def update_group(
    db: AsyncSession,
    *,
    group_id: uuid.UUID,
    priority: AssignmentPriority | None = None,
    comment: str | None | object = _UNSET,
) -> AssignmentGroup:
    """Change a group's metadata. Dates are never touched here."""
    group = await get_group(db, group_id)
    if priority is not None:
        group.priority = priority
    if comment is not _UNSET:
        group.comment = comment or None
    await db.flush()
    return group


async def delete_group(db: AsyncSession, *, group_id: uuid.UUID) -> AssignmentGroup:
    group = await get_group(db, group_id)
    await db.delete(group)
    await db.flush()
    return group
