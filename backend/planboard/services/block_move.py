from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment_group import AssignmentGroup
from planboard.models.day_assignment import DayAssignment
from planboard.services.date_ranges import (
    DateRange,
    day_count,
    day_key,
    day_offset,
    parse_day,
    ranges_overlap,
    shift_day,
)
from planboard.services.day_assignments import require_assignment
from planboard.services.errors import ValidationError
from planboard.services.group_merge import load_assignment_groups, sync_assignment_groups


logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    merged_days: int
    moved_days: int
    offset_days: int
    metadata_conflicts: int = 0
    created: list[DayAssignment] = field(default_factory=list)
    deleted: list[DayAssignment] = field(default_factory=list)


def validate_move_shape(old_start: date, old_end: date, new_start: date, new_end: date) -> int:
    """Return the day offset of a move, rejecting anything but a translation."""
    if old_end < old_start or new_end < new_start:
        raise ValidationError("Range start must be <= end")
    if day_count(old_start, old_end) != day_count(new_start, new_end):
        raise ValidationError("Destination range must have the same length as the moved block")
    return day_offset(old_start, new_start)


async def _carry_groups(
    db: AsyncSession,
    *,
    assignment_id: uuid.UUID,
    block: DateRange,
    offset: int,
) -> list[uuid.UUID]:
    """Shift the groups covering ``block`` and return the ids that moved.

    A group lying entirely inside the block moves as is. A group that only
    partly covers it stays behind (the sync trims it) and a copy of its
    metadata is created for the moved part.
    """
    moved: list[uuid.UUID] = []
    for group in await load_assignment_groups(db, assignment_id):
        span = DateRange(day_key(group.start_date), day_key(group.end_date))
        if not ranges_overlap(span, block):
            continue
        if block.start <= span.start and span.end <= block.end:
            group.start_date = parse_day(shift_day(span.start, offset))
            group.end_date = parse_day(shift_day(span.end, offset))
            moved.append(group.id)
            continue
        part = DateRange(max(span.start, block.start), min(span.end, block.end)).shifted(offset)
        copy = AssignmentGroup(
            assignment_id=assignment_id,
            start_date=parse_day(part.start),
            end_date=parse_day(part.end),
            priority=group.priority,
            comment=group.comment,
        )
        db.add(copy)
        await db.flush()
        moved.append(copy.id)
    return moved


async def move_block(
    db: AsyncSession,
    *,
    assignment_id: uuid.UUID,
    old_start: date,
    old_end: date,
    new_start: date,
    new_end: date,
) -> MoveResult:
    """Translate a contiguous block of scheduled days by a whole number of days.

    Days already scheduled at the destination are absorbed and counted in
    ``merged_days``. Groups covering the block travel with it; where they
    land on a run that already has a group, the destination metadata is kept.
    """
    offset = validate_move_shape(old_start, old_end, new_start, new_end)
    await require_assignment(db, assignment_id)

    rows = (
        await db.execute(select(DayAssignment).where(DayAssignment.assignment_id == assignment_id))
    ).scalars().all()
    by_key = {day_key(row.date): row for row in rows}

    block = DateRange(day_key(old_start), day_key(old_end))
    source = block.days()
    missing = [k for k in source if k not in by_key]
    if missing:
        raise ValidationError(f"Moved block contains unassigned days: {', '.join(missing)}")

    if offset == 0:
        return MoveResult(merged_days=0, moved_days=len(source), offset_days=0)

    source_set = set(source)
    destination = [shift_day(k, offset) for k in source]
    destination_set = set(destination)
    merged = [k for k in destination if k in by_key and k not in source_set]
    comments = {k: by_key[k].comment for k in source}

    moved_groups = await _carry_groups(db, assignment_id=assignment_id, block=block, offset=offset)

    result = MoveResult(merged_days=len(merged), moved_days=len(source), offset_days=offset)
    for key in source:
        if key not in destination_set:
            await db.delete(by_key[key])
            result.deleted.append(by_key[key])

    for src, dst in zip(source, destination):
        if dst in source_set:
            by_key[dst].comment = comments[src]
        elif dst not in by_key:
            record = DayAssignment(assignment_id=assignment_id, date=parse_day(dst), comment=comments[src])
            db.add(record)
            result.created.append(record)

    plan = await sync_assignment_groups(db, assignment_id, yielding=moved_groups)
    result.metadata_conflicts = len(plan.conflicts)
    if plan.conflicts:
        logger.warning(
            "Move of %s..%s by %+d days for assignment %s discarded metadata of %d group(s)",
            block.start,
            block.end,
            offset,
            assignment_id,
            len(plan.conflicts),
        )
    return result
