from __future__ import annotations

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment import Assignment
from planboard.models.day_assignment import DayAssignment
from planboard.models.day_off import DayOff
from planboard.models.team_member import TeamMember
from planboard.services.errors import NotFoundError, ValidationError
from planboard.services.group_merge import sync_assignment_groups


logger = logging.getLogger(__name__)


async def list_day_offs(
    db: AsyncSession,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    team_member_id: uuid.UUID | None = None,
) -> list[DayOff]:
    stmt = select(DayOff)
    if start_date is not None:
        stmt = stmt.where(DayOff.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(DayOff.date <= end_date)
    if team_member_id is not None:
        stmt = stmt.where(DayOff.team_member_id == team_member_id)
    return list((await db.execute(stmt.order_by(DayOff.date))).scalars().all())


async def create_day_off(
    db: AsyncSession, *, team_member_id: uuid.UUID, day: date
) -> tuple[DayOff, list[DayAssignment]]:
    """Mark a member as absent on ``day``.

    Any work scheduled for the member on that date is removed and the groups
    of the affected assignments are re-aligned. Returns the day off and the
    removed day assignments.
    """
    member = (
        await db.execute(select(TeamMember).where(TeamMember.id == team_member_id))
    ).scalar_one_or_none()
    if member is None:
        raise ValidationError("Team member not found")

    existing = (
        await db.execute(select(DayOff).where(DayOff.team_member_id == team_member_id, DayOff.date == day))
    ).scalar_one_or_none()
    if existing is not None:
        return existing, []

    removed = list(
        (
            await db.execute(
                select(DayAssignment)
                .join(Assignment, Assignment.id == DayAssignment.assignment_id)
                .where(Assignment.team_member_id == team_member_id, DayAssignment.date == day)
            )
        ).scalars().all()
    )
    for row in removed:
        await db.delete(row)
    for assignment_id in sorted({row.assignment_id for row in removed}, key=str):
        await sync_assignment_groups(db, assignment_id)

    day_off = DayOff(team_member_id=team_member_id, date=day)
    db.add(day_off)
    await db.flush()
    if removed:
        logger.info("Day off %s for %s removed %d scheduled day(s)", day, member.full_name, len(removed))
    return day_off, removed


async def delete_day_off(db: AsyncSession, *, day_off_id: uuid.UUID) -> DayOff:
    day_off = (await db.execute(select(DayOff).where(DayOff.id == day_off_id))).scalar_one_or_none()
    if day_off is None:
        raise NotFoundError("Day off not found")
    await db.delete(day_off)
    await db.flush()
    return day_off
