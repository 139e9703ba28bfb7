from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.milestone import Milestone
from planboard.models.project import Project
from planboard.services.errors import NotFoundError, ValidationError


_UNSET = object()


async def require_project(db: AsyncSession, project_id: uuid.UUID) -> Project:
    project = (await db.execute(select(Project).where(Project.id == project_id))).scalar_one_or_none()
    if project is None:
        raise ValidationError("Project not found")
    return project


async def list_milestones(
    db: AsyncSession,
    *,
    project_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Milestone]:
    stmt = select(Milestone)
    if project_id is not None:
        stmt = stmt.where(Milestone.project_id == project_id)
    if start_date is not None:
        stmt = stmt.where(Milestone.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(Milestone.date <= end_date)
    return list((await db.execute(stmt.order_by(Milestone.date))).scalars().all())


async def get_milestone(db: AsyncSession, milestone_id: uuid.UUID) -> Milestone:
    milestone = (await db.execute(select(Milestone).where(Milestone.id == milestone_id))).scalar_one_or_none()
    if milestone is None:
        raise NotFoundError("Milestone not found")
    return milestone


async def create_milestone(
    db: AsyncSession, *, project_id: uuid.UUID, day: date, name: str | None = None
) -> Milestone:
    await require_project(db, project_id)
    milestone = Milestone(project_id=project_id, date=day, name=(name or "").strip() or None)
    db.add(milestone)
    await db.flush()
    return milestone


async def update_milestone(
    db: AsyncSession,
    *,
    milestone_id: uuid.UUID,
    day: date | None = None,
    name: str | None | object = _UNSET,
) -> Milestone:
    milestone = await get_milestone(db, milestone_id)
    if day is not None:
        milestone.date = day
    if name is not _UNSET:
        milestone.name = (name or "").strip() or None
    await db.flush()
    return milestone


async def delete_milestone(db: AsyncSession, *, milestone_id: uuid.UUID) -> Milestone:
    milestone = await get_milestone(db, milestone_id)
    await db.delete(milestone)
    await db.flush()
    return milestone
