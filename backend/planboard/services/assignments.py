from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment import Assignment
from planboard.models.team_member import TeamMember
from planboard.services.errors import NotFoundError, ValidationError
from planboard.services.milestones import require_project


async def list_assignments(
    db: AsyncSession,
    *,
    project_id: uuid.UUID | None = None,
    team_member_id: uuid.UUID | None = None,
) -> list[Assignment]:
    stmt = select(Assignment)
    if project_id is not None:
        stmt = stmt.where(Assignment.project_id == project_id)
    if team_member_id is not None:
        stmt = stmt.where(Assignment.team_member_id == team_member_id)
    return list((await db.execute(stmt.order_by(Assignment.project_id))).scalars().all())


async def get_assignment(db: AsyncSession, assignment_id: uuid.UUID) -> Assignment:
    assignment = (
        await db.execute(select(Assignment).where(Assignment.id == assignment_id))
    ).scalar_one_or_none()
    if assignment is None:
        raise NotFoundError("Assignment not found")
    return assignment


async def create_assignment(
    db: AsyncSession, *, project_id: uuid.UUID, team_member_id: uuid.UUID
) -> Assignment:
    await require_project(db, project_id)
    member = (
        await db.execute(select(TeamMember).where(TeamMember.id == team_member_id))
    ).scalar_one_or_none()
    if member is None:
        raise ValidationError("Team member not found")

    existing = (
        await db.execute(
            select(Assignment).where(
                Assignment.project_id == project_id,
                Assignment.team_member_id == team_member_id,
            )
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise ValidationError("Team member is already assigned to this project")

    assignment = Assignment(project_id=project_id, team_member_id=team_member_id)
    db.add(assignment)
    await db.flush()
    return assignment


async def delete_assignment(db: AsyncSession, *, assignment_id: uuid.UUID) -> Assignment:
    """Remove an assignment. Its days and groups go with it (FK cascade)."""
    assignment = await get_assignment(db, assignment_id)
    await db.delete(assignment)
    await db.flush()
    return assignment
