from __future__ import annotations

import uuid

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.deps import CurrentUser
from planboard.models.assignment import Assignment
from planboard.models.enums import UserRole
from planboard.models.project import Project


def ensure_manages_project(user: CurrentUser, project: Project) -> None:
    if user.role == UserRole.admin:
        return
    if user.role != UserRole.project_manager or project.manager_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


async def ensure_can_edit_project(db: AsyncSession, user: CurrentUser, project_id: uuid.UUID) -> Project | None:
    """403 unless the user may change the project's timeline.

    A missing project passes so the service can report it as a bad request.
    """
    project = (await db.execute(select(Project).where(Project.id == project_id))).scalar_one_or_none()
    if project is None:
        if user.role not in (UserRole.admin, UserRole.project_manager):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return None
    ensure_manages_project(user, project)
    return project


async def ensure_can_edit_assignment(db: AsyncSession, user: CurrentUser, assignment_id: uuid.UUID) -> None:
    project = (
        await db.execute(
            select(Project)
            .join(Assignment, Assignment.project_id == Project.id)
            .where(Assignment.id == assignment_id)
        )
    ).scalar_one_or_none()
    if project is None:
        if user.role not in (UserRole.admin, UserRole.project_manager):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return
    ensure_manages_project(user, project)
