from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.access import ensure_can_edit_assignment, ensure_can_edit_project
from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.models.assignment import Assignment
from planboard.schemas.assignment import AssignmentCreate, AssignmentOut
from planboard.services import assignments as assignment_service
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


def _assignment_out(assignment: Assignment) -> AssignmentOut:
    return AssignmentOut(
        id=assignment.id,
        project_id=assignment.project_id,
        team_member_id=assignment.team_member_id,
    )


@router.get("", response_model=list[AssignmentOut])
async def list_assignments(
    project_id: uuid.UUID | None = None,
    team_member_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[AssignmentOut]:
    rows = await assignment_service.list_assignments(db, project_id=project_id, team_member_id=team_member_id)
    return [_assignment_out(a) for a in rows]


@router.post("", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    payload: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> AssignmentOut:
    await ensure_can_edit_project(db, user, payload.project_id)
    try:
        assignment = await assignment_service.create_assignment(
            db, project_id=payload.project_id, team_member_id=payload.team_member_id
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _assignment_out(assignment)
    await publish_change(ChangeEvent.ASSIGNMENT_CREATED, out.model_dump(mode="json"))
    return out


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_assignment(
    assignment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    await ensure_can_edit_assignment(db, user, assignment_id)
    try:
        assignment = await assignment_service.delete_assignment(db, assignment_id=assignment_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(ChangeEvent.ASSIGNMENT_DELETED, _assignment_out(assignment).model_dump(mode="json"))
    return None
