from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.access import ensure_can_edit_assignment
from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.models.assignment_group import AssignmentGroup
from planboard.schemas.assignment_group import AssignmentGroupCreate, AssignmentGroupOut, AssignmentGroupUpdate
from planboard.services import assignment_groups as group_service
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


def _group_out(group: AssignmentGroup) -> AssignmentGroupOut:
    return AssignmentGroupOut(
        id=group.id,
        assignment_id=group.assignment_id,
        start_date=group.start_date,
        end_date=group.end_date,
        priority=group.priority,
        comment=group.comment,
    )


@router.get("", response_model=list[AssignmentGroupOut])
async def list_assignment_groups(
    start_date: date | None = None,
    end_date: date | None = None,
    assignment_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[AssignmentGroupOut]:
    groups = await group_service.list_groups(
        db, start_date=start_date, end_date=end_date, assignment_id=assignment_id
    )
    return [_group_out(g) for g in groups]


@router.post("", response_model=AssignmentGroupOut, status_code=status.HTTP_201_CREATED)
async def create_assignment_group(
    payload: AssignmentGroupCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> AssignmentGroupOut:
    await ensure_can_edit_assignment(db, user, payload.assignment_id)
    try:
        group = await group_service.create_group(
            db,
            assignment_id=payload.assignment_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            priority=payload.priority,
            comment=payload.comment,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _group_out(group)
    await publish_change(ChangeEvent.ASSIGNMENT_GROUP_CREATED, out.model_dump(mode="json"))
    return out


@router.patch("/{group_id}", response_model=AssignmentGroupOut)
async def update_assignment_group(
    group_id: uuid.UUID,
    payload: AssignmentGroupUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> AssignmentGroupOut:
    changes = {}
    if payload.priority is not None:
        changes["priority"] = payload.priority
    if "comment" in payload.model_fields_set:
        changes["comment"] = payload.comment

    try:
        group = await group_service.get_group(db, group_id)
        await ensure_can_edit_assignment(db, user, group.assignment_id)
        group = await group_service.update_group(db, group_id=group_id, **changes)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _group_out(group)
    await publish_change(ChangeEvent.ASSIGNMENT_GROUP_UPDATED, out.model_dump(mode="json"))
    return out


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_assignment_group(
    group_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    try:
        group = await group_service.get_group(db, group_id)
        await ensure_can_edit_assignment(db, user, group.assignment_id)
        await group_service.delete_group(db, group_id=group_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(ChangeEvent.ASSIGNMENT_GROUP_DELETED, {"id": group_id, "assignment_id": group.assignment_id})
    return None
