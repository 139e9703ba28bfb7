from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.access import ensure_can_edit_project
from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.models.milestone import Milestone
from planboard.schemas.milestone import MilestoneCreate, MilestoneOut, MilestoneUpdate
from planboard.services import milestones as milestone_service
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


def _milestone_out(milestone: Milestone) -> MilestoneOut:
    return MilestoneOut(id=milestone.id, project_id=milestone.project_id, date=milestone.date, name=milestone.name)


@router.get("", response_model=list[MilestoneOut])
async def list_milestones(
    project_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[MilestoneOut]:
    rows = await milestone_service.list_milestones(
        db, project_id=project_id, start_date=start_date, end_date=end_date
    )
    return [_milestone_out(m) for m in rows]


@router.get("/{milestone_id}", response_model=MilestoneOut)
async def get_milestone(
    milestone_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> MilestoneOut:
    try:
        milestone = await milestone_service.get_milestone(db, milestone_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _milestone_out(milestone)


@router.post("", response_model=MilestoneOut, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    payload: MilestoneCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> MilestoneOut:
    await ensure_can_edit_project(db, user, payload.project_id)
    try:
        milestone = await milestone_service.create_milestone(
            db, project_id=payload.project_id, day=payload.date, name=payload.name
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _milestone_out(milestone)
    await publish_change(ChangeEvent.MILESTONE_CREATED, out.model_dump(mode="json"))
    return out


@router.patch("/{milestone_id}", response_model=MilestoneOut)
async def update_milestone(
    milestone_id: uuid.UUID,
    payload: MilestoneUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> MilestoneOut:
    changes = {}
    if payload.date is not None:
        changes["day"] = payload.date
    if "name" in payload.model_fields_set:
        changes["name"] = payload.name

    try:
        milestone = await milestone_service.get_milestone(db, milestone_id)
        await ensure_can_edit_project(db, user, milestone.project_id)
        milestone = await milestone_service.update_milestone(db, milestone_id=milestone_id, **changes)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _milestone_out(milestone)
    await publish_change(ChangeEvent.MILESTONE_UPDATED, out.model_dump(mode="json"))
    return out


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_milestone(
    milestone_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    try:
        milestone = await milestone_service.get_milestone(db, milestone_id)
        await ensure_can_edit_project(db, user, milestone.project_id)
        await milestone_service.delete_milestone(db, milestone_id=milestone_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(ChangeEvent.MILESTONE_DELETED, {"id": milestone_id, "project_id": milestone.project_id})
    return None
