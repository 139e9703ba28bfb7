from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.access import ensure_can_edit_assignment
from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.models.day_assignment import DayAssignment
from planboard.schemas.day_assignment import (
    DayAssignmentBatchCreate,
    DayAssignmentBatchDelete,
    DayAssignmentCreate,
    DayAssignmentOut,
    DayAssignmentUpdate,
)
from planboard.services import day_assignments as day_service
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


def _day_out(record: DayAssignment) -> DayAssignmentOut:
    return DayAssignmentOut(
        id=record.id,
        assignment_id=record.assignment_id,
        date=record.date,
        comment=record.comment,
    )


@router.get("", response_model=list[DayAssignmentOut])
async def list_day_assignments(
    start_date: date | None = None,
    end_date: date | None = None,
    assignment_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[DayAssignmentOut]:
    try:
        rows = await day_service.list_day_assignments(
            db, start_date=start_date, end_date=end_date, assignment_id=assignment_id
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [_day_out(r) for r in rows]


@router.post("", response_model=DayAssignmentOut, status_code=status.HTTP_201_CREATED)
async def create_day_assignment(
    payload: DayAssignmentCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> DayAssignmentOut:
    await ensure_can_edit_assignment(db, user, payload.assignment_id)
    try:
        record, created = await day_service.create_day_assignment(
            db, assignment_id=payload.assignment_id, day=payload.date
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _day_out(record)
    if created:
        await publish_change(ChangeEvent.DAY_ASSIGNMENT_CREATED, out.model_dump(mode="json"))
    else:
        response.status_code = status.HTTP_200_OK
    return out


@router.post("/batch", response_model=list[DayAssignmentOut], status_code=status.HTTP_201_CREATED)
async def create_day_assignments_batch(
    payload: DayAssignmentBatchCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[DayAssignmentOut]:
    await ensure_can_edit_assignment(db, user, payload.assignment_id)
    try:
        created = await day_service.create_day_assignments(
            db, assignment_id=payload.assignment_id, days=payload.dates
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = [_day_out(r) for r in created]
    if out:
        await publish_change(ChangeEvent.DAY_ASSIGNMENT_CREATED, [o.model_dump(mode="json") for o in out])
    return out


@router.post("/batch-delete", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_day_assignments_batch(
    payload: DayAssignmentBatchDelete,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    assignment_ids = (
        await db.execute(
            select(DayAssignment.assignment_id).where(DayAssignment.id.in_(payload.ids)).distinct()
        )
    ).scalars().all()
    for assignment_id in assignment_ids:
        await ensure_can_edit_assignment(db, user, assignment_id)

    try:
        deleted = await day_service.delete_day_assignments(db, day_assignment_ids=payload.ids)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(
        ChangeEvent.DAY_ASSIGNMENT_DELETED,
        [{"id": r.id, "assignment_id": r.assignment_id, "date": r.date} for r in deleted],
    )
    return None


@router.patch("/{day_assignment_id}", response_model=DayAssignmentOut)
async def update_day_assignment(
    day_assignment_id: uuid.UUID,
    payload: DayAssignmentUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> DayAssignmentOut:
    try:
        record = await day_service.get_day_assignment(db, day_assignment_id)
        await ensure_can_edit_assignment(db, user, record.assignment_id)
        record = await day_service.update_day_comment(
            db, day_assignment_id=day_assignment_id, comment=payload.comment
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _day_out(record)
    await publish_change(ChangeEvent.DAY_ASSIGNMENT_UPDATED, out.model_dump(mode="json"))
    return out


@router.delete("/{day_assignment_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_day_assignment(
    day_assignment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> None:
    try:
        record = await day_service.get_day_assignment(db, day_assignment_id)
        await ensure_can_edit_assignment(db, user, record.assignment_id)
        record = await day_service.delete_day_assignment(db, day_assignment_id=day_assignment_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(
        ChangeEvent.DAY_ASSIGNMENT_DELETED,
        {"id": record.id, "assignment_id": record.assignment_id, "date": record.date},
    )
    return None
