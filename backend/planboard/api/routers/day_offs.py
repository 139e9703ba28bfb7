from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.deps import get_current_user, require_admin
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.models.day_off import DayOff
from planboard.schemas.day_off import DayOffCreate, DayOffOut
from planboard.services import day_offs as day_off_service
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


def _day_off_out(day_off: DayOff) -> DayOffOut:
    return DayOffOut(id=day_off.id, team_member_id=day_off.team_member_id, date=day_off.date)


@router.get("", response_model=list[DayOffOut])
async def list_day_offs(
    start_date: date | None = None,
    end_date: date | None = None,
    team_member_id: uuid.UUID | None = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> list[DayOffOut]:
    rows = await day_off_service.list_day_offs(
        db, start_date=start_date, end_date=end_date, team_member_id=team_member_id
    )
    return [_day_off_out(d) for d in rows]


@router.post("", response_model=DayOffOut, status_code=status.HTTP_201_CREATED)
async def create_day_off(
    payload: DayOffCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_admin),
) -> DayOffOut:
    try:
        day_off, removed = await day_off_service.create_day_off(
            db, team_member_id=payload.team_member_id, day=payload.date
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = _day_off_out(day_off)
    await publish_change(ChangeEvent.DAY_OFF_CREATED, out.model_dump(mode="json"))
    if removed:
        await publish_change(
            ChangeEvent.DAY_ASSIGNMENT_DELETED,
            [{"id": r.id, "assignment_id": r.assignment_id, "date": r.date} for r in removed],
        )
    return out


@router.delete("/{day_off_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_day_off(
    day_off_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_admin),
) -> None:
    try:
        day_off = await day_off_service.delete_day_off(db, day_off_id=day_off_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    await publish_change(ChangeEvent.DAY_OFF_DELETED, _day_off_out(day_off).model_dump(mode="json"))
    return None
