from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.access import ensure_can_edit_assignment
from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.schemas.move import MoveBlockOut, MoveBlockRequest
from planboard.services.block_move import move_block
from planboard.services.errors import ServiceError
from planboard.services.events import ChangeEvent, publish_change


router = APIRouter()


@router.post("/move", response_model=MoveBlockOut)
async def move_assignment_block(
    payload: MoveBlockRequest,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> MoveBlockOut:
    await ensure_can_edit_assignment(db, user, payload.assignment_id)
    try:
        result = await move_block(
            db,
            assignment_id=payload.assignment_id,
            old_start=payload.old_start_date,
            old_end=payload.old_end_date,
            new_start=payload.new_start_date,
            new_end=payload.new_end_date,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()

    out = MoveBlockOut(
        merged_days=result.merged_days,
        moved_days=result.moved_days,
        offset_days=result.offset_days,
        metadata_conflicts=result.metadata_conflicts,
    )
    if result.offset_days:
        await publish_change(
            ChangeEvent.ASSIGNMENTS_MOVED,
            {
                "assignment_id": payload.assignment_id,
                "old_start_date": payload.old_start_date,
                "old_end_date": payload.old_end_date,
                "new_start_date": payload.new_start_date,
                "new_end_date": payload.new_end_date,
                **out.model_dump(),
            },
        )
    return out
