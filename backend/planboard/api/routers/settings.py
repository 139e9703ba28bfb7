from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.api.deps import get_current_user
from planboard.api.errors import http_error
from planboard.db import get_db
from planboard.schemas.setting import SettingOut, SettingUpdate
from planboard.services import user_settings
from planboard.services.errors import ServiceError


router = APIRouter()


@router.get("", response_model=dict[str, str])
async def get_settings(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> dict[str, str]:
    return await user_settings.get_user_settings(db, user.id)


@router.put("/{key}", response_model=SettingOut)
async def put_setting(
    key: str,
    payload: SettingUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
) -> SettingOut:
    try:
        value = await user_settings.set_user_setting(db, user_id=user.id, key=key, value=payload.value)
    except ServiceError as exc:
        raise http_error(exc) from exc
    await db.commit()
    return SettingOut(key=key, value=value)
