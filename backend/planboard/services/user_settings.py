from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.user_setting import UserSetting
from planboard.services.assignment_warnings import WARN_SETTING_KEY
from planboard.services.errors import ValidationError


BOOLEAN_VALUES = ("true", "false")

# Known keys and their value when the user never saved one.
DEFAULT_SETTINGS: dict[str, str] = {
    WARN_SETTING_KEY: "true",
    "show_overlap_visualization": "true",
}


def normalize_setting(key: str, value: str) -> str:
    if key not in DEFAULT_SETTINGS:
        raise ValidationError(f"Unknown setting: {key}")
    normalized = str(value).strip().lower()
    if normalized not in BOOLEAN_VALUES:
        raise ValidationError(f"Setting {key} must be 'true' or 'false'")
    return normalized


async def get_user_settings(db: AsyncSession, user_id: uuid.UUID) -> dict[str, str]:
    rows = (await db.execute(select(UserSetting).where(UserSetting.user_id == user_id))).scalars().all()
    values = dict(DEFAULT_SETTINGS)
    values.update({row.key: row.value for row in rows if row.key in DEFAULT_SETTINGS})
    return values


async def get_user_setting(db: AsyncSession, user_id: uuid.UUID, key: str) -> str | None:
    row = (
        await db.execute(select(UserSetting).where(UserSetting.user_id == user_id, UserSetting.key == key))
    ).scalar_one_or_none()
    if row is None:
        return DEFAULT_SETTINGS.get(key)
    return row.value


async def set_user_setting(db: AsyncSession, *, user_id: uuid.UUID, key: str, value: str) -> str:
    value = normalize_setting(key, value)
    row = (
        await db.execute(select(UserSetting).where(UserSetting.user_id == user_id, UserSetting.key == key))
    ).scalar_one_or_none()
    if row is None:
        db.add(UserSetting(user_id=user_id, key=key, value=value))
    else:
        row.value = value
    await db.flush()
    return value
