from __future__ import annotations

from pydantic import BaseModel


class SettingOut(BaseModel):
    key: str
    value: str


class SettingUpdate(BaseModel):
    value: str
