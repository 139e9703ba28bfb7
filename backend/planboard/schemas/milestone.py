from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, Field


class MilestoneOut(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    date: dt.date
    name: str | None = None


class MilestoneCreate(BaseModel):
    project_id: uuid.UUID
    date: dt.date
    name: str | None = Field(default=None, max_length=200)


class MilestoneUpdate(BaseModel):
    date: dt.date | None = None
    name: str | None = Field(default=None, max_length=200)
