from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, Field


class DayAssignmentOut(BaseModel):
    id: uuid.UUID
    assignment_id: uuid.UUID
    date: dt.date
    comment: str | None = None


class DayAssignmentCreate(BaseModel):
    assignment_id: uuid.UUID
    date: dt.date


class DayAssignmentBatchCreate(BaseModel):
    assignment_id: uuid.UUID
    dates: list[dt.date] = Field(min_length=1)


class DayAssignmentUpdate(BaseModel):
    comment: str | None = Field(default=None, max_length=1000)


class DayAssignmentBatchDelete(BaseModel):
    ids: list[uuid.UUID] = Field(min_length=1)
