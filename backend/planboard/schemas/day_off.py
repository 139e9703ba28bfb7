from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel


class DayOffOut(BaseModel):
    id: uuid.UUID
    team_member_id: uuid.UUID
    date: dt.date


class DayOffCreate(BaseModel):
    team_member_id: uuid.UUID
    date: dt.date
