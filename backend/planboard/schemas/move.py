from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel


class MoveBlockRequest(BaseModel):
    assignment_id: uuid.UUID
    old_start_date: date
    old_end_date: date
    new_start_date: date
    new_end_date: date


class MoveBlockOut(BaseModel):
    merged_days: int
    moved_days: int
    offset_days: int
    metadata_conflicts: int = 0
