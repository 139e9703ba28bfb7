from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field

from planboard.models.enums import AssignmentPriority


class AssignmentGroupOut(BaseModel):
    id: uuid.UUID
    assignment_id: uuid.UUID
    start_date: date
    end_date: date
    priority: AssignmentPriority
    comment: str | None = None


class AssignmentGroupCreate(BaseModel):
    assignment_id: uuid.UUID
    start_date: date
    end_date: date
    priority: AssignmentPriority = AssignmentPriority.normal
    comment: str | None = Field(default=None, max_length=1000)


class AssignmentGroupUpdate(BaseModel):
    priority: AssignmentPriority | None = None
    comment: str | None = Field(default=None, max_length=1000)
