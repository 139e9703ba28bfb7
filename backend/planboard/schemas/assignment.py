from __future__ import annotations

import uuid

from pydantic import BaseModel


class AssignmentOut(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID
    team_member_id: uuid.UUID


class AssignmentCreate(BaseModel):
    project_id: uuid.UUID
    team_member_id: uuid.UUID
