from __future__ import annotations

import enum


class UserRole(str, enum.Enum):
    admin = "admin"
    project_manager = "project_manager"
    user = "user"


class ProjectStatus(str, enum.Enum):
    confirmed = "confirmed"
    tentative = "tentative"
    archived = "archived"


class AssignmentPriority(str, enum.Enum):
    high = "high"
    normal = "normal"
    low = "low"
