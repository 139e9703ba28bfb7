from __future__ import annotations

import uuid


class ServiceError(Exception):
    """Base class for errors raised by the timeline services."""


class ValidationError(ServiceError):
    """The request is well-formed but cannot be applied (400)."""


class NotFoundError(ServiceError):
    """A referenced record does not exist (404)."""


class GroupConflictError(ServiceError):
    """A new group would overlap an existing one (409).

    Carries the id of the existing group so the caller can retry as an update.
    """

    def __init__(self, existing_group_id: uuid.UUID) -> None:
        super().__init__("Overlapping group exists")
        self.existing_group_id = existing_group_id
