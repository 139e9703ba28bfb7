from __future__ import annotations

import asyncio
import enum
import json
import logging
import uuid
from datetime import date, datetime
from typing import Any

from planboard.config import settings
from planboard.integrations.redis import get_redis_sync


CHANNEL = "planboard_changes"
logger = logging.getLogger(__name__)


class ChangeEvent(str, enum.Enum):
    ASSIGNMENT_CREATED = "assignment:created"
    ASSIGNMENT_DELETED = "assignment:deleted"

    DAY_ASSIGNMENT_CREATED = "dayAssignment:created"
    DAY_ASSIGNMENT_UPDATED = "dayAssignment:updated"
    DAY_ASSIGNMENT_DELETED = "dayAssignment:deleted"

    ASSIGNMENT_GROUP_CREATED = "assignmentGroup:created"
    ASSIGNMENT_GROUP_UPDATED = "assignmentGroup:updated"
    ASSIGNMENT_GROUP_DELETED = "assignmentGroup:deleted"

    ASSIGNMENTS_MOVED = "assignments:moved"

    MILESTONE_CREATED = "milestone:created"
    MILESTONE_UPDATED = "milestone:updated"
    MILESTONE_DELETED = "milestone:deleted"

    DAY_OFF_CREATED = "dayOff:created"
    DAY_OFF_DELETED = "dayOff:deleted"


def _json_default(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def event_to_message(event: ChangeEvent, payload: Any) -> str:
    return json.dumps({"event": event.value, "payload": payload}, default=_json_default)


async def publish_change(event: ChangeEvent, payload: Any) -> None:
    """Publish a change event once its transaction has committed.

    The WebSocket listener fans it out to connected clients, which refetch.
    Failures are logged, never raised.
    """
    if not settings.REDIS_ENABLED:
        return
    message = event_to_message(event, payload)
    try:
        client = get_redis_sync()
        await asyncio.to_thread(client.publish, CHANNEL, message)
    except Exception:
        logger.exception("Failed to publish %s", event.value)
