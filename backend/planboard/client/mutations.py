from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

import httpx

from planboard.client.api_client import ApiError, PlanboardClient
from planboard.client.cache import TimelineCache
from planboard.services.date_ranges import DateLike, DateRange, day_key, day_offset, shift_day


logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, Exception], None]


class MutationOrchestrator:
    """Optimistic timeline writes.

    Each operation updates the cache, sends one request and reloads days and
    groups, since one day change can merge or split groups. A failed request
    restores the cache and reports the error; nothing is retried.
    """

    def __init__(
        self,
        client: PlanboardClient,
        cache: TimelineCache,
        *,
        window: tuple[DateLike, DateLike] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.window = window
        self.on_error = on_error

    async def refresh(self) -> None:
        start, end = self.window if self.window is not None else (None, None)
        days = await self.client.list_days(start, end)
        groups = await self.client.list_groups(start, end)
        self.cache.replace(days=days, groups=groups)

    async def _run(
        self,
        operation: str,
        request: Callable[[], Awaitable[Any]],
        optimistic: Callable[[], None] | None = None,
    ) -> Any:
        snapshot = self.cache.snapshot()
        if optimistic is not None:
            optimistic()
        try:
            result = await request()
        except (ApiError, httpx.HTTPError) as exc:
            self.cache.restore(snapshot)
            logger.warning("%s failed: %s", operation, exc)
            if self.on_error is not None:
                self.on_error(operation, exc)
            return None

        try:
            await self.refresh()
        except (ApiError, httpx.HTTPError) as exc:
            # The write went through; only the reload failed.
            logger.warning("Refetch after %s failed: %s", operation, exc)
            if self.on_error is not None:
                self.on_error("refresh", exc)
        return result

    async def create_days(self, assignment_id: uuid.UUID, dates: list[DateLike]) -> Any:
        keys = sorted({day_key(d) for d in dates})
        if not keys:
            return None
        if len(keys) == 1:
            request = partial(self.client.create_day, assignment_id, keys[0])
        else:
            request = partial(self.client.create_days, assignment_id, keys)
        return await self._run(
            "create_days",
            request,
            lambda: self.cache.add_days(assignment_id, keys),
        )

    async def delete_days(self, assignment_id: uuid.UUID, dates: list[DateLike]) -> Any:
        rows = [self.cache.find_day(assignment_id, d) for d in dates]
        ids = [uuid.UUID(row["id"]) for row in rows if row is not None and row.get("id")]
        if not ids:
            return None
        if len(ids) == 1:
            request = partial(self.client.delete_day, ids[0])
        else:
            request = partial(self.client.delete_days, ids)
        return await self._run(
            "delete_days",
            request,
            lambda: self.cache.remove_days(assignment_id, dates),
        )

    async def move_block(self, assignment_id: uuid.UUID, source: DateRange, destination: DateRange) -> Any:
        offset = day_offset(source.start, destination.start)

        def optimistic() -> None:
            moved = source.days()
            self.cache.remove_days(assignment_id, moved)
            self.cache.add_days(assignment_id, [shift_day(k, offset) for k in moved])

        return await self._run(
            "move_block",
            lambda: self.client.move_block(
                assignment_id, source.start, source.end, destination.start, destination.end
            ),
            optimistic,
        )

    async def save_group(
        self,
        assignment_id: uuid.UUID,
        start: DateLike,
        end: DateLike,
        *,
        priority: str = "normal",
        comment: str | None = None,
        group_id: uuid.UUID | None = None,
    ) -> Any:
        return await self._run(
            "save_group",
            lambda: self.client.save_group(
                assignment_id, start, end, priority=priority, comment=comment, group_id=group_id
            ),
        )
