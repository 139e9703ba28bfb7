from __future__ import annotations

import enum
import logging
import uuid
from collections import defaultdict
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from planboard.client.api_client import PlanboardClient
from planboard.client.mutations import MutationOrchestrator
from planboard.services.assignment_warnings import (
    WARN_SETTING_KEY,
    AssignmentWarning,
    collect_warnings,
    warnings_enabled,
    working_dates,
)
from planboard.services.date_ranges import DateLike, DateRange, contiguous_range, day_key, day_offset
from planboard.services.work_schedule import DEFAULT_SCHEDULE, WorkSchedule


logger = logging.getLogger(__name__)

SECONDARY_BUTTON = 2

CellKey = tuple[uuid.UUID, str]
CellListener = Callable[[bool], None]


class DragMode(str, enum.Enum):
    create = "create"
    delete = "delete"
    move = "move"


@dataclass(frozen=True)
class PointerPress:
    button: int = 0
    ctrl: bool = False
    meta: bool = False
    alt: bool = False

    @property
    def wants_delete(self) -> bool:
        return self.button == SECONDARY_BUTTON or self.ctrl or self.meta


@dataclass(frozen=True)
class DragState:
    assignment_id: uuid.UUID
    mode: DragMode
    start: str
    current: str
    move_source: DateRange | None = None

    @property
    def offset(self) -> int:
        return day_offset(self.start, self.current)

    @property
    def range(self) -> DateRange:
        if self.mode == DragMode.move and self.move_source is not None:
            return self.move_source.shifted(self.offset)
        return DateRange.of(self.start, self.current)

    def cells(self) -> set[CellKey]:
        return {(self.assignment_id, key) for key in self.range.days()}


class DragStore:
    """Holds the drag outside any view. Cells subscribe by ``(assignment_id, date)``
    and are told only when their own highlight flips.
    """

    def __init__(self) -> None:
        self._state: DragState | None = None
        self._listeners: dict[CellKey, list[CellListener]] = defaultdict(list)

    @property
    def state(self) -> DragState | None:
        return self._state

    def subscribe(self, assignment_id: uuid.UUID, value: DateLike, listener: CellListener) -> Callable[[], None]:
        key = (assignment_id, day_key(value))
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._listeners[key]

        return unsubscribe

    def is_highlighted(self, assignment_id: uuid.UUID, value: DateLike) -> bool:
        return self._state is not None and (assignment_id, day_key(value)) in self._state.cells()

    def set(self, state: DragState | None) -> None:
        before = self._state.cells() if self._state is not None else set()
        self._state = state
        after = state.cells() if state is not None else set()
        for cell in before ^ after:
            for listener in list(self._listeners.get(cell, ())):
                listener(cell in after)


@dataclass(frozen=True)
class WarningContext:
    schedule: WorkSchedule = DEFAULT_SCHEDULE
    day_offs: Collection[str] = ()
    member_name: str | None = None
    enabled: bool = True


async def load_warning_context(
    client: PlanboardClient,
    team_member_id: uuid.UUID,
    *,
    schedule: WorkSchedule = DEFAULT_SCHEDULE,
    member_name: str | None = None,
    start: DateLike | None = None,
    end: DateLike | None = None,
) -> WarningContext:
    """Read the user's warning setting and the member's days off from the API."""
    user_settings = await client.get_settings()
    day_offs = await client.list_day_offs(start, end, team_member_id=team_member_id)
    return WarningContext(
        schedule=schedule,
        day_offs=tuple(row["date"] for row in day_offs),
        member_name=member_name,
        enabled=warnings_enabled(user_settings.get(WARN_SETTING_KEY)),
    )


@dataclass
class PendingConfirmation:
    """A drag waiting for the user to accept its warning."""

    mode: DragMode
    warning: AssignmentWarning
    _confirm: Callable
    _skip: Callable | None = None
    settled: bool = field(default=False)

    @property
    def can_skip(self) -> bool:
        return self._skip is not None

    async def confirm(self):
        """Apply the operation to the whole range, flagged days included."""
        if self.settled:
            return None
        self.settled = True
        return await self._confirm()

    async def skip(self):
        """Apply the operation to the unflagged days only."""
        if self.settled or self._skip is None:
            return None
        self.settled = True
        return await self._skip()

    def cancel(self) -> None:
        self.settled = True


class DragController:
    """Create, delete and move gestures over the grid.

    A plain press on an unscheduled day starts create; secondary button, ctrl
    or meta on a scheduled day starts delete; alt on a scheduled day moves the
    whole run under the pointer. Call :meth:`release` from a global pointer-up
    handler so a release outside the grid still ends the drag.
    """

    def __init__(
        self,
        store: DragStore,
        orchestrator: MutationOrchestrator,
        *,
        warning_context: Callable[[uuid.UUID], WarningContext | None] | None = None,
    ) -> None:
        self.store = store
        self.orchestrator = orchestrator
        self.warning_context = warning_context

    def _assigned(self, assignment_id: uuid.UUID) -> set[str]:
        return self.orchestrator.cache.day_keys(assignment_id)

    def press(self, assignment_id: uuid.UUID, value: DateLike, press: PointerPress = PointerPress()) -> DragMode | None:
        key = day_key(value)
        days = self._assigned(assignment_id)
        assigned = key in days

        if press.alt:
            if not assigned:
                return None
            state = DragState(assignment_id, DragMode.move, key, key, contiguous_range(days, key))
        elif press.wants_delete:
            if not assigned:
                return None
            state = DragState(assignment_id, DragMode.delete, key, key)
        else:
            if assigned:
                return None
            state = DragState(assignment_id, DragMode.create, key, key)

        self.store.set(state)
        return state.mode

    def enter(self, value: DateLike) -> None:
        state = self.store.state
        if state is None:
            return
        key = day_key(value)
        if key == state.current:
            return
        self.store.set(
            DragState(state.assignment_id, state.mode, state.start, key, state.move_source)
        )

    def cancel(self) -> None:
        self.store.set(None)

    def _warning_for(self, assignment_id: uuid.UUID, dates: list[str]) -> tuple[AssignmentWarning | None, WarningContext]:
        context = self.warning_context(assignment_id) if self.warning_context is not None else None
        if context is None:
            context = WarningContext()
        if not context.enabled:
            return None, context
        return collect_warnings(dates, context.schedule, context.day_offs, context.member_name), context

    async def release(self) -> PendingConfirmation | None:
        """Finish the drag.

        Returns a :class:`PendingConfirmation` when the range touches days that
        need confirmation; otherwise the operation is dispatched right away and
        ``None`` is returned. A release that would change nothing dispatches
        nothing.
        """
        state = self.store.state
        if state is None:
            return None
        self.store.set(None)

        aid = state.assignment_id
        days = self._assigned(aid)
        target = state.range

        if state.mode == DragMode.delete:
            dates = [k for k in target.days() if k in days]
            if dates:
                await self.orchestrator.delete_days(aid, dates)
            return None

        if state.mode == DragMode.create:
            dates = [k for k in target.days() if k not in days]
            if not dates:
                return None
            warning, context = self._warning_for(aid, dates)
            if warning is None:
                await self.orchestrator.create_days(aid, dates)
                return None

            async def create_all():
                return await self.orchestrator.create_days(aid, dates)

            async def create_working():
                keep = working_dates(dates, context.schedule, context.day_offs)
                if not keep:
                    return None
                return await self.orchestrator.create_days(aid, keep)

            return PendingConfirmation(DragMode.create, warning, create_all, create_working)

        source = state.move_source
        if source is None or state.offset == 0:
            return None
        warning, _ = self._warning_for(aid, target.days())

        async def move():
            return await self.orchestrator.move_block(aid, source, target)

        if warning is None:
            await move()
            return None
        logger.debug("Move of %s..%s waits for confirmation", source.start, source.end)
        return PendingConfirmation(DragMode.move, warning, move)
