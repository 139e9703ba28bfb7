from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from planboard.models.assignment_group import AssignmentGroup
from planboard.models.day_assignment import DayAssignment
from planboard.models.enums import AssignmentPriority
from planboard.services.date_ranges import (
    DateRange,
    as_day_set,
    contiguous_runs,
    day_key,
    parse_day,
    ranges_overlap,
    ranges_touch,
    shift_day,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupSpan:
    id: uuid.UUID
    start: str
    end: str
    priority: AssignmentPriority = AssignmentPriority.normal
    comment: str | None = None

    @property
    def range(self) -> DateRange:
        return DateRange(self.start, self.end)

    def same_metadata(self, other: "GroupSpan") -> bool:
        return self.priority == other.priority and (self.comment or None) == (other.comment or None)


@dataclass(frozen=True)
class GroupResize:
    group_id: uuid.UUID
    start: str
    end: str


@dataclass(frozen=True)
class GroupCreate:
    start: str
    end: str
    priority: AssignmentPriority
    comment: str | None
    split_from: uuid.UUID


@dataclass
class GroupSyncPlan:
    updates: list[GroupResize] = field(default_factory=list)
    creates: list[GroupCreate] = field(default_factory=list)
    deletes: list[uuid.UUID] = field(default_factory=list)
    # Groups absorbed into another group on the same run.
    merged: list[uuid.UUID] = field(default_factory=list)
    # Absorbed groups whose priority or comment differed from the survivor's.
    conflicts: list[uuid.UUID] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.updates or self.creates or self.deletes)


def span_from_group(group: AssignmentGroup) -> GroupSpan:
    return GroupSpan(
        id=group.id,
        start=day_key(group.start_date),
        end=day_key(group.end_date),
        priority=group.priority,
        comment=group.comment,
    )


def plan_group_sync(
    days: Iterable[str],
    groups: Iterable[GroupSpan],
    *,
    yielding: Collection[uuid.UUID] = (),
) -> GroupSyncPlan:
    """Decide how the groups of one assignment follow its current days.

    A group is resized to the maximal run(s) its range intersects and split
    when it intersects several; the existing row keeps the earliest run. A
    group touching no run is deleted. When several groups land on one run
    the earliest-starting group survives, except that groups in
    ``yielding`` lose to every other group. Runs without a group stay
    ungrouped.
    """
    runs = contiguous_runs(as_day_set(days))
    groups = list(groups)
    yielding = set(yielding)
    plan = GroupSyncPlan()

    def rank(group: GroupSpan) -> tuple[bool, str, str]:
        return (group.id in yielding, group.start, str(group.id))

    contenders: dict[DateRange, list[GroupSpan]] = defaultdict(list)
    for group in groups:
        for run in runs:
            if ranges_overlap(run, group.range):
                contenders[run].append(group)

    won: dict[uuid.UUID, list[DateRange]] = defaultdict(list)
    for run in runs:
        claims = sorted(contenders.get(run, ()), key=rank)
        if not claims:
            continue
        survivor, losers = claims[0], claims[1:]
        won[survivor.id].append(run)
        for loser in losers:
            plan.merged.append(loser.id)
            if not loser.same_metadata(survivor):
                plan.conflicts.append(loser.id)
                logger.warning(
                    "Group %s absorbed into %s on %s..%s; discarded priority=%s comment=%r",
                    loser.id,
                    survivor.id,
                    run.start,
                    run.end,
                    loser.priority.value,
                    loser.comment,
                )

    for group in groups:
        runs_won = won.get(group.id)
        if not runs_won:
            plan.deletes.append(group.id)
            continue
        first, *rest = runs_won
        if (first.start, first.end) != (group.start, group.end):
            plan.updates.append(GroupResize(group.id, first.start, first.end))
        for run in rest:
            plan.creates.append(
                GroupCreate(
                    start=run.start,
                    end=run.end,
                    priority=group.priority,
                    comment=group.comment,
                    split_from=group.id,
                )
            )

    return plan


def find_group_inconsistencies(days: Iterable[str], groups: Iterable[GroupSpan]) -> list[str]:
    """Describe every way the groups disagree with the day set.

    An empty list means the overlay is consistent.
    """
    day_set = as_day_set(days)
    problems: list[str] = []
    ordered = sorted(groups, key=lambda g: (g.start, g.end))

    for group in ordered:
        if group.start > group.end:
            problems.append(f"group {group.id} is reversed ({group.start} > {group.end})")
            continue
        missing = [d for d in group.range.days() if d not in day_set]
        if missing:
            problems.append(f"group {group.id} covers unassigned days {', '.join(missing)}")
        if shift_day(group.start, -1) in day_set or shift_day(group.end, 1) in day_set:
            problems.append(f"group {group.id} does not span its whole run")

    for current, following in zip(ordered, ordered[1:]):
        if ranges_overlap(current.range, following.range):
            problems.append(f"groups {current.id} and {following.id} overlap")
        elif ranges_touch(current.range, following.range):
            problems.append(f"groups {current.id} and {following.id} are adjacent")

    return problems


async def load_assignment_days(db: AsyncSession, assignment_id: uuid.UUID) -> set[str]:
    rows = (
        await db.execute(select(DayAssignment.date).where(DayAssignment.assignment_id == assignment_id))
    ).scalars().all()
    return {day_key(d) for d in rows}


async def load_assignment_groups(db: AsyncSession, assignment_id: uuid.UUID) -> list[AssignmentGroup]:
    return list(
        (
            await db.execute(
                select(AssignmentGroup)
                .where(AssignmentGroup.assignment_id == assignment_id)
                .order_by(AssignmentGroup.start_date)
            )
        ).scalars().all()
    )


async def sync_assignment_groups(
    db: AsyncSession,
    assignment_id: uuid.UUID,
    *,
    yielding: Collection[uuid.UUID] = (),
) -> GroupSyncPlan:
    await db.flush()
    days = await load_assignment_days(db, assignment_id)
    rows = await load_assignment_groups(db, assignment_id)
    by_id = {row.id: row for row in rows}

    plan = plan_group_sync(days, [span_from_group(row) for row in rows], yielding=yielding)
    if plan.is_empty:
        return plan

    for group_id in plan.deletes:
        await db.delete(by_id[group_id])
    for change in plan.updates:
        row = by_id[change.group_id]
        row.start_date = parse_day(change.start)
        row.end_date = parse_day(change.end)
    for new in plan.creates:
        db.add(
            AssignmentGroup(
                assignment_id=assignment_id,
                start_date=parse_day(new.start),
                end_date=parse_day(new.end),
                priority=new.priority,
                comment=new.comment,
            )
        )
    await db.flush()

    logger.debug(
        "Synced groups for assignment %s: %d resized, %d split off, %d deleted",
        assignment_id,
        len(plan.updates),
        len(plan.creates),
        len(plan.deletes),
    )
    return plan
