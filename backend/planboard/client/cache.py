from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field

from planboard.services.date_ranges import DateLike, day_key


@dataclass(frozen=True)
class CacheSnapshot:
    days: list[dict] = field(default_factory=list)
    groups: list[dict] = field(default_factory=list)


class TimelineCache:
    """Last known day assignments and groups, as returned by the API.

    Rows are the JSON objects the server sends. Optimistic rows added before
    the server answers carry ``id=None``.
    """

    def __init__(self) -> None:
        self.days: list[dict] = []
        self.groups: list[dict] = []

    def replace(self, *, days: list[dict] | None = None, groups: list[dict] | None = None) -> None:
        if days is not None:
            self.days = list(days)
        if groups is not None:
            self.groups = list(groups)

    def snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(days=copy.deepcopy(self.days), groups=copy.deepcopy(self.groups))

    def restore(self, snapshot: CacheSnapshot) -> None:
        self.days = copy.deepcopy(snapshot.days)
        self.groups = copy.deepcopy(snapshot.groups)

    def _days_of(self, assignment_id: uuid.UUID) -> list[dict]:
        return [row for row in self.days if row["assignment_id"] == str(assignment_id)]

    def day_keys(self, assignment_id: uuid.UUID) -> set[str]:
        return {row["date"] for row in self._days_of(assignment_id)}

    def find_day(self, assignment_id: uuid.UUID, value: DateLike) -> dict | None:
        key = day_key(value)
        for row in self._days_of(assignment_id):
            if row["date"] == key:
                return row
        return None

    def group_for(self, assignment_id: uuid.UUID, value: DateLike) -> dict | None:
        key = day_key(value)
        for group in self.groups:
            if group["assignment_id"] == str(assignment_id) and group["start_date"] <= key <= group["end_date"]:
                return group
        return None

    def add_days(self, assignment_id: uuid.UUID, values: Iterable[DateLike]) -> None:
        existing = self.day_keys(assignment_id)
        for key in sorted({day_key(v) for v in values} - existing):
            self.days.append({"id": None, "assignment_id": str(assignment_id), "date": key, "comment": None})

    def remove_days(self, assignment_id: uuid.UUID, values: Iterable[DateLike]) -> None:
        keys = {day_key(v) for v in values}
        self.days = [
            row for row in self.days if not (row["assignment_id"] == str(assignment_id) and row["date"] in keys)
        ]
