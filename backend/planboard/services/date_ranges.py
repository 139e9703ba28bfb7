from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]


def day_key(value: DateLike) -> str:
    """Normalize a date, datetime or ISO string to its ``YYYY-MM-DD`` key.

    A ``datetime`` contributes its own calendar date; no time zone conversion
    is applied.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return date.fromisoformat(value[:10]).isoformat()
    raise TypeError("value must be a date, datetime, or ISO string")


def parse_day(key: DateLike) -> date:
    return date.fromisoformat(day_key(key))


def shift_day(key: DateLike, days: int) -> str:
    return (parse_day(key) + timedelta(days=days)).isoformat()


def day_offset(start: DateLike, end: DateLike) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""
    return (parse_day(end) - parse_day(start)).days


def day_count(start: DateLike, end: DateLike) -> int:
    """Inclusive number of days in ``[start, end]``."""
    return day_offset(start, end) + 1


def day_span(start: DateLike, end: DateLike) -> list[str]:
    """Every day key in ``[start, end]``; empty when the range is reversed."""
    first = parse_day(start)
    return [(first + timedelta(days=i)).isoformat() for i in range(day_count(start, end))]


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str

    @classmethod
    def of(cls, a: DateLike, b: DateLike) -> "DateRange":
        """Build a range from two endpoints in either order."""
        a_key, b_key = day_key(a), day_key(b)
        return cls(a_key, b_key) if a_key <= b_key else cls(b_key, a_key)

    @property
    def length(self) -> int:
        return day_count(self.start, self.end)

    def contains(self, value: DateLike) -> bool:
        return self.start <= day_key(value) <= self.end

    def days(self) -> list[str]:
        return day_span(self.start, self.end)

    def shifted(self, days: int) -> "DateRange":
        return DateRange(shift_day(self.start, days), shift_day(self.end, days))


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    return a.start <= b.end and b.start <= a.end


def ranges_touch(a: DateRange, b: DateRange) -> bool:
    """True when the ranges overlap or sit end-to-end with no gap day."""
    return a.start <= shift_day(b.end, 1) and b.start <= shift_day(a.end, 1)


def as_day_set(days: Iterable[DateLike]) -> set[str]:
    return {day_key(d) for d in days}


def is_assigned(days: Collection[str], value: DateLike) -> bool:
    return day_key(value) in days


def is_first_of_range(days: Collection[str], value: DateLike) -> bool:
    return not is_assigned(days, shift_day(value, -1))


def is_last_of_range(days: Collection[str], value: DateLike) -> bool:
    return not is_assigned(days, shift_day(value, 1))


def contiguous_range(days: Collection[str], value: DateLike) -> DateRange:
    """Maximal run of assigned days containing ``value``.

    Scans outward one day at a time from the anchor. An unassigned anchor
    yields the single-day range ``(value, value)``.
    """
    anchor = day_key(value)
    if anchor not in days:
        return DateRange(anchor, anchor)

    start = anchor
    while shift_day(start, -1) in days:
        start = shift_day(start, -1)

    end = anchor
    while shift_day(end, 1) in days:
        end = shift_day(end, 1)

    return DateRange(start, end)


def contiguous_runs(days: Iterable[DateLike]) -> list[DateRange]:
    """All maximal runs of the given days, in chronological order."""
    ordered = sorted(as_day_set(days))
    runs: list[DateRange] = []
    for key in ordered:
        if runs and shift_day(runs[-1].end, 1) == key:
            runs[-1] = DateRange(runs[-1].start, key)
        else:
            runs.append(DateRange(key, key))
    return runs
