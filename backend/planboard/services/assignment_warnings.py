from __future__ import annotations

import enum
from collections.abc import Collection, Iterable
from dataclasses import dataclass

from planboard.services.date_ranges import DateLike, as_day_set, day_key, parse_day
from planboard.services.holidays import holiday_name
from planboard.services.work_schedule import DEFAULT_SCHEDULE, WorkSchedule


WARN_SETTING_KEY = "warn_weekend_assignments"


class WarningKind(str, enum.Enum):
    holiday = "holiday"
    non_working_day = "non-working-day"


class DayReasonKind(str, enum.Enum):
    holiday = "holiday"
    non_working_day = "non-working-day"
    day_off = "day-off"


@dataclass(frozen=True)
class DayWarning:
    date: str
    kind: DayReasonKind
    label: str


@dataclass(frozen=True)
class AssignmentWarning:
    kind: WarningKind
    days: tuple[DayWarning, ...]
    message: str

    @property
    def dates(self) -> list[str]:
        return [d.date for d in self.days]


def _short_label(key: str) -> str:
    day = parse_day(key)
    return f"{day:%b} {day.day}"


def reason_for_day(
    value: DateLike,
    schedule: WorkSchedule = DEFAULT_SCHEDULE,
    day_offs: Collection[str] = (),
) -> DayWarning | None:
    key = day_key(value)
    name = holiday_name(key)
    if name is not None:
        return DayWarning(key, DayReasonKind.holiday, name)
    if key in day_offs:
        return DayWarning(key, DayReasonKind.day_off, _short_label(key))
    if not schedule.is_working_day(key):
        return DayWarning(key, DayReasonKind.non_working_day, _short_label(key))
    return None


def collect_warnings(
    dates: Iterable[DateLike],
    schedule: WorkSchedule = DEFAULT_SCHEDULE,
    day_offs: Iterable[DateLike] = (),
    member_name: str | None = None,
) -> AssignmentWarning | None:
    """One warning listing every date that is a holiday, outside the schedule
    or a day off, or ``None`` when the range is clean.
    """
    off = as_day_set(day_offs)
    days = [
        reason
        for reason in (reason_for_day(key, schedule, off) for key in sorted(as_day_set(dates)))
        if reason is not None
    ]
    if not days:
        return None

    holidays = [d.label for d in days if d.kind == DayReasonKind.holiday]
    other = [d.label for d in days if d.kind != DayReasonKind.holiday]
    parts = []
    if holidays:
        parts.append(f"The following dates are holidays: {', '.join(holidays)}.")
    if other:
        parts.append(
            f"The following dates are non-working days for {member_name or 'this member'}: {', '.join(other)}."
        )
    parts.append("Are you sure you want to assign work on these days?")

    return AssignmentWarning(
        kind=WarningKind.holiday if holidays else WarningKind.non_working_day,
        days=tuple(days),
        message=" ".join(parts),
    )


def working_dates(
    dates: Iterable[DateLike],
    schedule: WorkSchedule = DEFAULT_SCHEDULE,
    day_offs: Iterable[DateLike] = (),
) -> list[str]:
    """The dates of ``dates`` that would not raise a warning, sorted."""
    off = as_day_set(day_offs)
    return [key for key in sorted(as_day_set(dates)) if reason_for_day(key, schedule, off) is None]


def warnings_enabled(value: str | None) -> bool:
    """Read the user's setting. Anything but an explicit "false" means on."""
    return (value or "").strip().lower() != "false"
