from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from planboard.models.team_member import DEFAULT_WORK_SCHEDULE
from planboard.services.date_ranges import DateLike, parse_day


logger = logging.getLogger(__name__)

# Indexed by date.weekday().
WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class WorkSchedule:
    mon: bool = True
    tue: bool = True
    wed: bool = True
    thu: bool = True
    fri: bool = True
    sat: bool = False
    sun: bool = False

    @classmethod
    def parse(cls, raw: str | dict | None) -> "WorkSchedule":
        """Build a schedule from the JSON stored on a team member.

        Missing weekdays keep their default. Anything unreadable falls back to
        the default Monday-to-Friday week.
        """
        if raw is None or raw == "":
            return cls()
        data = raw
        if isinstance(raw, str):
            try:
                data = json.loads(raw)
            except ValueError:
                logger.warning("Unreadable work schedule %r, using default", raw)
                return cls()
        if not isinstance(data, dict):
            logger.warning("Work schedule is not an object: %r, using default", raw)
            return cls()
        return cls(**{key: bool(data[key]) for key in WEEKDAY_KEYS if key in data})

    def to_json(self) -> str:
        return json.dumps({key: getattr(self, key) for key in WEEKDAY_KEYS}, separators=(",", ":"))

    def is_working_day(self, value: DateLike) -> bool:
        return getattr(self, WEEKDAY_KEYS[parse_day(value).weekday()])


DEFAULT_SCHEDULE = WorkSchedule.parse(DEFAULT_WORK_SCHEDULE)
