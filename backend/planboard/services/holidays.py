from __future__ import annotations

from datetime import date, timedelta
from functools import lru_cache

from planboard.services.date_ranges import DateLike, parse_day


# Austrian public holidays, German names.
FIXED_HOLIDAYS: dict[tuple[int, int], str] = {
    (1, 1): "Neujahr",
    (1, 6): "Heilige Drei Könige",
    (5, 1): "Staatsfeiertag",
    (8, 15): "Mariä Himmelfahrt",
    (10, 26): "Nationalfeiertag",
    (11, 1): "Allerheiligen",
    (12, 8): "Mariä Empfängnis",
    (12, 25): "Weihnachten",
    (12, 26): "Stefanitag",
}

# Days after Easter Sunday.
EASTER_HOLIDAYS: dict[int, str] = {
    1: "Ostermontag",
    39: "Christi Himmelfahrt",
    50: "Pfingstmontag",
    60: "Fronleichnam",
}


def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday (Meeus/Jones/Butcher)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


@lru_cache(maxsize=64)
def holidays_for_year(year: int) -> dict[date, str]:
    holidays = {date(year, month, day): name for (month, day), name in FIXED_HOLIDAYS.items()}
    easter = easter_sunday(year)
    for offset, name in EASTER_HOLIDAYS.items():
        holidays[easter + timedelta(days=offset)] = name
    return holidays


def holiday_name(value: DateLike) -> str | None:
    day = parse_day(value)
    return holidays_for_year(day.year).get(day)


def is_holiday(value: DateLike) -> bool:
    return holiday_name(value) is not None


def is_weekend(value: DateLike) -> bool:
    return parse_day(value).weekday() >= 5
