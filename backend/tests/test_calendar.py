import unittest
from datetime import date

from planboard.services.assignment_warnings import (
    DayReasonKind,
    WarningKind,
    collect_warnings,
    warnings_enabled,
    working_dates,
)
from planboard.services.holidays import easter_sunday, holiday_name, holidays_for_year, is_holiday, is_weekend
from planboard.services.work_schedule import WorkSchedule


class TestHolidays(unittest.TestCase):
    def test_easter_dates(self) -> None:
        self.assertEqual(easter_sunday(2024), date(2024, 3, 31))
        self.assertEqual(easter_sunday(2025), date(2025, 4, 20))
        self.assertEqual(easter_sunday(2026), date(2026, 4, 5))

    def test_easter_dependent_holidays(self) -> None:
        self.assertEqual(holiday_name("2025-04-21"), "Ostermontag")
        self.assertEqual(holiday_name("2025-05-29"), "Christi Himmelfahrt")
        self.assertEqual(holiday_name("2025-06-09"), "Pfingstmontag")
        self.assertEqual(holiday_name("2025-06-19"), "Fronleichnam")

    def test_fixed_holidays(self) -> None:
        self.assertEqual(holiday_name(date(2025, 10, 26)), "Nationalfeiertag")
        self.assertEqual(holiday_name("2025-12-26"), "Stefanitag")
        self.assertTrue(is_holiday("2025-01-06"))
        self.assertFalse(is_holiday("2025-01-07"))
        self.assertEqual(len(holidays_for_year(2025)), 13)

    def test_weekend(self) -> None:
        self.assertTrue(is_weekend("2025-01-04"))
        self.assertTrue(is_weekend("2025-01-05"))
        self.assertFalse(is_weekend("2025-01-06"))


class TestWorkSchedule(unittest.TestCase):
    def test_parse_schedule(self) -> None:
        schedule = WorkSchedule.parse('{"sun":false,"mon":true,"tue":true,"wed":true,"thu":true,"fri":false,"sat":true}')
        self.assertFalse(schedule.is_working_day("2025-01-03"))  # Friday
        self.assertTrue(schedule.is_working_day("2025-01-04"))  # Saturday

    def test_malformed_schedule_falls_back_to_weekdays(self) -> None:
        for raw in ("not json", "[1, 2]", None, ""):
            schedule = WorkSchedule.parse(raw)
            self.assertEqual(schedule, WorkSchedule())

    def test_missing_days_keep_defaults(self) -> None:
        schedule = WorkSchedule.parse('{"mon": false}')
        self.assertFalse(schedule.mon)
        self.assertTrue(schedule.tue)
        self.assertFalse(schedule.sat)

    def test_round_trip_json(self) -> None:
        schedule = WorkSchedule(fri=False)
        self.assertEqual(WorkSchedule.parse(schedule.to_json()), schedule)


class TestCollectWarnings(unittest.TestCase):
    def test_working_days_produce_no_warning(self) -> None:
        self.assertIsNone(collect_warnings(["2025-01-07", "2025-01-08"]))

    def test_one_consolidated_warning(self) -> None:
        # Fri 2025-01-03 .. Tue 2025-01-07: weekend plus Epiphany on Monday.
        dates = ["2025-01-03", "2025-01-04", "2025-01-05", "2025-01-06", "2025-01-07"]
        warning = collect_warnings(dates, member_name="Anna Huber")

        self.assertEqual(warning.kind, WarningKind.holiday)
        self.assertEqual(warning.dates, ["2025-01-04", "2025-01-05", "2025-01-06"])
        self.assertEqual(
            [d.kind for d in warning.days],
            [DayReasonKind.non_working_day, DayReasonKind.non_working_day, DayReasonKind.holiday],
        )
        self.assertIn("Heilige Drei Könige", warning.message)
        self.assertIn("non-working days for Anna Huber: Jan 4, Jan 5", warning.message)

    def test_holiday_takes_precedence_over_weekend(self) -> None:
        # 2025-10-26 is a Sunday and National Day.
        warning = collect_warnings(["2025-10-26"])
        self.assertEqual(warning.days[0].kind, DayReasonKind.holiday)
        self.assertEqual(warning.days[0].label, "Nationalfeiertag")

    def test_day_off_is_reported(self) -> None:
        warning = collect_warnings(["2025-01-08"], day_offs=["2025-01-08"])
        self.assertEqual(warning.kind, WarningKind.non_working_day)
        self.assertEqual(warning.days[0].kind, DayReasonKind.day_off)
        self.assertIn("this member", warning.message)

    def test_working_dates_filter(self) -> None:
        dates = ["2025-01-03", "2025-01-04", "2025-01-06", "2025-01-07"]
        self.assertEqual(working_dates(dates), ["2025-01-03", "2025-01-07"])

    def test_setting_defaults_to_enabled(self) -> None:
        self.assertTrue(warnings_enabled(None))
        self.assertTrue(warnings_enabled("true"))
        self.assertFalse(warnings_enabled("false"))
        self.assertFalse(warnings_enabled(" False "))


if __name__ == "__main__":
    unittest.main()
