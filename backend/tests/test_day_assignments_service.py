import unittest
import uuid

from planboard.models.enums import AssignmentPriority
from planboard.services import day_assignments as service
from planboard.services.errors import NotFoundError, ValidationError
from timeline_fixtures import TimelineDbTestCase, d


class TestCreateDayAssignments(TimelineDbTestCase):
    async def test_create_is_idempotent(self) -> None:
        assignment = await self.make_assignment()

        record, created = await service.create_day_assignment(self.db, assignment_id=assignment.id, day=d("2025-01-05"))
        again, created_again = await service.create_day_assignment(
            self.db, assignment_id=assignment.id, day=d("2025-01-05")
        )

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(record.id, again.id)
        self.assertEqual(await self.day_keys(assignment.id), ["2025-01-05"])

    async def test_unknown_assignment_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await service.create_day_assignment(self.db, assignment_id=uuid.uuid4(), day=d("2025-01-05"))

    async def test_new_day_extends_adjacent_group(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-07")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-07", priority=AssignmentPriority.high)

        await service.create_day_assignment(self.db, assignment_id=assignment.id, day=d("2025-01-08"))

        self.assertEqual(await self.group_rows(assignment.id), [("2025-01-05", "2025-01-08", "high", None)])
        await self.assertGroupsConsistent(assignment.id)

    async def test_day_inside_group_changes_nothing(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-07")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-07", comment="sprint")

        await service.create_day_assignment(self.db, assignment_id=assignment.id, day=d("2025-01-06"))

        self.assertEqual(await self.group_rows(assignment.id), [("2025-01-05", "2025-01-07", "normal", "sprint")])

    async def test_bridging_day_merges_groups_keeping_earliest(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-01", "2025-01-02")
        await self.add_days(assignment.id, "2025-01-04", "2025-01-05")
        first = await self.add_group(assignment.id, "2025-01-01", "2025-01-02", priority=AssignmentPriority.high)
        await self.add_group(assignment.id, "2025-01-04", "2025-01-05", priority=AssignmentPriority.low)

        await service.create_day_assignment(self.db, assignment_id=assignment.id, day=d("2025-01-03"))

        groups = await self.group_rows(assignment.id)
        self.assertEqual(groups, [("2025-01-01", "2025-01-05", "high", None)])
        self.assertEqual(first.start_date, d("2025-01-01"))
        self.assertEqual(first.end_date, d("2025-01-05"))
        await self.assertGroupsConsistent(assignment.id)

    async def test_day_touching_no_group_creates_none(self) -> None:
        assignment = await self.make_assignment()
        await service.create_day_assignment(self.db, assignment_id=assignment.id, day=d("2025-01-05"))
        self.assertEqual(await self.group_rows(assignment.id), [])

    async def test_batch_create_returns_only_new_records(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-06")

        created = await service.create_day_assignments(
            self.db,
            assignment_id=assignment.id,
            days=[d("2025-01-05"), d("2025-01-06"), d("2025-01-07"), d("2025-01-07")],
        )

        self.assertEqual(sorted(r.date.isoformat() for r in created), ["2025-01-05", "2025-01-07"])
        self.assertEqual(await self.day_keys(assignment.id), ["2025-01-05", "2025-01-06", "2025-01-07"])

    async def test_batch_create_requires_dates(self) -> None:
        assignment = await self.make_assignment()
        with self.assertRaises(ValidationError):
            await service.create_day_assignments(self.db, assignment_id=assignment.id, days=[])


class TestDeleteDayAssignments(TimelineDbTestCase):
    async def test_interior_delete_splits_group(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-07")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-07", priority=AssignmentPriority.high)
        middle = await self.day_row(assignment.id, "2025-01-06")

        await service.delete_day_assignment(self.db, day_assignment_id=middle.id)

        self.assertEqual(await self.day_keys(assignment.id), ["2025-01-05", "2025-01-07"])
        self.assertEqual(
            await self.group_rows(assignment.id),
            [("2025-01-05", "2025-01-05", "high", None), ("2025-01-07", "2025-01-07", "high", None)],
        )
        await self.assertGroupsConsistent(assignment.id)

    async def test_edge_delete_shrinks_group(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-07")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-07", comment="x")
        last = await self.day_row(assignment.id, "2025-01-07")

        await service.delete_day_assignment(self.db, day_assignment_id=last.id)

        self.assertEqual(await self.group_rows(assignment.id), [("2025-01-05", "2025-01-06", "normal", "x")])

    async def test_deleting_only_day_removes_group(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-05", priority=AssignmentPriority.low)
        only = await self.day_row(assignment.id, "2025-01-05")

        await service.delete_day_assignment(self.db, day_assignment_id=only.id)

        self.assertEqual(await self.group_rows(assignment.id), [])

    async def test_delete_missing_day_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            await service.delete_day_assignment(self.db, day_assignment_id=uuid.uuid4())

    async def test_batch_delete_is_all_or_nothing(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-06")
        first = await self.day_row(assignment.id, "2025-01-05")

        with self.assertRaises(NotFoundError):
            await service.delete_day_assignments(self.db, day_assignment_ids=[first.id, uuid.uuid4()])

        self.assertEqual(await self.day_keys(assignment.id), ["2025-01-05", "2025-01-06"])

    async def test_batch_delete_realigns_groups(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05", "2025-01-09")
        await self.add_group(assignment.id, "2025-01-05", "2025-01-09", priority=AssignmentPriority.high, comment="c")
        ids = [(await self.day_row(assignment.id, k)).id for k in ("2025-01-06", "2025-01-07")]

        await service.delete_day_assignments(self.db, day_assignment_ids=ids)

        self.assertEqual(
            await self.group_rows(assignment.id),
            [("2025-01-05", "2025-01-05", "high", "c"), ("2025-01-08", "2025-01-09", "high", "c")],
        )
        await self.assertGroupsConsistent(assignment.id)

    async def test_update_comment(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-05")
        row = await self.day_row(assignment.id, "2025-01-05")

        updated = await service.update_day_comment(self.db, day_assignment_id=row.id, comment="on site")
        self.assertEqual(updated.comment, "on site")
        cleared = await service.update_day_comment(self.db, day_assignment_id=row.id, comment="")
        self.assertIsNone(cleared.comment)


class TestListDayAssignments(TimelineDbTestCase):
    async def test_window_filter(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-01-01", "2025-01-10")

        rows = await service.list_day_assignments(self.db, start_date=d("2025-01-03"), end_date=d("2025-01-04"))

        self.assertEqual([r.date.isoformat() for r in rows], ["2025-01-03", "2025-01-04"])

    async def test_reversed_window_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await service.list_day_assignments(self.db, start_date=d("2025-01-05"), end_date=d("2025-01-01"))


if __name__ == "__main__":
    unittest.main()
