import uuid

from sqlalchemy import select

from planboard.models.assignment_group import AssignmentGroup
from planboard.models.day_assignment import DayAssignment
from planboard.services import assignments as assignment_service
from planboard.services import milestones as milestone_service
from planboard.services.errors import NotFoundError, ValidationError

from timeline_fixtures import TimelineDbTestCase, d


class TestMilestones(TimelineDbTestCase):
    async def test_crud_and_window(self) -> None:
        project = await self.make_project()
        first = await milestone_service.create_milestone(self.db, project_id=project.id, day=d("2025-04-01"), name=" Go-live ")
        await milestone_service.create_milestone(self.db, project_id=project.id, day=d("2025-05-01"))

        self.assertEqual(first.name, "Go-live")
        in_april = await milestone_service.list_milestones(
            self.db, start_date=d("2025-04-01"), end_date=d("2025-04-30")
        )
        self.assertEqual([m.id for m in in_april], [first.id])

        updated = await milestone_service.update_milestone(self.db, milestone_id=first.id, day=d("2025-04-02"))
        self.assertEqual((updated.date, updated.name), (d("2025-04-02"), "Go-live"))
        updated = await milestone_service.update_milestone(self.db, milestone_id=first.id, name=None)
        self.assertIsNone(updated.name)

        await milestone_service.delete_milestone(self.db, milestone_id=first.id)
        with self.assertRaises(NotFoundError):
            await milestone_service.get_milestone(self.db, first.id)

    async def test_unknown_project_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await milestone_service.create_milestone(self.db, project_id=uuid.uuid4(), day=d("2025-04-01"))


class TestAssignments(TimelineDbTestCase):
    async def test_one_assignment_per_project_and_member(self) -> None:
        project = await self.make_project()
        member = await self.make_member()

        created = await assignment_service.create_assignment(self.db, project_id=project.id, team_member_id=member.id)
        with self.assertRaises(ValidationError):
            await assignment_service.create_assignment(self.db, project_id=project.id, team_member_id=member.id)

        listed = await assignment_service.list_assignments(self.db, team_member_id=member.id)
        self.assertEqual([a.id for a in listed], [created.id])

    async def test_unknown_member_is_rejected(self) -> None:
        project = await self.make_project()
        with self.assertRaises(ValidationError):
            await assignment_service.create_assignment(self.db, project_id=project.id, team_member_id=uuid.uuid4())

    async def test_delete_cascades_to_days_and_groups(self) -> None:
        assignment = await self.make_assignment()
        await self.add_days(assignment.id, "2025-03-01", "2025-03-02")
        await self.add_group(assignment.id, "2025-03-01", "2025-03-02")
        await self.db.commit()

        await assignment_service.delete_assignment(self.db, assignment_id=assignment.id)
        await self.db.commit()
        self.db.expunge_all()

        days = (await self.db.execute(select(DayAssignment))).scalars().all()
        groups = (await self.db.execute(select(AssignmentGroup))).scalars().all()
        self.assertEqual((days, groups), ([], []))

        with self.assertRaises(NotFoundError):
            await assignment_service.get_assignment(self.db, assignment.id)
