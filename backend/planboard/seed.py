from __future__ import annotations

import asyncio
import os
import uuid
from datetime import date, timedelta

from dotenv import load_dotenv
from sqlalchemy import select

from planboard.db import SessionLocal
from planboard.models.assignment import Assignment
from planboard.models.enums import ProjectStatus
from planboard.models.project import Project
from planboard.models.team_member import DEFAULT_WORK_SCHEDULE, TeamMember
from planboard.services.day_assignments import create_day_assignments

load_dotenv()

PROJECTS = [
    ("Website Relaunch", ProjectStatus.confirmed),
    ("Warehouse Migration", ProjectStatus.tentative),
]

MEMBERS = [
    ("Anna", "Huber", DEFAULT_WORK_SCHEDULE),
    ("Lukas", "Gruber", '{"sun":false,"mon":true,"tue":true,"wed":true,"thu":true,"fri":false,"sat":false}'),
    ("Sophie", "Wagner", DEFAULT_WORK_SCHEDULE),
]


async def seed() -> None:
    print("Starting seed process...")
    manager_id = os.getenv("SEED_MANAGER_ID")
    async with SessionLocal() as db:
        projects = []
        for name, status in PROJECTS:
            project = (await db.execute(select(Project).where(Project.name == name))).scalar_one_or_none()
            if project is None:
                project = Project(
                    name=name,
                    status=status,
                    manager_id=uuid.UUID(manager_id) if manager_id else None,
                )
                db.add(project)
                print(f"Created project {name}")
            projects.append(project)

        members = []
        for first_name, last_name, schedule in MEMBERS:
            member = (
                await db.execute(
                    select(TeamMember).where(TeamMember.first_name == first_name, TeamMember.last_name == last_name)
                )
            ).scalar_one_or_none()
            if member is None:
                member = TeamMember(first_name=first_name, last_name=last_name, work_schedule=schedule)
                db.add(member)
                print(f"Created team member {first_name} {last_name}")
            members.append(member)
        await db.flush()

        monday = date.today() - timedelta(days=date.today().weekday())
        for index, member in enumerate(members):
            project = projects[index % len(projects)]
            assignment = (
                await db.execute(
                    select(Assignment).where(
                        Assignment.project_id == project.id, Assignment.team_member_id == member.id
                    )
                )
            ).scalar_one_or_none()
            if assignment is not None:
                continue
            assignment = Assignment(project_id=project.id, team_member_id=member.id)
            db.add(assignment)
            await db.flush()
            start = monday + timedelta(days=index * 2)
            await create_day_assignments(
                db, assignment_id=assignment.id, days=[start + timedelta(days=i) for i in range(4)]
            )

        await db.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
