from __future__ import annotations

import logging

from sqlalchemy import select

from planboard.db import SessionLocal
from planboard.models.assignment import Assignment
from planboard.services.group_merge import (
    find_group_inconsistencies,
    load_assignment_days,
    load_assignment_groups,
    span_from_group,
    sync_assignment_groups,
)


logger = logging.getLogger(__name__)


async def check_group_consistency(db) -> int:
    """Re-align every assignment whose groups disagree with its days.

    Returns the number of assignments that had to be repaired. The caller
    commits.
    """
    repaired = 0
    assignment_ids = (await db.execute(select(Assignment.id))).scalars().all()
    for assignment_id in assignment_ids:
        days = await load_assignment_days(db, assignment_id)
        groups = [span_from_group(g) for g in await load_assignment_groups(db, assignment_id)]
        problems = find_group_inconsistencies(days, groups)
        if not problems:
            continue
        logger.error("Assignment %s has inconsistent groups: %s", assignment_id, "; ".join(problems))
        await sync_assignment_groups(db, assignment_id)
        repaired += 1
    return repaired


async def run_group_consistency() -> int:
    async with SessionLocal() as db:
        repaired = await check_group_consistency(db)
        await db.commit()
    if repaired:
        logger.warning("Repaired groups of %d assignment(s)", repaired)
    return repaired
