from __future__ import annotations

import asyncio

from planboard.celery_app import celery_app
from planboard.jobs.group_consistency import run_group_consistency


@celery_app.task(name="planboard.celery_tasks.check_group_consistency")
def check_group_consistency() -> int:
    return asyncio.run(run_group_consistency())
