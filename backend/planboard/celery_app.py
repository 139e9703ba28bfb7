from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from planboard.config import settings


celery_app = Celery(
    "planboard",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["planboard.celery_tasks"],
)

celery_app.conf.timezone = "UTC"
celery_app.conf.task_serializer = "json"
celery_app.conf.result_serializer = "json"
celery_app.conf.accept_content = ["json"]

celery_app.conf.beat_schedule = {
    "check-group-consistency": {
        "task": "planboard.celery_tasks.check_group_consistency",
        "schedule": crontab(minute=f"*/{settings.GROUP_CONSISTENCY_CRON_MINUTES}"),
    },
}
