"""
Celery application configuration.
"""
from celery import Celery
from celery.schedules import crontab

from leadwatch.core.config import settings

celery_app = Celery(
    "leadwatch_tasks",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "leadwatch.celery.tasks.inactivity_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=1800,
    task_soft_time_limit=1500,

    result_expires=86400,

    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,

    beat_schedule={
        # Hourly inactivity scan
        "check-inactivity": {
            "task": "leadwatch.celery.tasks.inactivity_tasks.check_inactivity_task",
            "schedule": crontab(minute=settings.SCAN_SCHEDULE_MINUTE),
        },
    },
)
