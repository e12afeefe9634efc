"""Celery application for background matching.

Start a worker and the scheduler with:
    celery -A workers.celery_app worker --loglevel=info
    celery -A workers.celery_app beat --loglevel=info
"""

from celery import Celery
from celery.signals import setup_logging

from config import get_settings
from observability.logging_config import configure_logging

settings = get_settings()

celery_app = Celery(
    "tradematch",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["matching.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    "rematch-all-active": {
        "task": "matching.rematch_all_active",
        "schedule": settings.REMATCH_SCHEDULE_MINUTES * 60,
        "options": {
            # Skip a sweep that waited longer than one interval
            "expires": settings.REMATCH_SCHEDULE_MINUTES * 60,
        },
    },
}


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
