"""Celery application."""
from celery import Celery

from hoa_intake.core.config import settings

celery_app = Celery(
    "hoa_intake",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["hoa_intake.workers.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_track_started=True,
    # One ingestion run at a time per worker process
    worker_prefetch_multiplier=1,
)
