from celery import Celery

from hybrid_app.config import settings

celery_app = Celery(
    "hybrid_power",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    task_track_started=True,
    result_expires=86400,
    include=["hybrid_app.worker.tasks"],
)
