from celery import Celery
from skrbl.core.config import settings

celery_app = Celery(
    "skrbl",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["skrbl.tasks.agent_tasks", "skrbl.tasks.email_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

celery_app.conf.beat_schedule = {
    "process-drip-queue": {
        "task": "process_drip_queue",
        "schedule": settings.DRIP_INTERVAL_MINUTES * 60.0,
    },
}
