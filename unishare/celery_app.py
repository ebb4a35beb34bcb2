from celery import Celery
from .core.config import settings

# Create Celery instance
celery_app = Celery(
    "unishare",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["unishare.tasks"]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,  # 1 hour
    task_routes={
        "unishare.tasks.send_email": {"queue": "emails"},
    },
    # Enqueueing happens on the request path: fail fast instead of retrying the broker
    task_publish_retry=False,
    task_ignore_result=True,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    worker_max_tasks_per_child=1000,
    task_always_eager=settings.TESTING,
)
