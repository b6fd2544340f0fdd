# certintel/celery_app.py
from celery import Celery
from dotenv import load_dotenv

from certintel.core.config import settings
from certintel.core.logging_config import configure_logging

load_dotenv()

# Ensure logging is configured in worker processes as early as possible.
configure_logging()

BROKER_URL = settings.REDIS_BROKER_URL
BACKEND_URL = settings.CELERY_RESULT_BACKEND or BROKER_URL

celery_app = Celery(
    "certificate_pipeline",
    broker=BROKER_URL,
    backend=BACKEND_URL,
    include=["certintel.tasks.certificate_pipeline"],
)

# payloads are base64 text, results are plain dicts
celery_app.conf.task_serializer = "json"
celery_app.conf.result_serializer = "json"
celery_app.conf.accept_content = ["json"]

# one OCR job per worker slot at a time
celery_app.conf.task_acks_late = True
celery_app.conf.worker_prefetch_multiplier = 1
celery_app.conf.task_reject_on_worker_lost = True

# prevent Celery from overriding our root logger
celery_app.conf.worker_hijack_root_logger = False

celery_app.conf.task_routes = {
    "certintel.tasks.certificate_pipeline.extract_certificate_task": {"queue": "extract_q"},
}
