# pharmacart/celery_worker.py
from celery import Celery

from pharmacart.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    EXCHANGE_RATE_REFRESH_SECONDS,
)

celery_app = Celery(
    "pharmacart",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# task modules, imported explicitly so the worker registers them
celery_app.conf.imports = (
    "pharmacart.tasks.rates",
    "pharmacart.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "refresh-exchange-rates": {
        "task": "pharmacart.tasks.rates.refresh_exchange_rates_task",
        "schedule": float(EXCHANGE_RATE_REFRESH_SECONDS),  # every 6 h by default
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
