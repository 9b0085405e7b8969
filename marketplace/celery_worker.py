# marketplace/celery_worker.py
from celery import Celery

from marketplace.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, CELERY_TASK_ALWAYS_EAGER

celery_app = Celery(
    "marketplace",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "marketplace.services.notification_service",
)

celery_app.conf.timezone = "UTC"

# testy i dev bez brokera - taski wykonywane synchronicznie
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
