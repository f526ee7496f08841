from celery import Celery

from src.alerts_engine.schedules.beat import beat_schedule
from src.config import get_settings

settings = get_settings()

app = Celery(
    "stockwatch",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["src.alerts_engine.tasks"],
)

# crontab entries in beat.py are read in this timezone
app.conf.update(
    enable_utc=True,
    timezone=settings.celery_timezone,
    task_track_started=True,
    result_expires=60 * 60 * 24,
    beat_schedule=beat_schedule,
)
