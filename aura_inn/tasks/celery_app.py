"""Celery application and beat schedule for background jobs."""

from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready

from aura_inn.config import settings


def _redis_url_for_celery(url: str) -> str:
    """Celery requires ssl_cert_reqs for rediss:// URLs."""
    if not url or not url.strip().lower().startswith("rediss://"):
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    if "ssl_cert_reqs" not in qs:
        qs["ssl_cert_reqs"] = ["CERT_NONE"]
        return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))
    return url


_redis_url = _redis_url_for_celery(settings.redis_url)

celery = Celery(
    "aura_inn",
    broker=_redis_url,
    backend=_redis_url,
    include=["aura_inn.tasks.jobs"],
)

celery.conf.timezone = settings.timezone


# Catch up on a daily run missed while no worker was up. The sweep skips
# bookings already flagged, so an extra run the same day sends nothing twice.
@worker_ready.connect
def on_worker_ready(sender, **kwargs):
    from aura_inn.tasks.jobs import send_pre_arrival_reminders

    send_pre_arrival_reminders.delay()


celery.conf.beat_schedule = {
    "pre-arrival-reminders-daily": {
        "task": "aura_inn.tasks.jobs.send_pre_arrival_reminders",
        "schedule": crontab(hour=settings.reminder_hour, minute=settings.reminder_minute),
    },
}
