import os
from datetime import timedelta

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("hallbook")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cancel pending requests nobody answered - once a day
    "expire-stale-pending-bookings": {
        "task": "bookings.expire_stale_pending",
        "schedule": timedelta(hours=24),
        "options": {"expires": 60 * 60},
    },
    # Remind customers about tomorrow's events - every morning, venue time
    "send-next-day-reminders": {
        "task": "bookings.send_next_day_reminders",
        "schedule": crontab(minute=0, hour=int(os.environ.get("BOOKING_REMINDER_HOUR", 9))),
    },
}
