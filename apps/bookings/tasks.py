"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .bootstrap import build_expiry_job, build_reminder_job

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled through Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.expire_stale_pending")
def expire_stale_pending() -> dict[str, int]:
    """
    Cancel pending bookings nobody answered within the expiry window.

    Runs every 24 hours. Store failures are logged inside the job and
    reported as zero; the next run re-scans.

    Returns:
        dict: {"expired": number of cancelled bookings}
    """
    expired = build_expiry_job().run()
    return {"expired": expired}


@shared_task(name="bookings.send_next_day_reminders")
def send_next_day_reminders() -> dict[str, int]:
    """
    Remind customers whose confirmed event is tomorrow in venue-local time.

    Runs daily at BOOKING_REMINDER_HOUR.

    Returns:
        dict: {"sent": number of reminders}
    """
    sent = build_reminder_job().run()
    return {"sent": sent}
