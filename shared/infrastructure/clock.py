"""Venue-local calendar helpers.

Bookings are whole days at a physical venue, so "today" and "tomorrow"
are evaluated in ``VENUE_TIME_ZONE`` rather than UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore


def venue_zone() -> ZoneInfo:
    return ZoneInfo(getattr(settings, "VENUE_TIME_ZONE", settings.TIME_ZONE))


def venue_today(now: datetime | None = None) -> date:
    now = now or timezone.now()
    return now.astimezone(venue_zone()).date()


def venue_tomorrow(now: datetime | None = None) -> date:
    return venue_today(now) + timedelta(days=1)
