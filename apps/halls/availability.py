"""
Availability Synchronizer

Keeps a hall's available/booked date sets consistent with the status of
the booking holding the slot:

    -> confirmed            claim the date (available -> booked)
    confirmed -> cancelled  release the date (booked -> available)
    pending -> cancelled    nothing, a pending booking never claimed it

Each step is a set operation on one date row, so replaying a transition
leaves the calendar unchanged.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional
from uuid import UUID

from .repositories import HallRepository

logger = logging.getLogger(__name__)

CONFIRMED = 'confirmed'
CANCELLED = 'cancelled'

CLAIM = 'claim'
RELEASE = 'release'
NOOP = 'noop'


def sync_action(old_status: Optional[str], new_status: str) -> str:
    """Calendar mutation implied by a booking status transition."""
    if new_status == CONFIRMED and old_status != CONFIRMED:
        return CLAIM
    if old_status == CONFIRMED and new_status == CANCELLED:
        return RELEASE
    return NOOP


class AvailabilitySynchronizer:
    def __init__(self, halls: HallRepository):
        self.halls = halls

    def sync(self, hall_id: UUID, day: date, old_status: Optional[str], new_status: str) -> str:
        action = sync_action(old_status, new_status)
        if action == CLAIM:
            self.halls.claim_date(hall_id, day)
        elif action == RELEASE:
            self.halls.release_date(hall_id, day)
        logger.info(
            f"Availability sync for hall {hall_id} on {day.isoformat()}: "
            f"{old_status} -> {new_status} ({action})"
        )
        return action


def month_calendar(statuses: dict[date, str], year: int, month: int, today: date) -> list[dict]:
    """Per-day view of one month; days missing from ``statuses`` are ``unknown``."""
    _, days_in_month = calendar.monthrange(year, month)
    result = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        result.append(
            {
                'date': day.isoformat(),
                'status': statuses.get(day, 'unknown'),
                'isPast': day < today,
                'isToday': day == today,
            }
        )
    return result
