"""
Scheduled maintenance jobs

- ExpireStalePendingJob: cancels pending bookings nobody answered in time
- SendNextDayRemindersJob: reminds customers of tomorrow's events

Both are idempotent re-scans. A store failure is logged and reported as
zero work done; the next scheduled run picks up whatever was missed.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional
import logging

from django.db import DatabaseError

from shared.application.uow import AbstractUnitOfWork
from shared.domain.base import utcnow
from shared.domain.exceptions import ConcurrentUpdateError, StoreUnavailable
from apps.bookings.domain.entities import EXPIRY_REASON_TEMPLATE, BookingStatus
from apps.bookings.repositories import BookingRepository
from apps.bookings.triggers import on_booking_status_changed
from apps.halls.availability import AvailabilitySynchronizer

logger = logging.getLogger(__name__)

REMINDER_TITLE = 'Reminder: Your Event is Tomorrow! 📅'


class ExpireStalePendingJob:
    """
    Cancel pending bookings created more than ``expiry_hours`` ago

    All transitions of one run commit together. Each write is conditional
    on the booking still being pending, so a booking confirmed by the owner
    while the sweep runs is left alone.
    """

    def __init__(
        self,
        bookings: BookingRepository,
        synchronizer: AvailabilitySynchronizer,
        uow_factory: Callable[[], AbstractUnitOfWork],
        expiry_hours: int = 48,
    ):
        self.bookings = bookings
        self.synchronizer = synchronizer
        self.uow_factory = uow_factory
        self.expiry_hours = expiry_hours

    def run(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        cutoff = now - timedelta(hours=self.expiry_hours)
        reason = EXPIRY_REASON_TEMPLATE.format(hours=self.expiry_hours)

        try:
            with self.uow_factory() as uow:
                expired = 0
                for booking in self.bookings.stale_pending(cutoff):
                    booking.change_status(BookingStatus.CANCELLED, reason=reason, now=now)
                    try:
                        self.bookings.save(booking, expected_status=BookingStatus.PENDING)
                    except ConcurrentUpdateError:
                        logger.info(f"Booking {booking.id} changed during expiry sweep, skipped")
                        booking.clear_events()
                        continue
                    on_booking_status_changed(
                        BookingStatus.PENDING, booking, synchronizer=self.synchronizer
                    )
                    uow.collect_events(booking)
                    expired += 1
        except (StoreUnavailable, DatabaseError) as exc:
            logger.error(f"Expiry sweep aborted, will retry next run: {exc}", exc_info=True)
            return 0

        if expired:
            logger.info(f"Expired {expired} stale pending bookings (cutoff {cutoff.isoformat()})")
        else:
            logger.info("No stale pending bookings to expire")
        return expired


class SendNextDayRemindersJob:
    """One reminder per confirmed booking taking place tomorrow (venue time)"""

    def __init__(
        self,
        bookings: BookingRepository,
        notifier,
        tomorrow: Callable[[Optional[datetime]], date],
    ):
        self.bookings = bookings
        self.notifier = notifier
        self.tomorrow = tomorrow

    def run(self, now: Optional[datetime] = None) -> int:
        day = self.tomorrow(now)
        try:
            bookings = self.bookings.confirmed_on(day)
        except (StoreUnavailable, DatabaseError) as exc:
            logger.error(f"Reminder sweep aborted, will retry next run: {exc}", exc_info=True)
            return 0

        sent = 0
        for booking in bookings:
            if booking.customer.user_id is None:
                continue
            self.notifier.notify(
                booking.customer.user_id,
                REMINDER_TITLE,
                f"Don't forget - your event at {booking.hall_name} is tomorrow!",
                type='reminder',
            )
            sent += 1

        logger.info(f"Sent {sent} reminders for {day.isoformat()}")
        return sent
