"""
Booking write triggers

Side effects that must happen in the same transaction as a booking write.
Command handlers and the expiry sweep call them right after the booking
row is written, before the unit of work commits:

- on_booking_created: re-checks the slot and, if another active booking
  holds it, cancels the new booking instead of leaving two; otherwise
  claims the date for a confirmed booking
- on_booking_status_changed: keeps the hall calendar in step with the
  transition
"""

import logging

from apps.halls.availability import NOOP, AvailabilitySynchronizer

from .domain.entities import Booking, BookingStatus
from .repositories import BookingRepository

logger = logging.getLogger(__name__)


def on_booking_created(
    booking: Booking,
    *,
    bookings: BookingRepository,
    synchronizer: AvailabilitySynchronizer,
) -> bool:
    """Return False when the booking lost its slot and was cancelled."""
    rivals = bookings.find_active(booking.hall_id, booking.date, exclude_id=booking.id)
    if rivals:
        entry_status = booking.status
        booking.yield_slot()
        bookings.save(booking, expected_status=entry_status)
        logger.warning(
            f"Booking {booking.id} cancelled: {booking.date.isoformat()} already held by "
            f"{', '.join(str(rival.id) for rival in rivals)}"
        )
        return False

    synchronizer.sync(booking.hall_id, booking.date, None, booking.status.value)
    return True


def on_booking_status_changed(
    old_status: BookingStatus,
    booking: Booking,
    *,
    synchronizer: AvailabilitySynchronizer,
) -> str:
    if old_status == booking.status:
        return NOOP
    return synchronizer.sync(
        booking.hall_id,
        booking.date,
        BookingStatus(old_status).value,
        booking.status.value,
    )
