"""
Booking Event Handlers

Subscribers that turn committed booking events into user notifications.
They run after commit, so a failing notification can never undo the
booking write that raised the event.
"""

import logging

from apps.bookings.domain.events import BookingCreated, BookingSlotLost, BookingStatusChanged
from apps.halls.repositories import HallRepository
from shared.domain.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class BookingNotificationHandlers:
    """Customer and hall-owner notices for the booking lifecycle"""

    def __init__(self, notifier, halls: HallRepository):
        self.notifier = notifier
        self.halls = halls

    def _notify(self, user_id, title: str, body: str):
        if user_id is None:
            return None
        return self.notifier.notify(user_id, title, body, type='booking')

    def _owner_id(self, hall_id):
        try:
            return self.halls.get(hall_id).owner_id
        except NotFoundError:
            logger.warning(f"Hall {hall_id} vanished before owner could be notified")
            return None

    def on_created(self, event: BookingCreated):
        day = event.date.isoformat()
        if event.status == 'confirmed':
            self._notify(
                event.customer_user_id,
                'Booking Confirmed! 🎉',
                f"Your booking for {event.hall_name} on {day} has been confirmed!",
            )
            owner_title = 'New Booking'
            owner_body = f"New booking for {day} from {event.customer_name}"
        else:
            self._notify(
                event.customer_user_id,
                'Booking Received',
                f"Your booking for {event.hall_name} on {day} has been received "
                f"and is pending confirmation.",
            )
            owner_title = 'New Booking Request'
            owner_body = f"New booking request for {day} from {event.customer_name}"

        self._notify(self._owner_id(event.hall_id), owner_title, owner_body)

    def on_status_changed(self, event: BookingStatusChanged):
        day = event.date.isoformat()
        if event.new_status == 'cancelled':
            body = (
                f"Your booking for {day} has been cancelled: {event.reason}"
                if event.reason
                else f"Your booking for {day} has been cancelled."
            )
            self._notify(event.customer_user_id, 'Booking Cancelled', body)
        elif event.new_status == 'confirmed':
            self._notify(
                event.customer_user_id,
                'Booking Confirmed! 🎉',
                f"Your booking for {event.hall_name} on {day} has been confirmed!",
            )
        elif event.new_status == 'completed':
            self._notify(
                event.customer_user_id,
                'Thank You!',
                f"We hope you had a wonderful event at {event.hall_name}! "
                f"We'd love to hear your feedback.",
            )

    def on_slot_lost(self, event: BookingSlotLost):
        self._notify(
            event.customer_user_id,
            'Booking Unavailable',
            f"Sorry, {event.date.isoformat()} is no longer available. Please choose another date.",
        )
