"""
Composition root for the booking core

Wires repositories, the unit of work and the notification dispatcher into
the command and event handlers and registers them on a message bus.
Production wiring happens once in BookingsConfig.ready(); tests call
``bootstrap`` with in-memory fakes and a private bus.
"""

from typing import Callable, Optional
import logging

from django.conf import settings

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.infrastructure.clock import venue_today, venue_tomorrow
from apps.bookings.application.command_handlers import (
    BlockDateCommand,
    BlockDateHandler,
    CreateBookingCommand,
    CreateBookingHandler,
    OpenDatesCommand,
    OpenDatesHandler,
    UnblockDateCommand,
    UnblockDateHandler,
    UpdateBookingFieldsCommand,
    UpdateBookingFieldsHandler,
    UpdateBookingStatusCommand,
    UpdateBookingStatusHandler,
)
from apps.bookings.application.event_handlers import BookingNotificationHandlers
from apps.bookings.application.maintenance import ExpireStalePendingJob, SendNextDayRemindersJob
from apps.bookings.domain.events import BookingCreated, BookingSlotLost, BookingStatusChanged
from apps.bookings.repositories import BookingRepository, DjangoBookingRepository
from apps.halls.availability import AvailabilitySynchronizer
from apps.halls.repositories import DjangoHallRepository, HallRepository

logger = logging.getLogger(__name__)


def _default_notifier():
    from apps.notifications.services import NotificationDispatcher

    return NotificationDispatcher()


def bootstrap(
    bus: MessageBus,
    *,
    bookings: Optional[BookingRepository] = None,
    halls: Optional[HallRepository] = None,
    notifier=None,
    uow_factory: Optional[Callable] = None,
    today: Optional[Callable] = None,
    entry_mode: Optional[str] = None,
    require_advance: Optional[bool] = None,
) -> MessageBus:
    bookings = bookings or DjangoBookingRepository()
    halls = halls or DjangoHallRepository()
    notifier = notifier or _default_notifier()
    uow_factory = uow_factory or (lambda: DjangoUnitOfWork(bus))
    today = today or venue_today
    if entry_mode is None:
        entry_mode = getattr(settings, 'BOOKING_ENTRY_MODE', 'owner')
    if require_advance is None:
        require_advance = getattr(settings, 'BOOKING_REQUIRE_ADVANCE', True)

    synchronizer = AvailabilitySynchronizer(halls)

    bus.register_command_handler(
        CreateBookingCommand,
        CreateBookingHandler(
            bookings,
            halls,
            synchronizer,
            uow_factory,
            today,
            entry_mode=entry_mode,
            require_advance=require_advance,
        ).handle,
    )
    bus.register_command_handler(
        UpdateBookingStatusCommand,
        UpdateBookingStatusHandler(bookings, synchronizer, uow_factory, today).handle,
    )
    bus.register_command_handler(
        UpdateBookingFieldsCommand,
        UpdateBookingFieldsHandler(bookings, halls, uow_factory).handle,
    )
    bus.register_command_handler(BlockDateCommand, BlockDateHandler(bookings, halls, uow_factory).handle)
    bus.register_command_handler(UnblockDateCommand, UnblockDateHandler(halls, uow_factory).handle)
    bus.register_command_handler(OpenDatesCommand, OpenDatesHandler(halls, uow_factory).handle)

    notices = BookingNotificationHandlers(notifier, halls)
    bus.register_event_handler(BookingCreated, notices.on_created)
    bus.register_event_handler(BookingStatusChanged, notices.on_status_changed)
    bus.register_event_handler(BookingSlotLost, notices.on_slot_lost)

    logger.debug(f"Booking core wired (entry mode: {entry_mode})")
    return bus


def build_expiry_job(bus: Optional[MessageBus] = None) -> ExpireStalePendingJob:
    if bus is None:
        from shared.application.message_bus import message_bus as bus
    halls = DjangoHallRepository()
    return ExpireStalePendingJob(
        DjangoBookingRepository(),
        AvailabilitySynchronizer(halls),
        lambda: DjangoUnitOfWork(bus),
        expiry_hours=getattr(settings, 'BOOKING_PENDING_EXPIRY_HOURS', 48),
    )


def build_reminder_job(notifier=None) -> SendNextDayRemindersJob:
    return SendNextDayRemindersJob(
        DjangoBookingRepository(),
        notifier or _default_notifier(),
        venue_tomorrow,
    )
