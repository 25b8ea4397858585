"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within a unit of work.

Commands:
- CreateBookingCommand: Create a booking after the slot conflict check
- UpdateBookingStatusCommand: Confirm, cancel or complete a booking
- UpdateBookingFieldsCommand: Patch contact and money fields
- BlockDateCommand / UnblockDateCommand: Take a date off / back on the calendar
- OpenDatesCommand: Add dates to a hall's available set
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional
from uuid import UUID
import logging
import re

from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import DateUnavailable, ValidationError
from shared.domain.value_objects import Money
from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    CustomerInfo,
    DietaryPreference,
    EventDetails,
    EventType,
)
from apps.bookings.domain.pricing import price_booking
from apps.bookings.repositories import BookingRepository
from apps.bookings.triggers import on_booking_created, on_booking_status_changed
from apps.halls.availability import AvailabilitySynchronizer
from apps.halls.repositories import BLOCKED, HallRepository

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

ENTRY_STATUS = {
    'owner': BookingStatus.CONFIRMED,
    'customer': BookingStatus.PENDING,
}


def parse_iso_date(value, field_name: str = 'date') -> date:
    """Accept a date or a strict ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if isinstance(value, str) and ISO_DATE.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValidationError.for_field(field_name, 'Enter a valid date in YYYY-MM-DD format.')


def _decimal(value, field_name: str, errors: Dict[str, List[str]]) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        errors.setdefault(field_name, []).append('Enter a valid amount.')
        return Decimal('0')


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``mode`` overrides the deployment's entry mode: "owner" creates a
    confirmed booking, "customer" a pending request.
    """
    hall_id: UUID
    date: object
    customer_name: str
    customer_phone: str
    total_amount: Decimal
    advance_amount: Decimal = Decimal('0')
    customer_email: str = ''
    customer_user_id: Optional[int] = None
    event_type: str = EventType.OTHER.value
    guest_count: int = 1
    dietary_preference: str = DietaryPreference.VEG.value
    special_requests: str = ''
    advance_paid: bool = False
    notes: str = ''
    mode: Optional[str] = None


@dataclass
class UpdateBookingStatusCommand:
    """Command to move a booking along the state machine"""
    booking_id: UUID
    status: str
    reason: Optional[str] = None


@dataclass
class UpdateBookingFieldsCommand:
    """Command to patch booking fields without touching its status"""
    booking_id: UUID
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    total_amount: Optional[Decimal] = None
    advance_amount: Optional[Decimal] = None
    advance_paid: Optional[bool] = None
    notes: Optional[str] = None


@dataclass
class BlockDateCommand:
    """Command to block a hall date (maintenance, private use)"""
    hall_id: UUID
    date: object


@dataclass
class UnblockDateCommand:
    """Command to return a blocked date to the available set"""
    hall_id: UUID
    date: object


@dataclass
class OpenDatesCommand:
    """Command to add dates to a hall's available set"""
    hall_id: UUID
    dates: List[object] = field(default_factory=list)


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking prevention:
    1. Validate the request (no store access, nothing written on failure)
    2. Open the unit of work and lock the hall row (SELECT FOR UPDATE), which
       serializes every creation for the hall
    3. Reject blocked dates and slots held by a pending/confirmed booking
    4. Insert the booking; the partial unique constraint
       booking_one_active_per_slot is the store-level safety net
    5. Run the creation trigger in the same transaction (re-check + claim)
    6. Commit; BookingCreated is published after commit
    """

    def __init__(
        self,
        bookings: BookingRepository,
        halls: HallRepository,
        synchronizer: AvailabilitySynchronizer,
        uow_factory: Callable[[], AbstractUnitOfWork],
        today: Callable[[], date],
        entry_mode: str = 'owner',
        require_advance: bool = True,
    ):
        self.bookings = bookings
        self.halls = halls
        self.synchronizer = synchronizer
        self.uow_factory = uow_factory
        self.today = today
        self.entry_mode = entry_mode
        self.require_advance = require_advance

    def handle(self, command: CreateBookingCommand) -> Booking:
        booking_date, status, customer, details, total, advance = self._validate(command)

        logger.info(
            f"Creating {status.value} booking for hall {command.hall_id} "
            f"on {booking_date.isoformat()}"
        )

        with self.uow_factory() as uow:
            hall = self.halls.get(command.hall_id, lock=True)
            if not hall.is_active:
                raise ValidationError.for_field('hall', 'This hall is not accepting bookings.')
            if hall.capacity and details.guest_count > hall.capacity:
                raise ValidationError.for_field(
                    'guest_count',
                    f"Guest count exceeds the hall capacity of {hall.capacity}.",
                )

            total, discount = price_booking(hall.base_price, total)
            if advance > total:
                raise ValidationError.for_field(
                    'advance_amount', 'Advance amount cannot exceed the total amount.'
                )

            if self.halls.date_status(hall.id, booking_date) == BLOCKED:
                logger.warning(f"Rejected booking for blocked date {booking_date.isoformat()}")
                raise DateUnavailable('This date is not available.')
            if self.bookings.find_active(hall.id, booking_date):
                logger.warning(
                    f"Rejected booking for hall {hall.id}: {booking_date.isoformat()} already booked"
                )
                raise DateUnavailable()

            booking = Booking.create(
                hall_id=hall.id,
                hall_name=hall.name,
                date=booking_date,
                customer=customer,
                details=details,
                total_amount=Money(total, hall.currency),
                advance_amount=Money(advance, hall.currency),
                discount=Money(discount, hall.currency),
                advance_paid=command.advance_paid,
                notes=command.notes,
                status=status,
            )
            self.bookings.add(booking)
            kept = on_booking_created(
                booking,
                bookings=self.bookings,
                synchronizer=self.synchronizer,
            )
            uow.collect_events(booking)

        if not kept:
            raise DateUnavailable()

        logger.info(f"Booking created successfully (ID: {booking.id})")
        return booking

    def _validate(self, command: CreateBookingCommand):
        errors: Dict[str, List[str]] = {}

        mode = command.mode or self.entry_mode
        status = ENTRY_STATUS.get(mode)
        if status is None:
            errors['mode'] = ['Mode must be "owner" or "customer".']

        booking_date = None
        try:
            booking_date = parse_iso_date(command.date)
        except ValidationError as exc:
            errors.update(exc.errors)
        if booking_date is not None and booking_date < self.today():
            errors['date'] = ['Cannot book a past date.']

        name = (command.customer_name or '').strip()
        phone = (command.customer_phone or '').strip()
        if not name:
            errors['customer_name'] = ['Customer name is required.']
        if not phone:
            errors['customer_phone'] = ['Customer phone is required.']

        total = _decimal(command.total_amount, 'total_amount', errors)
        advance = _decimal(command.advance_amount or 0, 'advance_amount', errors)
        if 'total_amount' not in errors and total <= 0:
            errors['total_amount'] = ['Total amount must be greater than zero.']
        if 'advance_amount' not in errors:
            if advance < 0:
                errors['advance_amount'] = ['Advance amount cannot be negative.']
            elif self.require_advance and advance <= 0:
                errors['advance_amount'] = ['An advance payment is required.']
            elif total > 0 and advance > total:
                errors['advance_amount'] = ['Advance amount cannot exceed the total amount.']

        try:
            event_type = EventType(command.event_type or EventType.OTHER.value)
        except ValueError:
            errors['event_type'] = ['Unknown event type.']
            event_type = EventType.OTHER
        try:
            dietary = DietaryPreference(command.dietary_preference or DietaryPreference.VEG.value)
        except ValueError:
            errors['dietary_preference'] = ['Unknown dietary preference.']
            dietary = DietaryPreference.VEG
        if command.guest_count is None or int(command.guest_count) < 1:
            errors['guest_count'] = ['Guest count must be at least 1.']

        if errors:
            message = errors.get('date', ['Invalid booking data.'])[0]
            raise ValidationError(message, errors)

        customer = CustomerInfo(
            name=name,
            phone=phone,
            email=(command.customer_email or '').strip(),
            user_id=command.customer_user_id,
        )
        details = EventDetails(
            event_type=event_type,
            guest_count=int(command.guest_count),
            dietary_preference=dietary,
            special_requests=command.special_requests or '',
        )
        return booking_date, status, customer, details, total, advance


class UpdateBookingStatusHandler:
    """
    Handler for status transitions

    Re-applying the current status returns early: nothing is written and
    no event is raised, so redelivered requests cause no duplicate notices.
    """

    def __init__(
        self,
        bookings: BookingRepository,
        synchronizer: AvailabilitySynchronizer,
        uow_factory: Callable[[], AbstractUnitOfWork],
        today: Callable[[], date],
    ):
        self.bookings = bookings
        self.synchronizer = synchronizer
        self.uow_factory = uow_factory
        self.today = today

    def handle(self, command: UpdateBookingStatusCommand) -> Booking:
        try:
            new_status = BookingStatus(command.status)
        except ValueError:
            raise ValidationError.for_field('status', f"Unknown status: {command.status}")

        with self.uow_factory() as uow:
            booking = self.bookings.get(command.booking_id, lock=True)
            old_status = booking.status
            if not booking.change_status(new_status, reason=command.reason, today=self.today()):
                logger.info(f"Booking {booking.id} already {new_status.value}, nothing to do")
                return booking

            self.bookings.save(booking, expected_status=old_status)
            on_booking_status_changed(old_status, booking, synchronizer=self.synchronizer)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} moved {old_status.value} -> {new_status.value}")
        return booking


class UpdateBookingFieldsHandler:
    """Handler for field patches; no status change, no calendar side effect"""

    def __init__(
        self,
        bookings: BookingRepository,
        halls: HallRepository,
        uow_factory: Callable[[], AbstractUnitOfWork],
    ):
        self.bookings = bookings
        self.halls = halls
        self.uow_factory = uow_factory

    def handle(self, command: UpdateBookingFieldsCommand) -> Booking:
        with self.uow_factory():
            booking = self.bookings.get(command.booking_id, lock=True)
            hall = self.halls.get(booking.hall_id)
            booking.update_fields(
                base_price=hall.base_price,
                customer_name=command.customer_name,
                customer_phone=command.customer_phone,
                total_amount=command.total_amount,
                advance_amount=command.advance_amount,
                advance_paid=command.advance_paid,
                notes=command.notes,
            )
            self.bookings.save(booking, expected_status=booking.status)

        logger.info(f"Booking {booking.id} fields updated")
        return booking


class BlockDateHandler:
    """Move a date to the blocked set unless a booking holds it"""

    def __init__(
        self,
        bookings: BookingRepository,
        halls: HallRepository,
        uow_factory: Callable[[], AbstractUnitOfWork],
    ):
        self.bookings = bookings
        self.halls = halls
        self.uow_factory = uow_factory

    def handle(self, command: BlockDateCommand) -> date:
        day = parse_iso_date(command.date)
        with self.uow_factory():
            hall = self.halls.get(command.hall_id, lock=True)
            if self.bookings.find_active(hall.id, day) or not self.halls.block_date(hall.id, day):
                raise DateUnavailable('This date has an active booking and cannot be blocked.')

        logger.info(f"Blocked {day.isoformat()} for hall {command.hall_id}")
        return day


class UnblockDateHandler:
    def __init__(self, halls: HallRepository, uow_factory: Callable[[], AbstractUnitOfWork]):
        self.halls = halls
        self.uow_factory = uow_factory

    def handle(self, command: UnblockDateCommand) -> bool:
        day = parse_iso_date(command.date)
        with self.uow_factory():
            hall = self.halls.get(command.hall_id, lock=True)
            changed = self.halls.unblock_date(hall.id, day)

        logger.info(f"Unblock {day.isoformat()} for hall {command.hall_id}: changed={changed}")
        return changed


class OpenDatesHandler:
    def __init__(self, halls: HallRepository, uow_factory: Callable[[], AbstractUnitOfWork]):
        self.halls = halls
        self.uow_factory = uow_factory

    def handle(self, command: OpenDatesCommand) -> int:
        days = [parse_iso_date(value, 'dates') for value in command.dates]
        with self.uow_factory():
            hall = self.halls.get(command.hall_id)
            return self.halls.open_dates(hall.id, days)
