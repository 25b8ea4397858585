"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Aggregate representing a one-day reservation of a hall
- BookingStatus: FSM states for the booking lifecycle
- CustomerInfo / EventDetails: Value objects describing who books and what for
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

from shared.domain.base import Aggregate, ValueObject, utcnow
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import Money

from .pricing import derive_discount


class BookingStatus(str, Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (owner accepted the request)
    - PENDING -> CANCELLED (declined, or expired after 48 hours)
    - CONFIRMED -> CANCELLED (cancelled by owner or customer)
    - CONFIRMED -> COMPLETED (once the event date has passed)
    CANCELLED and COMPLETED are terminal.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

# Statuses that hold the (hall, date) slot.
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

DEFAULT_CANCELLATION_MESSAGE = 'Your booking was cancelled by the venue.'
LOST_RACE_REASON = 'This date was already booked by another customer.'
EXPIRY_REASON_TEMPLATE = 'Booking expired — no response within {hours} hours'


class EventType(str, Enum):
    WEDDING = 'wedding'
    RECEPTION = 'reception'
    BIRTHDAY = 'birthday'
    CORPORATE = 'corporate'
    ENGAGEMENT = 'engagement'
    ANNIVERSARY = 'anniversary'
    BABY_SHOWER = 'babyShower'
    OTHER = 'other'


class DietaryPreference(str, Enum):
    VEG = 'veg'
    NON_VEG = 'non-veg'


class InvalidTransition(ValidationError):
    """Requested status change is not an edge of the state machine."""

    def __init__(self, current: BookingStatus, requested: BookingStatus):
        message = f"Cannot change booking status from {current.value} to {requested.value}."
        super().__init__(message, {'status': [message]})
        self.current = current
        self.requested = requested


@dataclass(frozen=True)
class CustomerInfo(ValueObject):
    name: str
    phone: str
    email: str = ''
    user_id: Optional[int] = None


@dataclass(frozen=True)
class EventDetails(ValueObject):
    event_type: EventType = EventType.OTHER
    guest_count: int = 1
    dietary_preference: DietaryPreference = DietaryPreference.VEG
    special_requests: str = ''


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    A reservation of one hall for one calendar date.

    Key invariants:
    - Only the transitions in ALLOWED_TRANSITIONS are possible
    - Re-applying the current status is a no-op and emits nothing
    - cancelled_at is set exactly when the booking enters CANCELLED
    - advance_amount never exceeds total_amount
    """

    hall_id: UUID
    date: date
    customer: CustomerInfo
    total_amount: Money
    advance_amount: Money
    discount: Money
    details: EventDetails = field(default_factory=EventDetails)
    hall_name: str = ''
    advance_paid: bool = False
    notes: str = ''
    status: BookingStatus = BookingStatus.PENDING
    cancellation_reason: str = ''
    cancelled_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        hall_id: UUID,
        hall_name: str,
        date: date,
        customer: CustomerInfo,
        details: EventDetails,
        total_amount: Money,
        advance_amount: Money,
        discount: Money,
        status: BookingStatus,
        advance_paid: bool = False,
        notes: str = '',
    ) -> 'Booking':
        """
        Create a new booking in its entry status

        Events: BookingCreated
        """
        if status not in ACTIVE_STATUSES:
            raise ValidationError.for_field('status', 'A booking can only be created as pending or confirmed.')

        booking = cls(
            hall_id=hall_id,
            hall_name=hall_name,
            date=date,
            customer=customer,
            details=details,
            total_amount=total_amount,
            advance_amount=advance_amount,
            discount=discount,
            advance_paid=advance_paid,
            notes=notes,
            status=status,
        )

        from apps.bookings.domain.events import BookingCreated

        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            hall_id=hall_id,
            hall_name=hall_name,
            date=date,
            status=status.value,
            customer_name=customer.name,
            customer_user_id=customer.user_id,
        ))
        return booking

    def change_status(
        self,
        new_status: BookingStatus,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> bool:
        """
        Move the booking along the state machine

        Returns False when ``new_status`` equals the current status (no-op).
        When ``today`` is given, COMPLETED requires a date before it.
        Events: BookingStatusChanged
        """
        new_status = BookingStatus(new_status)
        if new_status == self.status:
            return False
        if new_status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransition(self.status, new_status)
        if new_status == BookingStatus.COMPLETED and today is not None and self.date >= today:
            raise ValidationError.for_field(
                'status', 'A booking can only be completed after its event date.'
            )

        from apps.bookings.domain.events import BookingStatusChanged

        old_status = self.status
        now = now or utcnow()
        self.status = new_status
        self.updated_at = now
        if new_status == BookingStatus.CANCELLED:
            self.cancelled_at = now
            if reason:
                self.cancellation_reason = reason

        self.add_event(BookingStatusChanged(
            aggregate_id=self.id,
            booking_id=self.id,
            hall_id=self.hall_id,
            hall_name=self.hall_name,
            date=self.date,
            old_status=old_status.value,
            new_status=new_status.value,
            reason=self.cancellation_reason,
            customer_name=self.customer.name,
            customer_user_id=self.customer.user_id,
        ))
        return True

    def yield_slot(self, now: Optional[datetime] = None):
        """
        Cancel a freshly created booking that lost the race for its date

        The slot was never claimed, so the calendar is left alone and the
        creation notices are replaced by a single "no longer available" one.
        Events: BookingSlotLost
        """
        from apps.bookings.domain.events import BookingSlotLost

        now = now or utcnow()
        self.clear_events()
        self.status = BookingStatus.CANCELLED
        self.cancellation_reason = LOST_RACE_REASON
        self.cancelled_at = now
        self.updated_at = now

        self.add_event(BookingSlotLost(
            aggregate_id=self.id,
            booking_id=self.id,
            hall_id=self.hall_id,
            date=self.date,
            customer_user_id=self.customer.user_id,
        ))

    def update_fields(
        self,
        *,
        base_price: Decimal,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        total_amount: Optional[Decimal] = None,
        advance_amount: Optional[Decimal] = None,
        advance_paid: Optional[bool] = None,
        notes: Optional[str] = None,
    ):
        """
        Patch contact and money fields; the status is never touched

        The total is taken as given and the discount re-derived from it.
        """
        errors: Dict[str, List[str]] = {}
        name = self.customer.name if customer_name is None else customer_name.strip()
        phone = self.customer.phone if customer_phone is None else customer_phone.strip()
        if not name:
            errors['customer_name'] = ['Customer name is required.']
        if not phone:
            errors['customer_phone'] = ['Customer phone is required.']

        currency = self.total_amount.currency
        total = self.total_amount.amount if total_amount is None else Decimal(total_amount)
        advance = self.advance_amount.amount if advance_amount is None else Decimal(advance_amount)
        if total <= 0:
            errors['total_amount'] = ['Total amount must be greater than zero.']
        if advance < 0:
            errors['advance_amount'] = ['Advance amount cannot be negative.']
        elif advance > total:
            errors['advance_amount'] = ['Advance amount cannot exceed the total amount.']
        if errors:
            raise ValidationError('Invalid booking data.', errors)

        self.customer = CustomerInfo(
            name=name,
            phone=phone,
            email=self.customer.email,
            user_id=self.customer.user_id,
        )
        self.total_amount = Money(total, currency)
        self.advance_amount = Money(advance, currency)
        self.discount = Money(derive_discount(base_price, total), currency)
        if advance_paid is not None:
            self.advance_paid = advance_paid
        if notes is not None:
            self.notes = notes
        self.updated_at = utcnow()

    @property
    def is_active(self) -> bool:
        """Whether the booking holds its (hall, date) slot"""
        return self.status in ACTIVE_STATUSES

    @property
    def customer_cancellation_reason(self) -> str:
        if self.status != BookingStatus.CANCELLED:
            return ''
        return self.cancellation_reason or DEFAULT_CANCELLATION_MESSAGE

    def __str__(self):
        return f"Booking {self.id} {self.date.isoformat()} ({self.status.value})"
