"""
Booking Repository

Maps the Booking aggregate onto the ``bookings_booking`` table.

Two store-level guards back the engine's checks:
- inserts rely on the partial unique constraint
  ``booking_one_active_per_slot``; a violation is reported as DateUnavailable
- status writes are compare-and-set on the status the transition was
  computed from, so a concurrent writer is detected instead of overwritten
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from shared.domain.exceptions import ConcurrentUpdateError, DateUnavailable, NotFoundError
from shared.domain.value_objects import Money

from .domain.entities import (
    ACTIVE_STATUSES,
    Booking,
    BookingStatus,
    CustomerInfo,
    DietaryPreference,
    EventDetails,
    EventType,
)
from .models import Booking as BookingModel

logger = logging.getLogger(__name__)

ACTIVE_VALUES = [status.value for status in ACTIVE_STATUSES]


class BookingRepository(ABC):
    """Abstract booking store"""

    @abstractmethod
    def add(self, booking: Booking) -> None:
        """Insert a new booking; raises DateUnavailable when the slot is taken."""

    @abstractmethod
    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking:
        """Return the booking or raise NotFoundError."""

    @abstractmethod
    def save(self, booking: Booking, *, expected_status: BookingStatus) -> None:
        """Write the booking only if its stored status is still ``expected_status``."""

    @abstractmethod
    def find_active(self, hall_id: UUID, day: date, *, exclude_id: Optional[UUID] = None) -> List[Booking]:
        """Pending/confirmed bookings holding the (hall, date) slot."""

    @abstractmethod
    def stale_pending(self, cutoff: datetime) -> List[Booking]:
        """Pending bookings created strictly before ``cutoff``."""

    @abstractmethod
    def confirmed_on(self, day: date) -> List[Booking]:
        """Confirmed bookings taking place on ``day``."""


def to_domain(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        hall_id=row.hall_id,
        hall_name=row.hall_name,
        date=row.date,
        status=BookingStatus(row.status),
        customer=CustomerInfo(
            name=row.customer_name,
            phone=row.customer_phone,
            email=row.customer_email,
            user_id=row.customer_id,
        ),
        details=EventDetails(
            event_type=EventType(row.event_type),
            guest_count=row.guest_count,
            dietary_preference=DietaryPreference(row.dietary_preference),
            special_requests=row.special_requests,
        ),
        total_amount=Money(row.total_amount, row.currency),
        advance_amount=Money(row.advance_amount, row.currency),
        discount=Money(row.discount, row.currency),
        advance_paid=row.advance_paid,
        notes=row.notes,
        cancellation_reason=row.cancellation_reason,
        cancelled_at=row.cancelled_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_row_fields(booking: Booking) -> dict:
    return {
        'hall_id': booking.hall_id,
        'hall_name': booking.hall_name,
        'date': booking.date,
        'status': booking.status.value,
        'customer_id': booking.customer.user_id,
        'customer_name': booking.customer.name,
        'customer_phone': booking.customer.phone,
        'customer_email': booking.customer.email,
        'event_type': booking.details.event_type.value,
        'guest_count': booking.details.guest_count,
        'dietary_preference': booking.details.dietary_preference.value,
        'special_requests': booking.details.special_requests,
        'notes': booking.notes,
        'total_amount': booking.total_amount.amount,
        'advance_amount': booking.advance_amount.amount,
        'advance_paid': booking.advance_paid,
        'discount': booking.discount.amount,
        'currency': booking.total_amount.currency,
        'cancellation_reason': booking.cancellation_reason,
        'cancelled_at': booking.cancelled_at,
        'updated_at': booking.updated_at,
    }


class DjangoBookingRepository(BookingRepository):
    """Booking store backed by the Django ORM"""

    def add(self, booking: Booking) -> None:
        try:
            with transaction.atomic():
                BookingModel.objects.create(
                    id=booking.id,
                    created_at=booking.created_at,
                    **to_row_fields(booking),
                )
        except IntegrityError as exc:
            taken = BookingModel.objects.filter(
                hall_id=booking.hall_id,
                date=booking.date,
                status__in=ACTIVE_VALUES,
            ).exists()
            if taken:
                logger.warning(
                    f"Slot constraint rejected booking for hall {booking.hall_id} "
                    f"on {booking.date.isoformat()}"
                )
                raise DateUnavailable() from exc
            raise

    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking:
        qs = BookingModel.objects.all()
        if lock:
            qs = qs.select_for_update()
        try:
            return to_domain(qs.get(pk=booking_id))
        except (BookingModel.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            raise NotFoundError('Booking not found.')

    def save(self, booking: Booking, *, expected_status: BookingStatus) -> None:
        updated = BookingModel.objects.filter(
            pk=booking.id,
            status=BookingStatus(expected_status).value,
        ).update(**to_row_fields(booking))
        if updated:
            return
        if not BookingModel.objects.filter(pk=booking.id).exists():
            raise NotFoundError('Booking not found.')
        logger.warning(
            f"Compare-and-set lost for booking {booking.id}: "
            f"expected status {BookingStatus(expected_status).value}"
        )
        raise ConcurrentUpdateError()

    def find_active(self, hall_id: UUID, day: date, *, exclude_id: Optional[UUID] = None) -> List[Booking]:
        qs = BookingModel.objects.filter(hall_id=hall_id, date=day, status__in=ACTIVE_VALUES)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return [to_domain(row) for row in qs]

    def stale_pending(self, cutoff: datetime) -> List[Booking]:
        qs = BookingModel.objects.filter(
            status=BookingStatus.PENDING.value,
            created_at__lt=cutoff,
        ).order_by('created_at')
        return [to_domain(row) for row in qs]

    def confirmed_on(self, day: date) -> List[Booking]:
        qs = BookingModel.objects.filter(
            status=BookingStatus.CONFIRMED.value,
            date=day,
        ).order_by('created_at')
        return [to_domain(row) for row in qs]
