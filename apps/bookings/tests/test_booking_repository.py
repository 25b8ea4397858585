"""Tests for the store-level guards of the Django booking repository."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db import IntegrityError
from django.test import TestCase

from apps.bookings.domain.entities import Booking, BookingStatus, CustomerInfo, EventDetails
from apps.bookings.models import Booking as BookingModel
from apps.bookings.repositories import DjangoBookingRepository
from apps.halls.models import Hall
from shared.domain.exceptions import ConcurrentUpdateError, DateUnavailable
from shared.domain.value_objects import Money

EVENT_DAY = date(2030, 6, 20)


class DjangoBookingRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.hall = Hall.objects.create(name="Tisha Grand Hall", base_price=Decimal("75000"))
        self.repo = DjangoBookingRepository()

    def _booking(self, status=BookingStatus.CONFIRMED, name="Asha Rao", day=EVENT_DAY) -> Booking:
        return Booking.create(
            hall_id=self.hall.id,
            hall_name=self.hall.name,
            date=day,
            customer=CustomerInfo(name=name, phone="+91 90000 00001"),
            details=EventDetails(guest_count=100),
            total_amount=Money(Decimal("70000")),
            advance_amount=Money(Decimal("20000")),
            discount=Money(Decimal("5000")),
            status=status,
        )

    def _active_count(self) -> int:
        return BookingModel.objects.filter(
            hall=self.hall, date=EVENT_DAY, status__in=["pending", "confirmed"]
        ).count()

    def test_second_active_booking_for_a_slot_is_refused_by_the_store(self) -> None:
        self.repo.add(self._booking())

        for status in (BookingStatus.CONFIRMED, BookingStatus.PENDING):
            with self.assertRaises(DateUnavailable):
                self.repo.add(self._booking(status=status, name="Ravi Menon"))

        self.assertEqual(self._active_count(), 1)
        self.assertEqual(BookingModel.objects.get().customer_name, "Asha Rao")

    def test_cancelled_booking_does_not_hold_the_slot(self) -> None:
        first = self._booking()
        self.repo.add(first)
        first.change_status(BookingStatus.CANCELLED)
        self.repo.save(first, expected_status=BookingStatus.CONFIRMED)

        self.repo.add(self._booking(name="Ravi Menon"))

        self.assertEqual(self._active_count(), 1)
        self.assertEqual(BookingModel.objects.count(), 2)

    def test_other_integrity_errors_are_not_reported_as_conflicts(self) -> None:
        broken = self._booking(day=date(2030, 6, 21))
        broken.advance_amount = Money(Decimal("90000"))

        with self.assertRaises(IntegrityError):
            self.repo.add(broken)

        self.assertFalse(BookingModel.objects.exists())

    def test_status_write_is_compare_and_set(self) -> None:
        booking = self._booking(status=BookingStatus.PENDING)
        self.repo.add(booking)
        BookingModel.objects.filter(pk=booking.id).update(status="confirmed")

        booking.change_status(BookingStatus.CANCELLED)
        with self.assertRaises(ConcurrentUpdateError):
            self.repo.save(booking, expected_status=BookingStatus.PENDING)

        self.assertEqual(BookingModel.objects.get(pk=booking.id).status, "confirmed")
