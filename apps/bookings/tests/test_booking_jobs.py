"""Tests for the scheduled expiry and reminder jobs."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import TestCase

from apps.bookings.application.maintenance import ExpireStalePendingJob
from apps.bookings.bootstrap import build_expiry_job, build_reminder_job
from apps.bookings.domain.entities import BookingStatus
from apps.bookings.models import Booking
from apps.bookings.tasks import expire_stale_pending, send_next_day_reminders
from apps.bookings.tests.fakes import (
    FakeUnitOfWork,
    InMemoryBookingRepository,
    InMemoryHallRepository,
)
from apps.bookings.repositories import to_domain
from apps.halls.availability import AvailabilitySynchronizer
from apps.halls.models import Hall, HallDate
from apps.notifications.models import Notification
from shared.application.message_bus import MessageBus

User = get_user_model()

NOW = datetime(2030, 3, 1, 6, 0, tzinfo=timezone.utc)


class JobTestCase(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.customer = User.objects.create_user(username="asha", password="GuestPass123")
        self.hall = Hall.objects.create(
            owner=self.owner,
            name="Tisha Grand Hall",
            base_price=Decimal("75000.00"),
        )

    def make_booking(self, day: date, status: str, created_at: datetime, **extra) -> Booking:
        fields = {
            "hall": self.hall,
            "hall_name": self.hall.name,
            "date": day,
            "status": status,
            "customer": self.customer,
            "customer_name": "Asha Rao",
            "customer_phone": "+91 90000 00001",
            "total_amount": Decimal("70000.00"),
            "advance_amount": Decimal("20000.00"),
            "created_at": created_at,
            "updated_at": created_at,
        }
        fields.update(extra)
        return Booking.objects.create(**fields)


class ExpireStalePendingTests(JobTestCase):
    def test_only_requests_older_than_the_window_expire(self) -> None:
        fresh = self.make_booking(date(2030, 4, 1), "pending", NOW - timedelta(hours=47, minutes=59))
        stale = self.make_booking(date(2030, 4, 2), "pending", NOW - timedelta(hours=48, minutes=1))
        HallDate.objects.create(hall=self.hall, date=date(2030, 4, 2), status=HallDate.Status.AVAILABLE)

        with self.captureOnCommitCallbacks(execute=True):
            expired = build_expiry_job().run(now=NOW)

        self.assertEqual(expired, 1)
        fresh.refresh_from_db()
        stale.refresh_from_db()
        self.assertEqual(fresh.status, "pending")
        self.assertEqual(stale.status, "cancelled")
        self.assertEqual(stale.cancellation_reason, "Booking expired — no response within 48 hours")
        self.assertEqual(stale.cancelled_at, NOW)
        self.assertEqual(
            HallDate.objects.get(hall=self.hall, date=date(2030, 4, 2)).status,
            HallDate.Status.AVAILABLE,
        )

        notice = Notification.objects.get(user=self.customer)
        self.assertEqual(notice.title, "Booking Cancelled")
        self.assertIn("Booking expired — no response within 48 hours", notice.message)

    def test_confirmed_and_cancelled_bookings_are_left_alone(self) -> None:
        old = NOW - timedelta(days=10)
        self.make_booking(date(2030, 4, 1), "confirmed", old)
        self.make_booking(date(2030, 4, 2), "cancelled", old)

        expired = build_expiry_job().run(now=NOW)

        self.assertEqual(expired, 0)
        self.assertEqual(Booking.objects.filter(status="cancelled").count(), 1)

    def test_rerun_is_a_noop(self) -> None:
        self.make_booking(date(2030, 4, 2), "pending", NOW - timedelta(days=3))

        self.assertEqual(build_expiry_job().run(now=NOW), 1)
        self.assertEqual(build_expiry_job().run(now=NOW), 0)

    def test_store_failure_reports_zero(self) -> None:
        job = build_expiry_job()
        with mock.patch.object(job.bookings, "stale_pending", side_effect=OperationalError("gone")):
            self.assertEqual(job.run(now=NOW), 0)

    def test_task_reports_count(self) -> None:
        self.make_booking(date(2030, 4, 2), "pending", datetime(2020, 1, 1, tzinfo=timezone.utc))

        self.assertEqual(expire_stale_pending.apply().get(), {"expired": 1})


class ExpiryRaceTests(TestCase):
    """A request confirmed while the sweep runs must stay confirmed."""

    def test_booking_confirmed_mid_sweep_is_skipped(self) -> None:
        owner = User.objects.create_user(username="owner")
        hall = Hall.objects.create(owner=owner, name="Tisha Grand Hall", base_price=Decimal("75000"))
        row = Booking.objects.create(
            hall=hall,
            hall_name=hall.name,
            date=date(2030, 4, 3),
            status="pending",
            customer_name="Asha Rao",
            customer_phone="1",
            total_amount=Decimal("70000"),
            created_at=NOW - timedelta(days=3),
            updated_at=NOW - timedelta(days=3),
        )

        class ConfirmingRepository(InMemoryBookingRepository):
            def stale_pending(self, cutoff):
                found = super().stale_pending(cutoff)
                for booking in self.rows.values():
                    booking.status = BookingStatus.CONFIRMED
                return found

        bookings = ConfirmingRepository()
        bookings.put(to_domain(row))
        halls = InMemoryHallRepository()
        bus = MessageBus()
        job = ExpireStalePendingJob(
            bookings,
            AvailabilitySynchronizer(halls),
            lambda: FakeUnitOfWork(bus),
        )

        self.assertEqual(job.run(now=NOW), 0)
        self.assertEqual(bookings.rows[row.id].status, BookingStatus.CONFIRMED)
        self.assertEqual(bookings.rows[row.id].cancellation_reason, "")


class NextDayReminderTests(JobTestCase):
    # 20:00 UTC on March 9th is already March 10th in India.
    EVENING_UTC = datetime(2030, 3, 9, 20, 0, tzinfo=timezone.utc)

    def test_reminds_confirmed_bookings_of_venue_tomorrow(self) -> None:
        self.make_booking(date(2030, 3, 11), "confirmed", NOW)
        self.make_booking(date(2030, 3, 10), "confirmed", NOW)
        self.make_booking(date(2030, 3, 12), "confirmed", NOW)

        sent = build_reminder_job().run(now=self.EVENING_UTC)

        self.assertEqual(sent, 1)
        notice = Notification.objects.get(user=self.customer)
        self.assertEqual(notice.type, Notification.Type.REMINDER)
        self.assertEqual(notice.title, "Reminder: Your Event is Tomorrow! 📅")
        self.assertEqual(notice.message, "Don't forget - your event at Tisha Grand Hall is tomorrow!")

    def test_skips_pending_cancelled_and_walk_in_bookings(self) -> None:
        other_hall = Hall.objects.create(owner=self.owner, name="Riverside Lawn")
        self.make_booking(date(2030, 3, 11), "pending", NOW, hall=other_hall)
        self.make_booking(date(2030, 3, 11), "cancelled", NOW)
        self.make_booking(date(2030, 3, 11), "confirmed", NOW, customer=None)

        self.assertEqual(build_reminder_job().run(now=self.EVENING_UTC), 0)
        self.assertFalse(Notification.objects.exists())

    def test_task_reports_count(self) -> None:
        self.assertEqual(send_next_day_reminders.apply().get(), {"sent": 0})
