"""Tests for the availability synchronizer and the hall date store."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from django.test import TestCase

from apps.halls.availability import (
    CLAIM,
    NOOP,
    RELEASE,
    AvailabilitySynchronizer,
    month_calendar,
    sync_action,
)
from apps.halls.models import Hall, HallDate
from apps.halls.repositories import AVAILABLE, BLOCKED, BOOKED, DjangoHallRepository
from shared.domain.exceptions import NotFoundError


@pytest.mark.parametrize(
    "old, new, expected",
    [
        (None, "confirmed", CLAIM),
        ("pending", "confirmed", CLAIM),
        ("confirmed", "cancelled", RELEASE),
        ("pending", "cancelled", NOOP),
        (None, "pending", NOOP),
        ("confirmed", "completed", NOOP),
        ("confirmed", "confirmed", NOOP),
    ],
)
def test_sync_action(old, new, expected):
    assert sync_action(old, new) == expected


def test_month_calendar_marks_past_and_today():
    statuses = {date(2030, 2, 10): AVAILABLE}

    days = month_calendar(statuses, 2030, 2, today=date(2030, 2, 10))

    assert days[8] == {"date": "2030-02-09", "status": "unknown", "isPast": True, "isToday": False}
    assert days[9] == {"date": "2030-02-10", "status": "available", "isPast": False, "isToday": True}


class HallRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.hall = Hall.objects.create(name="Tisha Grand Hall", base_price=Decimal("75000"))
        self.repo = DjangoHallRepository()
        self.sync = AvailabilitySynchronizer(self.repo)
        self.day = date(2030, 5, 4)

    def status(self, day=None):
        return self.repo.date_status(self.hall.id, day or self.day)

    def test_get_unknown_or_malformed_id_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.repo.get("not-a-uuid")
        with self.assertRaises(NotFoundError):
            self.repo.get("3f1c6a9e-0000-4000-8000-000000000000")

    def test_claim_then_release_round_trip(self) -> None:
        self.repo.open_dates(self.hall.id, [self.day])

        self.assertEqual(self.sync.sync(self.hall.id, self.day, "pending", "confirmed"), CLAIM)
        self.assertEqual(self.status(), BOOKED)
        self.assertEqual(self.sync.sync(self.hall.id, self.day, "confirmed", "cancelled"), RELEASE)
        self.assertEqual(self.status(), AVAILABLE)

    def test_replayed_claim_leaves_one_row(self) -> None:
        self.sync.sync(self.hall.id, self.day, None, "confirmed")
        self.sync.sync(self.hall.id, self.day, None, "confirmed")

        self.assertEqual(HallDate.objects.filter(hall=self.hall, date=self.day).count(), 1)
        self.assertEqual(self.status(), BOOKED)

    def test_pending_cancellation_does_not_touch_the_calendar(self) -> None:
        self.repo.open_dates(self.hall.id, [self.day])

        self.sync.sync(self.hall.id, self.day, "pending", "cancelled")

        self.assertEqual(self.status(), AVAILABLE)

    def test_syncing_one_date_leaves_the_others(self) -> None:
        other = date(2030, 5, 5)
        self.repo.open_dates(self.hall.id, [self.day, other])
        self.repo.block_date(self.hall.id, other)

        self.sync.sync(self.hall.id, self.day, None, "confirmed")

        self.assertEqual(self.status(other), BLOCKED)
        self.assertEqual(
            self.repo.dates(self.hall.id, date(2030, 5, 1), date(2030, 5, 31)),
            {self.day: BOOKED, other: BLOCKED},
        )

    def test_booked_date_cannot_be_blocked(self) -> None:
        self.repo.claim_date(self.hall.id, self.day)

        self.assertFalse(self.repo.block_date(self.hall.id, self.day))
        self.assertEqual(self.status(), BOOKED)

    def test_blocking_is_idempotent(self) -> None:
        self.assertTrue(self.repo.block_date(self.hall.id, self.day))
        self.assertTrue(self.repo.block_date(self.hall.id, self.day))
        self.assertEqual(self.status(), BLOCKED)

    def test_hall_date_lists(self) -> None:
        self.repo.open_dates(self.hall.id, [date(2030, 5, 1), date(2030, 5, 2), date(2030, 5, 3)])
        self.repo.claim_date(self.hall.id, date(2030, 5, 2))
        self.repo.block_date(self.hall.id, date(2030, 5, 3))

        hall = Hall.objects.get(pk=self.hall.pk)
        self.assertEqual(hall.available_dates, ["2030-05-01"])
        self.assertEqual(hall.booked_dates, ["2030-05-02"])
        self.assertEqual(hall.blocked_dates, ["2030-05-03"])
