"""In-memory stand-ins for the booking engine's ports."""

from __future__ import annotations

import copy
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from apps.bookings.domain.entities import ACTIVE_STATUSES, Booking, BookingStatus
from apps.bookings.repositories import BookingRepository
from apps.halls.repositories import AVAILABLE, BLOCKED, BOOKED, HallRepository, HallSnapshot
from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import ConcurrentUpdateError, DateUnavailable, NotFoundError


def _stored(booking: Booking) -> Booking:
    snapshot = copy.deepcopy(booking)
    snapshot.clear_events()
    return snapshot


class InMemoryBookingRepository(BookingRepository):
    """Dict-backed booking store; ``enforce_unique`` mimics the partial unique index."""

    def __init__(self, enforce_unique: bool = True):
        self.rows: Dict[UUID, Booking] = {}
        self.enforce_unique = enforce_unique

    def put(self, booking: Booking) -> Booking:
        """Seed a booking without any checks."""
        self.rows[booking.id] = _stored(booking)
        return booking

    def add(self, booking: Booking) -> None:
        if self.enforce_unique and booking.is_active and self.find_active(booking.hall_id, booking.date):
            raise DateUnavailable()
        self.rows[booking.id] = _stored(booking)

    def get(self, booking_id: UUID, *, lock: bool = False) -> Booking:
        try:
            return copy.deepcopy(self.rows[booking_id])
        except KeyError:
            raise NotFoundError('Booking not found.')

    def save(self, booking: Booking, *, expected_status: BookingStatus) -> None:
        current = self.rows.get(booking.id)
        if current is None:
            raise NotFoundError('Booking not found.')
        if current.status != BookingStatus(expected_status):
            raise ConcurrentUpdateError()
        self.rows[booking.id] = _stored(booking)

    def find_active(self, hall_id: UUID, day: date, *, exclude_id: Optional[UUID] = None) -> List[Booking]:
        return [
            copy.deepcopy(row)
            for row in self.rows.values()
            if row.hall_id == hall_id
            and row.date == day
            and row.status in ACTIVE_STATUSES
            and row.id != exclude_id
        ]

    def stale_pending(self, cutoff: datetime) -> List[Booking]:
        rows = [
            row for row in self.rows.values()
            if row.status == BookingStatus.PENDING and row.created_at < cutoff
        ]
        return [copy.deepcopy(row) for row in sorted(rows, key=lambda row: row.created_at)]

    def confirmed_on(self, day: date) -> List[Booking]:
        return [
            copy.deepcopy(row)
            for row in self.rows.values()
            if row.status == BookingStatus.CONFIRMED and row.date == day
        ]


class InMemoryHallRepository(HallRepository):
    def __init__(self):
        self.halls: Dict[UUID, HallSnapshot] = {}
        self.statuses: Dict[tuple, str] = {}

    def add_hall(self, hall: HallSnapshot, open_days: Iterable[date] = ()) -> HallSnapshot:
        self.halls[hall.id] = hall
        self.open_dates(hall.id, open_days)
        return hall

    def get(self, hall_id: UUID, *, lock: bool = False) -> HallSnapshot:
        try:
            return self.halls[hall_id]
        except KeyError:
            raise NotFoundError('Hall not found.')

    def date_status(self, hall_id: UUID, day: date) -> Optional[str]:
        return self.statuses.get((hall_id, day))

    def dates(self, hall_id: UUID, start: date, end: date) -> Dict[date, str]:
        return {
            day: status
            for (hid, day), status in self.statuses.items()
            if hid == hall_id and start <= day <= end
        }

    def claim_date(self, hall_id: UUID, day: date) -> None:
        self.statuses[(hall_id, day)] = BOOKED

    def release_date(self, hall_id: UUID, day: date) -> bool:
        key = (hall_id, day)
        current = self.statuses.get(key)
        if current == BOOKED or current is None:
            self.statuses[key] = AVAILABLE
        return current == BOOKED

    def block_date(self, hall_id: UUID, day: date) -> bool:
        key = (hall_id, day)
        if self.statuses.get(key) == BOOKED:
            return False
        self.statuses[key] = BLOCKED
        return True

    def unblock_date(self, hall_id: UUID, day: date) -> bool:
        key = (hall_id, day)
        if self.statuses.get(key) != BLOCKED:
            return False
        self.statuses[key] = AVAILABLE
        return True

    def open_dates(self, hall_id: UUID, days: Iterable[date]) -> int:
        opened = 0
        for day in days:
            if (hall_id, day) not in self.statuses:
                self.statuses[(hall_id, day)] = AVAILABLE
                opened += 1
        return opened


class FakeUnitOfWork(AbstractUnitOfWork):
    """Publishes collected events straight to the bus on commit."""

    def __init__(self, bus):
        self.bus = bus
        self.events = []
        self.committed = False

    def commit(self):
        events, self.events = self.events, []
        self.committed = True
        self.bus.publish_events(events)

    def rollback(self):
        self.events = []

    def collect_events(self, aggregate):
        self.events.extend(aggregate.events)
        aggregate.clear_events()


class RecordingNotifier:
    def __init__(self):
        self.sent: List[tuple] = []

    def notify(self, user_id, title, body, type='booking'):
        self.sent.append((user_id, title, body, type))
        return len(self.sent)

    def titles_for(self, user_id) -> List[str]:
        return [title for uid, title, _, _ in self.sent if uid == user_id]
