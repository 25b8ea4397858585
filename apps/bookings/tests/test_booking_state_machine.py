"""Unit tests for the Booking aggregate and price derivation."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bookings.domain.entities import (
    DEFAULT_CANCELLATION_MESSAGE,
    Booking,
    BookingStatus,
    CustomerInfo,
    EventDetails,
    InvalidTransition,
)
from apps.bookings.domain.events import BookingCreated, BookingSlotLost, BookingStatusChanged
from apps.bookings.domain.pricing import derive_discount, price_booking
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import Money


def make_booking(status=BookingStatus.PENDING) -> Booking:
    return Booking.create(
        hall_id=uuid4(),
        hall_name="Tisha Grand Hall",
        date=date(2030, 2, 14),
        customer=CustomerInfo(name="Asha Rao", phone="+91 90000 00001", user_id=7),
        details=EventDetails(guest_count=120),
        total_amount=Money(Decimal("70000")),
        advance_amount=Money(Decimal("10000")),
        discount=Money(Decimal("5000")),
        status=status,
    )


def test_create_emits_booking_created():
    booking = make_booking()

    assert [type(event) for event in booking.events] == [BookingCreated]
    assert booking.events[0].status == "pending"


def test_create_refuses_terminal_status():
    with pytest.raises(ValidationError):
        make_booking(status=BookingStatus.CANCELLED)


@pytest.mark.parametrize(
    "start, target",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.PENDING, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
    ],
)
def test_allowed_transitions(start, target):
    booking = make_booking(start)
    booking.clear_events()

    assert booking.change_status(target) is True
    assert booking.status == target
    event = booking.events[0]
    assert isinstance(event, BookingStatusChanged)
    assert (event.old_status, event.new_status) == (start.value, target.value)


@pytest.mark.parametrize(
    "start, target",
    [
        (BookingStatus.PENDING, BookingStatus.COMPLETED),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.CANCELLED, BookingStatus.PENDING),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING),
    ],
)
def test_forbidden_transitions(start, target):
    booking = make_booking()
    booking.status = start
    booking.clear_events()

    with pytest.raises(InvalidTransition) as excinfo:
        booking.change_status(target)

    assert "status" in excinfo.value.errors
    assert booking.status == start
    assert booking.events == []


def test_same_status_is_a_noop():
    booking = make_booking(BookingStatus.CONFIRMED)
    booking.clear_events()

    assert booking.change_status(BookingStatus.CONFIRMED) is False
    assert booking.events == []


@pytest.mark.parametrize(
    "today, allowed",
    [
        (date(2030, 2, 13), False),
        (date(2030, 2, 14), False),
        (date(2030, 2, 15), True),
    ],
)
def test_completion_waits_for_the_event_date_to_pass(today, allowed):
    booking = make_booking(BookingStatus.CONFIRMED)
    booking.clear_events()

    if allowed:
        assert booking.change_status(BookingStatus.COMPLETED, today=today) is True
        assert booking.status == BookingStatus.COMPLETED
    else:
        with pytest.raises(ValidationError) as excinfo:
            booking.change_status(BookingStatus.COMPLETED, today=today)
        assert "status" in excinfo.value.errors
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.events == []


def test_cancellation_stamps_time_and_reason():
    booking = make_booking(BookingStatus.CONFIRMED)
    now = datetime(2030, 1, 5, 12, 0, tzinfo=timezone.utc)

    booking.change_status(BookingStatus.CANCELLED, reason="Double-booked stage", now=now)

    assert booking.cancelled_at == now
    assert booking.cancellation_reason == "Double-booked stage"
    assert booking.customer_cancellation_reason == "Double-booked stage"


def test_cancellation_without_reason_shows_default_message():
    booking = make_booking()

    booking.change_status(BookingStatus.CANCELLED)

    assert booking.cancellation_reason == ""
    assert booking.customer_cancellation_reason == DEFAULT_CANCELLATION_MESSAGE
    assert not booking.is_active


def test_yield_slot_replaces_creation_notice():
    booking = make_booking(BookingStatus.CONFIRMED)

    booking.yield_slot()

    assert booking.status == BookingStatus.CANCELLED
    assert [type(event) for event in booking.events] == [BookingSlotLost]


@pytest.mark.parametrize(
    "base, total, expected",
    [
        (Decimal("75000"), Decimal("70000"), Decimal("5000")),
        (Decimal("75000"), Decimal("75000"), Decimal("0")),
        (Decimal("75000"), Decimal("90000"), Decimal("0")),
        (Decimal("75000"), Decimal("1"), Decimal("74999")),
        (Decimal("0"), Decimal("5000"), Decimal("0")),
    ],
)
def test_discount_is_derived_from_base_price(base, total, expected):
    assert derive_discount(base, total) == expected


def test_price_booking_clamps_total_to_base_price():
    assert price_booking(Decimal("75000"), Decimal("80000")) == (Decimal("75000"), Decimal("0"))
    assert price_booking(Decimal("0"), Decimal("80000")) == (Decimal("80000"), Decimal("0"))
