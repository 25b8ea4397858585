"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are published after the transaction that produced them commits, so
subscribers only ever see durable state.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was accepted for its slot

    Triggers:
    - "Booking Received" / "Booking Confirmed" notice to the customer
    - "New Booking Request" / "New Booking" notice to the hall owner
    """
    booking_id: UUID
    hall_id: UUID
    hall_name: str
    date: date
    status: str
    customer_name: str
    customer_user_id: Optional[int] = None


@dataclass(kw_only=True)
class BookingStatusChanged(DomainEvent):
    """
    Event: Booking moved along the state machine

    Triggers:
    - confirmed: confirmation notice to the customer
    - cancelled: cancellation notice with the reason
    - completed: thank-you / feedback prompt
    """
    booking_id: UUID
    hall_id: UUID
    hall_name: str
    date: date
    old_status: str
    new_status: str
    reason: str = ''
    customer_name: str = ''
    customer_user_id: Optional[int] = None


@dataclass(kw_only=True)
class BookingSlotLost(DomainEvent):
    """
    Event: A new booking was cancelled because another booking got the date first

    Triggers:
    - "Booking Unavailable" notice to the customer
    """
    booking_id: UUID
    hall_id: UUID
    date: date
    customer_user_id: Optional[int] = None
