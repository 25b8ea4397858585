"""
Domain Exceptions

Error taxonomy shared by the booking, hall and notification domains.
Every error carries a ``message`` that is safe to show to the end user.
"""

from typing import Dict, List


class DomainError(Exception):
    """Base class for all expected, user-facing domain failures."""

    default_message = 'Request could not be processed.'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """
    Missing or invalid input.

    ``errors`` maps field names to a list of messages so API clients can
    show prompts next to the offending form field.
    """

    default_message = 'Invalid booking data.'

    def __init__(self, message: str | None = None, errors: Dict[str, List[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def for_field(cls, field_name: str, message: str) -> 'ValidationError':
        return cls(message, {field_name: [message]})


class DateUnavailable(DomainError):
    """The requested hall date is already taken or blocked."""

    default_message = 'This date is already booked.'


class NotFoundError(DomainError):
    """Operating on a booking or hall id that does not exist."""

    default_message = 'Not found.'


class ConcurrentUpdateError(DomainError):
    """The record changed between read and compare-and-set write."""

    default_message = 'This booking was changed by someone else. Please reload and try again.'


class StoreUnavailable(DomainError):
    """Transient failure talking to the database."""

    default_message = 'Service temporarily unavailable. Please try again.'


class NotificationDeliveryError(DomainError):
    """
    Push delivery failed.

    Never leaves the notification dispatcher. ``transient`` marks failures
    worth a bounded retry (timeouts, connection errors, 5xx responses).
    """

    default_message = 'Notification delivery failed.'

    def __init__(self, message: str | None = None, *, transient: bool = False):
        super().__init__(message)
        self.transient = transient
