"""
Hall Repository

Read access to halls and atomic per-date status writes. Every write
touches a single ``HallDate`` row with a conditional UPDATE (or an INSERT
guarded by the (hall, date) unique constraint), so synchronizations of
different dates on the same hall never overwrite each other.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional
from uuid import UUID
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from shared.domain.exceptions import NotFoundError

from .models import Hall, HallDate

logger = logging.getLogger(__name__)

AVAILABLE = HallDate.Status.AVAILABLE.value
BOOKED = HallDate.Status.BOOKED.value
BLOCKED = HallDate.Status.BLOCKED.value


@dataclass(frozen=True)
class HallSnapshot:
    """The hall attributes the booking engine reads."""
    id: UUID
    name: str
    base_price: Decimal
    capacity: int
    is_active: bool = True
    owner_id: Optional[int] = None
    currency: str = 'INR'


class HallRepository(ABC):
    """Abstract hall store"""

    @abstractmethod
    def get(self, hall_id: UUID, *, lock: bool = False) -> HallSnapshot:
        """Return the hall or raise NotFoundError; ``lock`` holds its row until commit."""

    @abstractmethod
    def date_status(self, hall_id: UUID, day: date) -> Optional[str]:
        """available / booked / blocked, or None when the date is not on the calendar."""

    @abstractmethod
    def dates(self, hall_id: UUID, start: date, end: date) -> Dict[date, str]:
        """Statuses of every known date in ``[start, end]``."""

    @abstractmethod
    def claim_date(self, hall_id: UUID, day: date) -> None:
        """Put the date in the booked set."""

    @abstractmethod
    def release_date(self, hall_id: UUID, day: date) -> bool:
        """Move a booked date back to available. Returns False when it was not booked."""

    @abstractmethod
    def block_date(self, hall_id: UUID, day: date) -> bool:
        """Move the date to blocked. Returns False when the date is booked."""

    @abstractmethod
    def unblock_date(self, hall_id: UUID, day: date) -> bool:
        """Move a blocked date to available. Returns False when it was not blocked."""

    @abstractmethod
    def open_dates(self, hall_id: UUID, days: Iterable[date]) -> int:
        """Add unknown dates to the available set and return how many were added."""


class DjangoHallRepository(HallRepository):
    """Hall store backed by the Django ORM"""

    def get(self, hall_id: UUID, *, lock: bool = False) -> HallSnapshot:
        qs = Hall.objects.all()
        if lock:
            qs = qs.select_for_update()
        try:
            hall = qs.get(pk=hall_id)
        except (Hall.DoesNotExist, DjangoValidationError, ValueError, TypeError):
            raise NotFoundError('Hall not found.')
        return HallSnapshot(
            id=hall.id,
            name=hall.name,
            base_price=hall.base_price,
            capacity=hall.capacity,
            is_active=hall.is_active,
            owner_id=hall.owner_id,
            currency=hall.currency,
        )

    def date_status(self, hall_id: UUID, day: date) -> Optional[str]:
        return (
            HallDate.objects.filter(hall_id=hall_id, date=day)
            .values_list('status', flat=True)
            .first()
        )

    def dates(self, hall_id: UUID, start: date, end: date) -> Dict[date, str]:
        rows = HallDate.objects.filter(hall_id=hall_id, date__gte=start, date__lte=end)
        return dict(rows.values_list('date', 'status'))

    def _insert(self, hall_id: UUID, day: date, status: str) -> bool:
        """Create the row unless another writer got there first."""
        try:
            with transaction.atomic():
                HallDate.objects.create(hall_id=hall_id, date=day, status=status)
            return True
        except IntegrityError:
            return False

    def claim_date(self, hall_id: UUID, day: date) -> None:
        rows = HallDate.objects.filter(hall_id=hall_id, date=day)
        if rows.update(status=BOOKED):
            return
        if not self._insert(hall_id, day, BOOKED):
            rows.update(status=BOOKED)

    def release_date(self, hall_id: UUID, day: date) -> bool:
        rows = HallDate.objects.filter(hall_id=hall_id, date=day)
        if rows.filter(status=BOOKED).update(status=AVAILABLE):
            return True
        if not rows.exists():
            # Claimed before the calendar knew the date; make it bookable again.
            self._insert(hall_id, day, AVAILABLE)
        return False

    def block_date(self, hall_id: UUID, day: date) -> bool:
        rows = HallDate.objects.filter(hall_id=hall_id, date=day)
        if rows.exclude(status=BOOKED).update(status=BLOCKED):
            return True
        if self._insert(hall_id, day, BLOCKED):
            return True
        return rows.filter(status=BLOCKED).exists()

    def unblock_date(self, hall_id: UUID, day: date) -> bool:
        rows = HallDate.objects.filter(hall_id=hall_id, date=day, status=BLOCKED)
        return bool(rows.update(status=AVAILABLE))

    def open_dates(self, hall_id: UUID, days: Iterable[date]) -> int:
        wanted = set(days)
        if not wanted:
            return 0
        known = set(
            HallDate.objects.filter(hall_id=hall_id, date__in=wanted).values_list('date', flat=True)
        )
        missing = sorted(wanted - known)
        HallDate.objects.bulk_create(
            [HallDate(hall_id=hall_id, date=day, status=AVAILABLE) for day in missing],
            ignore_conflicts=True,
        )
        logger.info(f"Opened {len(missing)} dates for hall {hall_id}")
        return len(missing)
