"""
Slot availability - business-hours slots and booking conflict checks.

The pure functions work on busy intervals so they can be exercised without a
database; AvailabilityService feeds them from stored bookings.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...config import BUSINESS_END_HOUR, BUSINESS_START_HOUR, SLOT_MINUTES
from ...exceptions import ConflictError, InvalidRequestError, NotFoundError
from ...models import Booking
from ..catalog.repository import CatalogRepository
from .repository import SchedulingRepository
from .time_calculator import booking_window, format_time, intervals_overlap, service_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BusyInterval:
    booking_id: int
    start: datetime
    end: datetime
    status: str


@dataclass(frozen=True)
class Slot:
    time: str
    available: bool
    duration_minutes: int
    service_type: Optional[str] = None


def busy_interval_for(booking: Booking) -> BusyInterval:
    start, end = booking_window(booking.scheduled_date, booking.scheduled_time, booking.service_name)
    return BusyInterval(booking_id=booking.id, start=start, end=end, status=booking.status)


def slot_starts(day: date) -> list[datetime]:
    """Slot start times from business open up to (not including) close"""
    starts = []
    current = datetime.combine(day, time(BUSINESS_START_HOUR, 0))
    close = datetime.combine(day, time(BUSINESS_END_HOUR, 0))
    step = timedelta(minutes=SLOT_MINUTES)
    while current < close:
        starts.append(current)
        current += step
    return starts


def compute_available_slots(
    day: date, busy: list[BusyInterval], service_type: Optional[str] = None
) -> list[Slot]:
    """A slot is unavailable when any busy interval overlaps it"""
    step = timedelta(minutes=SLOT_MINUTES)
    slots = []
    for start in slot_starts(day):
        end = start + step
        taken = any(intervals_overlap(start, end, b.start, b.end) for b in busy)
        slots.append(
            Slot(
                time=format_time(start.time()),
                available=not taken,
                duration_minutes=SLOT_MINUTES,
                service_type=service_type,
            )
        )
    return slots


def find_conflicts(start: datetime, end: datetime, busy: list[BusyInterval]) -> list[BusyInterval]:
    return [b for b in busy if intervals_overlap(start, end, b.start, b.end)]


def is_within_business_hours(start: time) -> bool:
    return time(BUSINESS_START_HOUR, 0) <= start < time(BUSINESS_END_HOUR, 0)


class AvailabilityService:
    """Service layer for slot availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()

    def get_busy_intervals(
        self, day: date, exclude_booking_id: Optional[int] = None
    ) -> list[BusyInterval]:
        bookings = self.repo.get_blocking_bookings(self.db, day, exclude_booking_id)
        return [busy_interval_for(b) for b in bookings]

    def get_available_slots(self, day: date, service_id: Optional[int] = None) -> list[Slot]:
        """Slots for a day, echoing the requested service's type"""
        service_type = None
        if service_id is not None:
            service = CatalogRepository.get_service_by_id(self.db, service_id)
            if not service:
                raise NotFoundError("Service not found")
            service_type = service.service_type

        slots = compute_available_slots(day, self.get_busy_intervals(day), service_type)
        logger.info(
            f"📅 {sum(1 for s in slots if s.available)}/{len(slots)} slots available on {day}"
        )
        return slots

    def ensure_window_free(
        self,
        day: date,
        start: time,
        service_name: str,
        exclude_booking_id: Optional[int] = None,
    ) -> None:
        """
        Reject a booking window that starts outside business hours or
        overlaps an existing non-cancelled booking.

        Raises:
            InvalidRequestError: Start time outside business hours
            ConflictError: Window overlaps another booking
        """
        if not is_within_business_hours(start):
            raise InvalidRequestError(
                f"Start time must be between {BUSINESS_START_HOUR:02d}:00 and {BUSINESS_END_HOUR:02d}:00"
            )

        window_start = datetime.combine(day, start)
        window_end = window_start + service_duration(service_name)
        conflicts = find_conflicts(
            window_start, window_end, self.get_busy_intervals(day, exclude_booking_id)
        )
        if conflicts:
            logger.warning(
                f"⚠️ Time conflict on {day} at {format_time(start)} with booking(s) "
                f"{[c.booking_id for c in conflicts]}"
            )
            raise ConflictError(f"Time slot {format_time(start)} on {day} is not available")
