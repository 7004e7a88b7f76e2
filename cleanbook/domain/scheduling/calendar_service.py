"""Calendar service - Staff calendar views over bookings"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from ...exceptions import InvalidRequestError
from ...models import Booking
from .repository import SchedulingRepository
from .schemas import CalendarEvent, DaySchedule, DayScheduleStats
from .time_calculator import booking_window

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "pending": "#FFA500",  # orange
    "confirmed": "#4CAF50",  # green
    "in_progress": "#2196F3",  # blue
    "completed": "#8BC34A",  # light green
    "cancelled": "#F44336",  # red
}
DEFAULT_COLOR = "#9E9E9E"


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


def to_calendar_event(booking: Booking) -> CalendarEvent:
    start, end = booking_window(booking.scheduled_date, booking.scheduled_time, booking.service_name)
    return CalendarEvent(
        id=booking.id,
        title=f"{booking.service_name} - {booking.customer_name}",
        start=start,
        end=end,
        color=status_color(booking.status),
        status=booking.status,
        service_name=booking.service_name,
        customer_name=booking.customer_name,
        customer_email=booking.customer_email,
        customer_phone=booking.customer_phone,
        address=booking.address,
        square_meters=booking.square_meters,
        total_price=booking.total_price,
        is_guest_booking=bool(booking.is_guest_booking),
    )


class CalendarService:
    """Service layer for calendar views"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()

    def get_calendar_events(self, start: date, end: date) -> list[CalendarEvent]:
        if start > end:
            raise InvalidRequestError("start_date must be on or before end_date")
        bookings = self.repo.get_bookings_between(self.db, start, end)
        return [to_calendar_event(b) for b in bookings]

    def get_day_schedule(self, day: date) -> DaySchedule:
        events = self.get_calendar_events(day, day)

        total_revenue = sum(e.total_price for e in events if e.status != "cancelled")
        total_hours = sum((e.end - e.start).total_seconds() / 3600 for e in events)
        avg_duration = total_hours / len(events) if events else 0.0

        return DaySchedule(
            date=day,
            bookings=events,
            stats=DayScheduleStats(
                total_bookings=len(events),
                revenue=round(total_revenue, 2),
                avg_duration=round(avg_duration, 2),
            ),
        )
