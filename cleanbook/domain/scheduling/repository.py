"""Scheduling repository - Booking queries for availability and calendar views"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking

# Statuses that occupy time on the calendar
BLOCKING_STATUSES = ("pending", "confirmed", "in_progress", "completed")


class SchedulingRepository:
    """Repository for calendar and availability queries"""

    @staticmethod
    def get_blocking_bookings(
        db: Session, day: date, exclude_booking_id: Optional[int] = None
    ) -> list[Booking]:
        """Bookings that hold time on a given day (cancelled and placeholder rows excluded)"""
        query = (
            db.query(Booking)
            .options(joinedload(Booking.service))
            .filter(
                Booking.scheduled_date == day,
                Booking.status.in_(BLOCKING_STATUSES),
                Booking.is_placeholder.is_(False),
            )
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.order_by(Booking.scheduled_time).all()

    @staticmethod
    def get_bookings_between(db: Session, start: date, end: date) -> list[Booking]:
        """All real bookings scheduled in [start, end] inclusive"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.user))
            .filter(
                Booking.scheduled_date >= start,
                Booking.scheduled_date <= end,
                Booking.is_placeholder.is_(False),
            )
            .order_by(Booking.scheduled_date, Booking.scheduled_time)
            .all()
        )
