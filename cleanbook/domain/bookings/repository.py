"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        """Get a booking with its service, owner and invoice loaded"""
        return (
            db.query(Booking)
            .options(
                joinedload(Booking.service),
                joinedload(Booking.user),
                joinedload(Booking.invoice),
            )
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def get_user_bookings(db: Session, user_id: int) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.invoice))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.scheduled_date.desc(), Booking.scheduled_time.desc())
            .all()
        )

    @staticmethod
    def get_all_bookings(db: Session, status: Optional[str] = None) -> list[Booking]:
        """All real bookings, newest schedule first"""
        query = (
            db.query(Booking)
            .options(
                joinedload(Booking.service),
                joinedload(Booking.user),
                joinedload(Booking.invoice),
            )
            .filter(Booking.is_placeholder.is_(False))
        )
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.scheduled_date.desc(), Booking.scheduled_time.desc()).all()

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        """Create a new booking"""
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def update_booking(db: Session, booking: Booking, **updates) -> Booking:
        """Update a booking with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(booking, key):
                setattr(booking, key, value)

        db.commit()
        db.refresh(booking)
        return booking
