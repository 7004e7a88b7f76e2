"""Report repository - Read-only queries feeding reports and dashboard stats"""

from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session, joinedload

from ...models import Booking
from ...models_invoice import Invoice


class ReportRepository:
    """Repository for reporting queries"""

    @staticmethod
    def get_bookings_in_service_range(db: Session, start: date, end: date) -> list[Booking]:
        """Real bookings with start <= scheduled_date < end + 1 day"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.service), joinedload(Booking.user))
            .filter(
                Booking.scheduled_date >= start,
                Booking.scheduled_date < end + timedelta(days=1),
                Booking.is_placeholder.is_(False),
            )
            .order_by(Booking.scheduled_date.desc())
            .all()
        )

    @staticmethod
    def get_invoices_in_service_range(db: Session, start: date, end: date) -> list[Invoice]:
        """Invoices whose booking's service date falls in the range"""
        return (
            db.query(Invoice)
            .join(Booking, Invoice.booking_id == Booking.id)
            .options(joinedload(Invoice.booking).joinedload(Booking.service))
            .filter(
                Booking.scheduled_date >= start,
                Booking.scheduled_date < end + timedelta(days=1),
            )
            .order_by(Booking.scheduled_date.desc())
            .all()
        )

    @staticmethod
    def get_bookings_created_since(db: Session, since: datetime) -> list[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.service))
            .filter(Booking.created_at >= since, Booking.is_placeholder.is_(False))
            .all()
        )
