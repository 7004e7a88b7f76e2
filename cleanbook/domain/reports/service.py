"""Report service - Business reports and booking statistics"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import InvalidRequestError
from ...models import Booking
from ...models_invoice import Invoice
from ..scheduling.time_calculator import coerce_stored_time, format_time
from .aggregator import (
    ReportBookingRow,
    ReportInvoiceRow,
    build_analytics,
    build_booking_stats,
    matches_client,
    parse_rows,
)
from .repository import ReportRepository

logger = logging.getLogger(__name__)

STATS_PERIODS = {
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
    "monthly": timedelta(days=30),
    "yearly": timedelta(days=365),
}
REVENUE_HISTORY = timedelta(days=365)


def booking_row(b: Booking) -> dict:
    return {
        "id": b.id,
        "service_name": b.service_name,
        "scheduled_date": b.scheduled_date,
        "scheduled_time": format_time(coerce_stored_time(b.scheduled_time)),
        "status": b.status,
        "total_price": b.total_price,
        "square_meters": b.square_meters,
        "address": b.address,
        "special_instructions": b.special_instructions,
        "customer_name": b.customer_name,
        "created_at": b.created_at,
    }


def invoice_row(i: Invoice) -> dict:
    return {
        "id": i.id,
        "invoice_number": i.invoice_number,
        "service_name": i.service_name,
        "service_date": i.booking_date,
        "subtotal": i.subtotal,
        "tax_amount": i.tax_amount,
        "total_amount": i.total_amount,
        "status": i.status,
        "created_at": i.created_at,
        "payment_date": i.payment_date,
        "payment_method": i.payment_method,
        "customer_name": i.customer_name,
    }


class ReportService:
    """Service layer for reports"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepository()

    def get_report(self, start: date, end: date, client: Optional[str] = None) -> dict:
        """Bookings, invoices and analytics for service dates in [start, end]"""
        if start > end:
            raise InvalidRequestError("start_date must be on or before end_date")

        raw_bookings = [
            booking_row(b)
            for b in self.repo.get_bookings_in_service_range(self.db, start, end)
            if matches_client(b.customer_name, client)
        ]
        raw_invoices = [
            invoice_row(i)
            for i in self.repo.get_invoices_in_service_range(self.db, start, end)
            if matches_client(i.customer_name, client)
        ]

        bookings = parse_rows(raw_bookings, ReportBookingRow)
        invoices = parse_rows(raw_invoices, ReportInvoiceRow)
        logger.info(
            f"📊 Report {start}..{end}: {len(bookings)} booking(s), {len(invoices)} invoice(s)"
        )

        return {
            "bookings": bookings,
            "invoices": invoices,
            "analytics": build_analytics(bookings, invoices),
            "filters": {"start_date": start, "end_date": end, "client": client},
        }

    def get_booking_stats(self, period: str = "monthly", now: Optional[datetime] = None) -> dict:
        if period not in STATS_PERIODS:
            raise InvalidRequestError(
                f"Invalid period '{period}'. Must be one of: {', '.join(STATS_PERIODS)}"
            )
        now = now or datetime.utcnow()

        rows = [
            booking_row(b)
            for b in self.repo.get_bookings_created_since(self.db, now - STATS_PERIODS[period])
        ]
        monthly_rows = None
        if period in ("monthly", "yearly"):
            monthly_rows = [
                booking_row(b)
                for b in self.repo.get_bookings_created_since(self.db, now - REVENUE_HISTORY)
            ]
        return build_booking_stats(rows, period, monthly_rows)
