"""
Report aggregation - read-only folds over booking and invoice rows.

Rows arrive as plain dicts and are validated one by one; a row that fails
validation is logged and skipped so a single bad record cannot sink a report.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)


class ReportBookingRow(BaseModel):
    id: int
    service_name: str
    scheduled_date: date
    scheduled_time: str
    status: str
    total_price: float
    square_meters: float
    address: str
    special_instructions: Optional[str] = None
    customer_name: str
    created_at: Optional[datetime] = None


class ReportInvoiceRow(BaseModel):
    id: int
    invoice_number: str
    service_name: str
    service_date: date
    subtotal: float
    tax_amount: float
    total_amount: float
    status: str
    created_at: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    customer_name: str


def parse_rows(raw_rows: Iterable[dict], model: type[RowT]) -> list[RowT]:
    rows = []
    for raw in raw_rows:
        try:
            rows.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(
                f"⚠️ Skipping unparseable {model.__name__} (id={raw.get('id')}): "
                f"{e.error_count()} error(s)"
            )
    return rows


def matches_client(customer_name: Optional[str], client_filter: Optional[str]) -> bool:
    """Case-insensitive substring match; an empty filter matches everything"""
    if not client_filter:
        return True
    return client_filter.strip().lower() in (customer_name or "").lower()


def _money(value: float) -> float:
    return round(value, 2)


def build_analytics(
    bookings: list[ReportBookingRow], invoices: list[ReportInvoiceRow]
) -> dict:
    """Totals, collection rate, and per-service and per-client breakdowns"""
    total_revenue = sum(b.total_price for b in bookings if b.status == "completed")

    total_invoiced = sum(i.total_amount for i in invoices)
    paid = [i for i in invoices if i.status == "paid"]
    total_paid = sum(i.total_amount for i in paid)
    total_pending = sum(i.total_amount for i in invoices if i.status == "pending")
    total_overdue = sum(i.total_amount for i in invoices if i.status == "overdue")
    total_tax = sum(i.tax_amount for i in paid)

    service_stats = defaultdict(lambda: {"count": 0, "revenue": 0.0})
    client_stats = defaultdict(lambda: {"bookings": 0, "revenue": 0.0, "last_service": None})

    for b in bookings:
        revenue = 0.0 if b.status == "cancelled" else b.total_price

        service = service_stats[b.service_name]
        service["count"] += 1
        service["revenue"] = _money(service["revenue"] + revenue)

        client = client_stats[b.customer_name]
        client["bookings"] += 1
        client["revenue"] = _money(client["revenue"] + revenue)
        if client["last_service"] is None or b.scheduled_date > client["last_service"]:
            client["last_service"] = b.scheduled_date

    return {
        "total_bookings": len(bookings),
        "total_invoices": len(invoices),
        "total_revenue": _money(total_revenue),
        "total_invoiced": _money(total_invoiced),
        "total_paid": _money(total_paid),
        "total_pending": _money(total_pending),
        "total_overdue": _money(total_overdue),
        "total_tax": _money(total_tax),
        "average_invoice": _money(total_paid / len(paid)) if paid else 0.0,
        "collection_rate": round(total_paid / total_invoiced, 4) if total_invoiced > 0 else 0.0,
        "service_stats": dict(service_stats),
        "client_stats": dict(client_stats),
    }


def build_booking_stats(
    rows: list[dict], period: str, monthly_rows: Optional[list[dict]] = None
) -> dict:
    """
    Dashboard counts over bookings created in the period window. Revenue by
    month is folded from monthly_rows when given.
    """
    by_status = defaultdict(int)
    by_service = defaultdict(int)
    completed_values = []

    for row in rows:
        by_status[row["status"]] += 1
        by_service[row["service_name"]] += 1
        if row["status"] == "completed":
            completed_values.append(row["total_price"])

    total_revenue = sum(completed_values)
    data = {
        "total_bookings": len(rows),
        "completed_bookings": by_status.get("completed", 0),
        "cancelled_bookings": by_status.get("cancelled", 0),
        "pending_bookings": by_status.get("pending", 0),
        "total_revenue": _money(total_revenue),
        "avg_booking_value": _money(total_revenue / len(completed_values)) if completed_values else 0.0,
        "bookings_by_status": dict(by_status),
        "bookings_by_service": dict(by_service),
    }
    if monthly_rows is not None:
        revenue_by_month = defaultdict(float)
        for row in monthly_rows:
            if row["status"] == "completed" and row.get("created_at"):
                revenue_by_month[row["created_at"].strftime("%Y-%m")] += row["total_price"]
        data["revenue_by_month"] = [
            {"month": month, "revenue": _money(revenue)}
            for month, revenue in sorted(revenue_by_month.items())
        ]
    return {"period": period, "data": data}
