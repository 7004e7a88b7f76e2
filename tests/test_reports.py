import logging
from datetime import date, datetime, timedelta

import pytest
from conftest import SERVICE_DAY

from cleanbook.domain.invoices.schemas import CustomInvoiceRequest, MarkPaidRequest
from cleanbook.domain.invoices.service import InvoiceService
from cleanbook.domain.reports.aggregator import (
    ReportBookingRow,
    ReportInvoiceRow,
    build_analytics,
    build_booking_stats,
    matches_client,
    parse_rows,
)
from cleanbook.domain.reports.service import ReportService
from cleanbook.exceptions import InvalidRequestError


def _booking(id, status="completed", price=107.0, service="Basic House Cleaning", client="Jane Doe", day=SERVICE_DAY):
    return ReportBookingRow(
        id=id,
        service_name=service,
        scheduled_date=day,
        scheduled_time="10:00",
        status=status,
        total_price=price,
        square_meters=50,
        address="12 Palm Way, Miami, FL 33101",
        customer_name=client,
    )


def _invoice(id, status="pending", total=107.0, tax=7.0, client="Jane Doe"):
    return ReportInvoiceRow(
        id=id,
        invoice_number=f"PP-2030-{id:05d}",
        service_name="Basic House Cleaning",
        service_date=SERVICE_DAY,
        subtotal=total - tax,
        tax_amount=tax,
        total_amount=total,
        status=status,
        customer_name=client,
    )


# ----------------------------------------------------------------------------
# Aggregation
# ----------------------------------------------------------------------------


def test_unparseable_rows_are_skipped(caplog):
    raw = [
        {"id": 1, "invoice_number": "PP-2030-00001", "service_name": "Basic", "service_date": SERVICE_DAY,
         "subtotal": 100.0, "tax_amount": 7.0, "total_amount": 107.0, "status": "paid",
         "customer_name": "Jane Doe"},
        {"id": 2, "invoice_number": "PP-2030-00002", "service_name": "Basic", "service_date": None,
         "subtotal": "lots", "tax_amount": 7.0, "total_amount": 107.0, "status": "paid",
         "customer_name": "Jane Doe"},
    ]

    with caplog.at_level(logging.WARNING):
        rows = parse_rows(raw, ReportInvoiceRow)

    assert [r.id for r in rows] == [1]
    assert "Skipping unparseable ReportInvoiceRow (id=2)" in caplog.text


def test_collection_rate_and_totals():
    invoices = [
        _invoice(1, status="paid", total=300.0, tax=19.63),
        _invoice(2, status="pending", total=100.0),
        _invoice(3, status="overdue", total=100.0),
    ]

    analytics = build_analytics([], invoices)

    assert analytics["total_invoiced"] == 500.0
    assert analytics["total_paid"] == 300.0
    assert analytics["total_pending"] == 100.0
    assert analytics["total_overdue"] == 100.0
    assert analytics["total_tax"] == 19.63
    assert analytics["average_invoice"] == 300.0
    assert analytics["collection_rate"] == 0.6


def test_collection_rate_without_invoices_is_zero():
    analytics = build_analytics([], [])

    assert analytics["collection_rate"] == 0
    assert analytics["average_invoice"] == 0
    assert analytics["total_invoices"] == 0


def test_cancelled_bookings_count_but_earn_nothing():
    bookings = [
        _booking(1, status="completed", price=100.0),
        _booking(2, status="cancelled", price=150.0),
        _booking(3, status="confirmed", price=80.0, service="Office Cleaning", client="Bob Stone"),
    ]

    analytics = build_analytics(bookings, [])

    assert analytics["total_bookings"] == 3
    assert analytics["total_revenue"] == 100.0
    assert analytics["service_stats"]["Basic House Cleaning"] == {"count": 2, "revenue": 100.0}
    assert analytics["service_stats"]["Office Cleaning"] == {"count": 1, "revenue": 80.0}
    assert analytics["client_stats"]["Jane Doe"]["bookings"] == 2
    assert analytics["client_stats"]["Jane Doe"]["revenue"] == 100.0


def test_last_service_is_latest_date_regardless_of_order():
    later = SERVICE_DAY + timedelta(days=9)
    bookings = [_booking(1, day=later), _booking(2, day=SERVICE_DAY)]

    analytics = build_analytics(bookings, [])

    assert analytics["client_stats"]["Jane Doe"]["last_service"] == later


@pytest.mark.parametrize(
    "name, needle, expected",
    [("Jane Doe", "jane", True), ("Jane Doe", " DOE ", True), ("Jane Doe", "bob", False),
     ("Jane Doe", None, True), (None, "jane", False)],
)
def test_client_filter(name, needle, expected):
    assert matches_client(name, needle) is expected


def test_booking_stats_fold():
    created = datetime(2030, 5, 14, 12, 0)
    rows = [
        {"status": "completed", "service_name": "Basic", "total_price": 100.0, "created_at": created},
        {"status": "completed", "service_name": "Office", "total_price": 50.0, "created_at": created},
        {"status": "cancelled", "service_name": "Basic", "total_price": 80.0, "created_at": created},
        {"status": "pending", "service_name": "Basic", "total_price": 70.0, "created_at": created},
    ]

    stats = build_booking_stats(rows, "monthly", monthly_rows=rows)
    data = stats["data"]

    assert stats["period"] == "monthly"
    assert data["total_bookings"] == 4
    assert (data["completed_bookings"], data["cancelled_bookings"], data["pending_bookings"]) == (2, 1, 1)
    assert data["total_revenue"] == 150.0
    assert data["avg_booking_value"] == 75.0
    assert data["bookings_by_service"] == {"Basic": 3, "Office": 1}
    assert data["revenue_by_month"] == [{"month": "2030-05", "revenue": 150.0}]


def test_daily_stats_have_no_monthly_breakdown():
    stats = build_booking_stats([], "daily")

    assert "revenue_by_month" not in stats["data"]
    assert stats["data"]["avg_booking_value"] == 0


# ----------------------------------------------------------------------------
# Report service
# ----------------------------------------------------------------------------


def test_report_range_is_end_inclusive(db_session, services, customer, make_booking):
    basic = services["Basic House Cleaning"]
    on_start = make_booking(basic, user=customer, status="completed")
    on_end = make_booking(basic, user=customer, scheduled_date=SERVICE_DAY + timedelta(days=6))
    make_booking(basic, user=customer, scheduled_date=SERVICE_DAY + timedelta(days=7))
    make_booking(basic, user=customer, scheduled_date=SERVICE_DAY - timedelta(days=1))

    report = ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY + timedelta(days=6))

    assert {b.id for b in report["bookings"]} == {on_start.id, on_end.id}
    assert report["analytics"]["total_revenue"] == 107.0


def test_report_client_filter(db_session, services, customer, other_customer, make_booking):
    basic = services["Basic House Cleaning"]
    make_booking(basic, user=customer)
    bob = make_booking(basic, user=other_customer, scheduled_date=SERVICE_DAY + timedelta(days=1))
    InvoiceService(db_session).create_invoice_from_booking(bob.id)

    report = ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY + timedelta(days=1), client="STONE")

    assert [b.id for b in report["bookings"]] == [bob.id]
    assert [i.customer_name for i in report["invoices"]] == ["Bob Stone"]
    assert list(report["analytics"]["client_stats"]) == ["Bob Stone"]
    assert report["filters"]["client"] == "STONE"


def test_report_collection_rate(db_session, services, make_booking):
    invoices = InvoiceService(db_session)
    paid = invoices.create_invoice_from_booking(make_booking(services["Basic House Cleaning"]).id)
    invoices.create_invoice_from_booking(
        make_booking(services["Office Cleaning"], total_price=321.0).id
    )
    invoices.mark_paid(paid.id, MarkPaidRequest(payment_method="cash"))

    analytics = ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY)["analytics"]

    assert analytics["total_invoiced"] == 428.0
    assert analytics["total_paid"] == 107.0
    assert analytics["collection_rate"] == 0.25


def test_custom_invoices_are_reported_without_their_placeholder(db_session):
    InvoiceService(db_session).create_custom_invoice(
        CustomInvoiceRequest(
            customer_name="Acme Corp",
            service_name="Window Washing",
            service_address="500 Brickell Ave, Miami, FL 33131",
            service_date=SERVICE_DAY.isoformat(),
            amount=214.0,
        )
    )

    report = ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY)

    assert report["bookings"] == []
    assert [i.service_name for i in report["invoices"]] == ["Window Washing"]


def test_report_rejects_inverted_range(db_session):
    with pytest.raises(InvalidRequestError):
        ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY - timedelta(days=1))


def test_booking_stats_window(db_session, services, make_booking):
    basic = services["Basic House Cleaning"]
    now = datetime.utcnow()
    make_booking(basic, status="completed", created_at=now - timedelta(hours=2))
    make_booking(basic, status="cancelled", created_at=now - timedelta(days=3))
    make_booking(basic, status="completed", total_price=200.0, created_at=now - timedelta(days=100))

    reports = ReportService(db_session)
    daily = reports.get_booking_stats("daily", now=now)["data"]
    weekly = reports.get_booking_stats("weekly", now=now)["data"]
    yearly = reports.get_booking_stats("yearly", now=now)["data"]

    assert daily["total_bookings"] == 1
    assert weekly["total_bookings"] == 2
    assert weekly["cancelled_bookings"] == 1
    assert yearly["total_revenue"] == 307.0
    assert sum(m["revenue"] for m in yearly["revenue_by_month"]) == 307.0


def test_booking_stats_rejects_unknown_period(db_session):
    with pytest.raises(InvalidRequestError):
        ReportService(db_session).get_booking_stats("hourly")


def test_service_date_range_not_issue_date(db_session, services, make_booking):
    booking = make_booking(services["Basic House Cleaning"], scheduled_date=date(2031, 1, 15))
    InvoiceService(db_session).create_invoice_from_booking(booking.id)

    assert ReportService(db_session).get_report(SERVICE_DAY, SERVICE_DAY)["invoices"] == []
    january = ReportService(db_session).get_report(date(2031, 1, 1), date(2031, 1, 31))
    assert len(january["invoices"]) == 1
