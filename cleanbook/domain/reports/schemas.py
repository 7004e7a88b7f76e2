"""Report domain schemas"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from .aggregator import ReportBookingRow, ReportInvoiceRow


class ServiceStat(BaseModel):
    count: int
    revenue: float


class ClientStat(BaseModel):
    bookings: int
    revenue: float
    last_service: Optional[dt.date] = None


class ReportAnalytics(BaseModel):
    total_bookings: int
    total_invoices: int
    total_revenue: float
    total_invoiced: float
    total_paid: float
    total_pending: float
    total_overdue: float
    total_tax: float
    average_invoice: float
    collection_rate: float  # paid / invoiced
    service_stats: dict[str, ServiceStat]
    client_stats: dict[str, ClientStat]


class ReportFilters(BaseModel):
    start_date: dt.date
    end_date: dt.date
    client: Optional[str] = None


class ReportResponse(BaseModel):
    bookings: list[ReportBookingRow]
    invoices: list[ReportInvoiceRow]
    analytics: ReportAnalytics
    filters: ReportFilters


class MonthRevenue(BaseModel):
    month: str  # YYYY-MM
    revenue: float


class BookingStatsData(BaseModel):
    total_bookings: int
    completed_bookings: int
    cancelled_bookings: int
    pending_bookings: int
    total_revenue: float
    avg_booking_value: float
    bookings_by_status: dict[str, int]
    bookings_by_service: dict[str, int]
    revenue_by_month: Optional[list[MonthRevenue]] = None


class BookingStatsResponse(BaseModel):
    period: str
    data: BookingStatsData
