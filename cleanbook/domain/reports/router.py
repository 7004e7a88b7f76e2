"""Report router - staff reporting and dashboard statistics"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_admin
from ...database import get_db
from ...exceptions import InvalidRequestError
from ...shared.validators import parse_iso_date
from .schemas import BookingStatsResponse, ReportResponse
from .service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(db)


@router.get("/reports", response_model=ReportResponse)
async def get_report(
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD (inclusive)"),
    client: Optional[str] = Query(None, description="Customer name contains"),
    current_user: CurrentUser = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    """Bookings, invoices and analytics for a service-date range"""
    try:
        start, end = parse_iso_date(start_date), parse_iso_date(end_date)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return service.get_report(start, end, client)


@router.get("/stats", response_model=BookingStatsResponse)
async def get_booking_stats(
    period: str = Query("monthly", description="daily, weekly, monthly or yearly"),
    current_user: CurrentUser = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.get_booking_stats(period)
