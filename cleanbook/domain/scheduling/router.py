"""Scheduling router - slot availability and staff calendar endpoints"""

import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_admin
from ...database import get_db
from ...exceptions import InvalidRequestError
from ...shared.validators import parse_iso_date
from ..bookings.router import get_booking_service, to_booking_response
from ..bookings.schemas import BookingResponse
from ..bookings.service import BookingService
from .availability_service import AvailabilityService
from .calendar_service import CalendarService
from .schemas import (
    AvailableSlotResponse,
    AvailableSlotsResponse,
    CalendarEventsResponse,
    DaySchedule,
    RescheduleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])
admin_router = APIRouter(prefix="/admin/calendar", tags=["Admin Calendar"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    """Dependency injection for CalendarService"""
    return CalendarService(db)


def _parse_date_param(value: str, name: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid {name}. Use YYYY-MM-DD") from e


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    date_param: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD, defaults to tomorrow"),
    service_id: Optional[int] = Query(None),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Hourly slots within business hours and whether each is free"""
    day = _parse_date_param(date_param, "date") if date_param else date.today() + timedelta(days=1)
    slots = service.get_available_slots(day, service_id)
    return AvailableSlotsResponse(
        date=day,
        available_slots=[
            AvailableSlotResponse(
                time=s.time,
                available=s.available,
                duration_minutes=s.duration_minutes,
                service_type=s.service_type,
            )
            for s in slots
        ],
    )


@admin_router.get("/events", response_model=CalendarEventsResponse)
async def get_calendar_events(
    start: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to first of month"),
    end: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to end of month"),
    current_user: CurrentUser = Depends(require_admin),
    service: CalendarService = Depends(get_calendar_service),
):
    """Bookings formatted for the staff calendar"""
    if start:
        start_date = _parse_date_param(start, "start date")
    else:
        start_date = date.today().replace(day=1)

    if end:
        end_date = _parse_date_param(end, "end date")
    else:
        # Last day of the start month
        next_month = (start_date.replace(day=28) + timedelta(days=4)).replace(day=1)
        end_date = next_month - timedelta(days=1)

    events = service.get_calendar_events(start_date, end_date)
    return CalendarEventsResponse(start_date=start_date, end_date=end_date, events=events)


@admin_router.get("/day/{day}", response_model=DaySchedule)
async def get_day_schedule(
    day: str,
    current_user: CurrentUser = Depends(require_admin),
    service: CalendarService = Depends(get_calendar_service),
):
    """Detailed schedule and stats for one day"""
    return service.get_day_schedule(_parse_date_param(day, "date"))


@admin_router.put("/bookings/{booking_id}/reschedule", response_model=BookingResponse)
async def reschedule_booking(
    booking_id: int,
    data: RescheduleRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Move a booking; clashes with other bookings are rejected"""
    logger.info(f"📅 Staff {current_user.id} rescheduling booking {booking_id}")
    return to_booking_response(service.reschedule_booking(booking_id, data))