"""Scheduling domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_iso_date
from ...utils.sanitization import validate_and_sanitize_input
from .time_calculator import parse_scheduled_time


class AvailableSlotResponse(BaseModel):
    time: str  # HH:MM
    available: bool
    duration_minutes: int
    service_type: Optional[str] = None


class AvailableSlotsResponse(BaseModel):
    date: dt.date
    available_slots: list[AvailableSlotResponse]


class CalendarEvent(BaseModel):
    """Booking formatted for calendar display"""

    id: int
    title: str
    start: dt.datetime
    end: dt.datetime
    color: str
    status: str
    service_name: str
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    address: str
    square_meters: float
    total_price: float
    is_guest_booking: bool


class CalendarEventsResponse(BaseModel):
    start_date: dt.date
    end_date: dt.date
    events: list[CalendarEvent]


class DayScheduleStats(BaseModel):
    total_bookings: int
    revenue: float
    avg_duration: float  # hours


class DaySchedule(BaseModel):
    date: dt.date
    bookings: list[CalendarEvent]
    stats: DayScheduleStats


class RescheduleRequest(BaseModel):
    """Staff reschedule of a booking"""

    new_date: dt.date
    new_time: dt.time
    reason: Optional[str] = None

    @field_validator("new_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator("new_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_scheduled_time(v)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=1000)
        return v
