"""Booking domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import BOOKING_STATUSES
from ...shared.validators import parse_iso_date, validate_email, validate_us_phone
from ...utils.sanitization import validate_and_sanitize_input
from ..scheduling.time_calculator import parse_scheduled_time


def _positive(value, field: str):
    if value is not None and value <= 0:
        raise ValueError(f"{field} must be greater than 0")
    return value


class BookingCreate(BaseModel):
    """Schema for an authenticated customer's booking"""

    service_id: int
    scheduled_date: dt.date
    scheduled_time: dt.time
    address: str
    square_meters: float
    special_instructions: Optional[str] = None

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_scheduled_time(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Address is required")
        return v

    @field_validator("square_meters")
    @classmethod
    def validate_square_meters(cls, v):
        return _positive(v, "Square meters")

    @field_validator("special_instructions")
    @classmethod
    def validate_instructions(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class GuestBookingCreate(BookingCreate):
    """Booking made without an account; contact and billing details are mandatory"""

    guest_name: str
    guest_email: str
    guest_phone: str
    billing_address: str
    billing_city: str
    billing_state: str
    billing_zip_code: str
    billing_country: Optional[str] = None

    @field_validator("guest_name", "billing_address", "billing_city", "billing_state", "billing_zip_code")
    @classmethod
    def validate_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("guest_email")
    @classmethod
    def validate_guest_email(cls, v):
        return validate_email(v)

    @field_validator("guest_phone")
    @classmethod
    def validate_guest_phone(cls, v):
        return validate_us_phone(v)


class BookingStatusUpdate(BaseModel):
    """Customer status change request"""

    status: str


class AdminBookingUpdate(BaseModel):
    """Sparse staff update; omitted or null fields are left untouched"""

    scheduled_date: Optional[dt.date] = None
    scheduled_time: Optional[dt.time] = None
    address: Optional[str] = None
    square_meters: Optional[float] = None
    special_instructions: Optional[str] = None
    total_price: Optional[float] = None
    status: Optional[str] = None

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def validate_date(cls, v):
        if v is None:
            return v
        return parse_iso_date(v)

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def validate_time(cls, v):
        if v is None:
            return v
        return parse_scheduled_time(v)

    @field_validator("square_meters")
    @classmethod
    def validate_square_meters(cls, v):
        return _positive(v, "Square meters")

    @field_validator("total_price")
    @classmethod
    def validate_total_price(cls, v):
        return _positive(v, "Total price")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in BOOKING_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(BOOKING_STATUSES)}")
        return v

    @field_validator("special_instructions")
    @classmethod
    def validate_instructions(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    user_id: Optional[int] = None
    service_id: Optional[int] = None
    service_name: str
    customer_name: str
    scheduled_date: dt.date
    scheduled_time: str  # HH:MM
    address: str
    square_meters: float
    special_instructions: Optional[str] = None
    total_price: float
    status: str
    reschedule_reason: Optional[str] = None
    invoice_id: Optional[int] = None
    is_guest_booking: bool = False
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip_code: Optional[str] = None
    billing_country: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
