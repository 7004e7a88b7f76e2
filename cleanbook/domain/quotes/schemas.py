"""Quote domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import QUOTE_STATUSES
from ...shared.validators import parse_iso_date, validate_email, validate_us_phone
from ...utils.sanitization import validate_and_sanitize_input


class QuoteCreate(BaseModel):
    """Public quote request"""

    service_id: int
    square_meters: float
    address: Optional[str] = None
    special_requirements: Optional[str] = None
    preferred_date: Optional[str] = None
    contact_email: str
    contact_name: str
    contact_phone: Optional[str] = None

    @field_validator("square_meters")
    @classmethod
    def validate_square_meters(cls, v):
        if v <= 0:
            raise ValueError("Square meters must be greater than 0")
        return v

    @field_validator("preferred_date")
    @classmethod
    def validate_preferred_date(cls, v):
        if v:
            return parse_iso_date(v).isoformat()
        return v

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v):
        return validate_email(v)

    @field_validator("contact_phone")
    @classmethod
    def validate_contact_phone(cls, v):
        if v:
            return validate_us_phone(v)
        return v

    @field_validator("contact_name")
    @classmethod
    def validate_contact_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Contact name is required")
        return v

    @field_validator("special_requirements")
    @classmethod
    def validate_requirements(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class QuoteUpdate(BaseModel):
    """Staff update of a quote"""

    estimated_price: Optional[float] = None
    status: Optional[str] = None
    admin_notes: Optional[str] = None

    @field_validator("estimated_price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Estimated price must be greater than 0")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in QUOTE_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(QUOTE_STATUSES)}")
        return v

    @field_validator("admin_notes")
    @classmethod
    def validate_notes(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class QuoteResponse(BaseModel):
    id: int
    service_id: int
    service_name: Optional[str] = None
    square_meters: float
    address: Optional[str] = None
    special_requirements: Optional[str] = None
    preferred_date: Optional[str] = None
    contact_email: str
    contact_name: str
    contact_phone: Optional[str] = None
    estimated_price: float
    status: str
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuoteEstimateResponse(BaseModel):
    service_id: int
    square_meters: float
    estimate: float
    note: str = "This is an instant estimate. Final price may vary based on specific requirements."
