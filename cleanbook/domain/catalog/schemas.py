"""Catalog domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import SERVICE_TYPES
from ...utils.sanitization import validate_and_sanitize_input


def _check_service_type(v):
    if v is not None and v not in SERVICE_TYPES:
        raise ValueError(f"Service type must be one of: {', '.join(SERVICE_TYPES)}")
    return v


def _check_positive(v):
    if v is not None and v <= 0:
        raise ValueError("Value must be greater than 0")
    return v


class ServiceCreate(BaseModel):
    name: str
    description: Optional[str] = None
    base_price: float
    duration_hours: float = 2
    service_type: str = "residential"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v

    @field_validator("base_price", "duration_hours")
    @classmethod
    def validate_positive(cls, v):
        return _check_positive(v)

    @field_validator("service_type")
    @classmethod
    def validate_service_type(cls, v):
        return _check_service_type(v)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = None
    duration_hours: Optional[float] = None
    service_type: Optional[str] = None

    @field_validator("base_price", "duration_hours")
    @classmethod
    def validate_positive(cls, v):
        return _check_positive(v)

    @field_validator("service_type")
    @classmethod
    def validate_service_type(cls, v):
        return _check_service_type(v)


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    base_price: float
    duration_hours: float
    service_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
