"""Invoice domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...config import DEFAULT_DUE_DAYS
from ...models_invoice import INVOICE_STATUSES, PAYMENT_METHODS
from ...shared.validators import parse_iso_date, validate_email, validate_us_phone
from ...utils.sanitization import validate_and_sanitize_input


class InvoiceItemRequest(BaseModel):
    description: str
    quantity: float = 1
    unit_price: float
    taxable: bool = True

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        v = validate_and_sanitize_input(v, max_length=500)
        if not v:
            raise ValueError("Description is required")
        return v

    @field_validator("quantity", "unit_price")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Quantity and unit price must be greater than 0")
        return v


class InvoiceCreateRequest(BaseModel):
    """
    Optional overrides when issuing an invoice for a booking. Billing fields
    default to the booking's billing address, then its service address.
    """

    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip_code: Optional[str] = None
    billing_country: Optional[str] = None
    items: list[InvoiceItemRequest] = []
    tax_exempt: bool = False
    tax_exempt_reason: Optional[str] = None
    notes: Optional[str] = None
    due_days: int = DEFAULT_DUE_DAYS

    @field_validator("due_days")
    @classmethod
    def validate_due_days(cls, v):
        if v < 0:
            raise ValueError("Due days cannot be negative")
        return v

    @field_validator("notes", "tax_exempt_reason")
    @classmethod
    def validate_text(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class CustomInvoiceRequest(InvoiceCreateRequest):
    """Invoice for work that was never booked through the system"""

    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    service_address: str
    service_date: dt.date
    square_meters: float = 1
    amount: float  # tax-inclusive

    @field_validator("customer_name", "service_address")
    @classmethod
    def validate_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("customer_email")
    @classmethod
    def validate_customer_email(cls, v):
        return validate_email(v)

    @field_validator("customer_phone")
    @classmethod
    def validate_customer_phone(cls, v):
        return validate_us_phone(v)

    @field_validator("service_date", mode="before")
    @classmethod
    def validate_service_date(cls, v):
        return parse_iso_date(v)

    @field_validator("amount", "square_meters")
    @classmethod
    def validate_positive_amount(cls, v):
        if v <= 0:
            raise ValueError("Value must be greater than 0")
        return v

    @model_validator(mode="after")
    def require_service(self):
        if self.service_id is None and not (self.service_name and self.service_name.strip()):
            raise ValueError("Either service_id or service_name is required")
        return self

    @model_validator(mode="after")
    def amount_matches_items(self):
        """The placeholder booking carries amount, the invoice the item gross"""
        if self.items:
            gross = round(sum(round(i.quantity * i.unit_price, 2) for i in self.items), 2)
            if abs(gross - self.amount) >= 0.01:
                raise ValueError(f"Amount {self.amount:.2f} does not match the line item total {gross:.2f}")
        return self


class InvoiceUpdateRequest(BaseModel):
    """Sparse invoice update; omitted fields are left untouched"""

    status: Optional[str] = None
    due_date: Optional[dt.datetime] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_date: Optional[dt.datetime] = None
    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip_code: Optional[str] = None
    billing_country: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in INVOICE_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(INVOICE_STATUSES)}")
        return v

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        if v is not None and v not in PAYMENT_METHODS:
            raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        if v:
            return validate_and_sanitize_input(v, max_length=2000)
        return v


class MarkPaidRequest(BaseModel):
    payment_method: str
    payment_reference: Optional[str] = None
    payment_date: Optional[dt.datetime] = None

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        if v not in PAYMENT_METHODS:
            raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v


class InvoiceItemResponse(BaseModel):
    id: int
    description: str
    quantity: float
    unit_price: float
    total_price: float
    taxable: bool

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    """Schema for invoice response"""

    id: int
    booking_id: int
    invoice_number: str
    issue_date: dt.datetime
    due_date: dt.datetime
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip_code: Optional[str] = None
    billing_country: Optional[str] = None
    service_address: Optional[str] = None
    service_city: Optional[str] = None
    service_state: Optional[str] = None
    service_zip_code: Optional[str] = None
    service_name: str
    booking_date: Optional[dt.date] = None
    subtotal: float
    tax_rate: float
    tax_amount: float
    total_amount: float
    status: str
    payment_method: Optional[str] = None
    payment_date: Optional[dt.datetime] = None
    payment_reference: Optional[str] = None
    business_tax_id: Optional[str] = None
    tax_exempt: bool = False
    tax_exempt_reason: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    items: list[InvoiceItemResponse] = []
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class InvoiceListResponse(BaseModel):
    invoices: list[InvoiceResponse]
    total: int
    page: int
    limit: int


class OverdueSweepResponse(BaseModel):
    updated: int
