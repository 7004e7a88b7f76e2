"""
Invoice and line item models for booking billing
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

INVOICE_STATUSES = ("pending", "paid", "overdue", "cancelled")
PAYMENT_METHODS = ("cash", "check", "credit_card", "bank_transfer")


class Invoice(Base):
    """Invoice issued for exactly one booking"""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    # Unique: at most one invoice per booking, enforced by the store
    booking_id = Column(Integer, ForeignKey("bookings.id"), unique=True, nullable=False)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    issue_date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=False)

    # Customer snapshot (copied at issuance, never re-derived)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)

    # Billing address snapshot
    billing_address = Column(String(500), nullable=True)
    billing_city = Column(String(100), nullable=True)
    billing_state = Column(String(50), nullable=True)
    billing_zip_code = Column(String(20), nullable=True)
    billing_country = Column(String(100), nullable=True)

    # Service address snapshot
    service_address = Column(String(500), nullable=True)
    service_city = Column(String(100), nullable=True)
    service_state = Column(String(50), nullable=True)
    service_zip_code = Column(String(20), nullable=True)

    # Financial details
    subtotal = Column(Float, nullable=False)
    tax_rate = Column(Float, nullable=False, default=0)
    tax_amount = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False)

    # Payment
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_method = Column(String(50), nullable=True)  # cash, check, credit_card, bank_transfer
    payment_date = Column(DateTime, nullable=True)
    payment_reference = Column(String(255), nullable=True)

    # Tax compliance
    business_tax_id = Column(String(50), nullable=True)
    tax_exempt = Column(Boolean, default=False, nullable=False)
    tax_exempt_reason = Column(String(255), nullable=True)

    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="invoice")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )

    @property
    def service_name(self) -> str:
        return self.booking.service_name if self.booking else "Unknown Service"

    @property
    def booking_date(self):
        return self.booking.scheduled_date if self.booking else None


class InvoiceItem(Base):
    """Line item on an invoice"""

    __tablename__ = "invoice_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
        CheckConstraint("unit_price > 0", name="ck_invoice_items_unit_price_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(
        Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description = Column(String(500), nullable=False)
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    taxable = Column(Boolean, default=True, nullable=False)

    invoice = relationship("Invoice", back_populates="items")
