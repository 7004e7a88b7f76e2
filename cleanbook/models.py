from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

BOOKING_STATUSES = ("pending", "confirmed", "in_progress", "completed", "cancelled")
SERVICE_TYPES = ("residential", "commercial")
QUOTE_STATUSES = ("pending", "sent", "accepted", "rejected")
ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"


class User(Base):
    """Registered customer or staff member (credentials live in the auth layer)"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), default=ROLE_CLIENT, nullable=False)  # client, admin

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="user")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("base_price > 0", name="ck_services_base_price_positive"),
        CheckConstraint("duration_hours > 0", name="ck_services_duration_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Float, nullable=False)
    duration_hours = Column(Float, nullable=False, default=2)
    service_type = Column(String(20), nullable=False, default="residential")  # residential, commercial

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship("Booking", back_populates="service")
    quotes = relationship("Quote", back_populates="service")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("square_meters > 0", name="ck_bookings_square_meters_positive"),
        CheckConstraint("total_price > 0", name="ck_bookings_total_price_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Exactly one owner: a registered user or the embedded guest identity
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    # Null only for placeholder bookings behind custom invoices
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    custom_service_name = Column(String(255), nullable=True)

    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=False)
    address = Column(String(500), nullable=False)
    square_meters = Column(Float, nullable=False)
    special_instructions = Column(Text, nullable=True)
    total_price = Column(Float, nullable=False)  # tax-inclusive
    status = Column(String(20), default="pending", nullable=False, index=True)
    reschedule_reason = Column(Text, nullable=True)

    # Guest booking information
    guest_name = Column(String(255), nullable=True)
    guest_email = Column(String(255), nullable=True, index=True)
    guest_phone = Column(String(50), nullable=True)
    is_guest_booking = Column(Boolean, default=False, nullable=False)
    is_placeholder = Column(Boolean, default=False, nullable=False)  # created for a custom invoice

    # Billing address
    billing_address = Column(String(500), nullable=True)
    billing_city = Column(String(100), nullable=True)
    billing_state = Column(String(50), nullable=True)
    billing_zip_code = Column(String(20), nullable=True)
    billing_country = Column(String(100), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="bookings")
    service = relationship("Service", back_populates="bookings")
    invoice = relationship("Invoice", back_populates="booking", uselist=False)

    @property
    def invoice_id(self):
        return self.invoice.id if self.invoice else None

    @property
    def service_name(self) -> str:
        if self.service is not None:
            return self.service.name
        return self.custom_service_name or "Cleaning Service"

    @property
    def customer_name(self) -> str:
        if self.user is not None and self.user.full_name:
            return self.user.full_name
        return self.guest_name or "Guest"

    @property
    def customer_email(self):
        if self.user is not None:
            return self.user.email
        return self.guest_email

    @property
    def customer_phone(self):
        if self.user is not None:
            return self.user.phone
        return self.guest_phone


class Quote(Base):
    """Non-binding estimate request"""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    square_meters = Column(Float, nullable=False)
    address = Column(String(500), nullable=True)
    special_requirements = Column(Text, nullable=True)
    preferred_date = Column(String(20), nullable=True)  # YYYY-MM-DD as entered
    contact_email = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=False)
    contact_phone = Column(String(50), nullable=True)
    estimated_price = Column(Float, nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, sent, accepted, rejected
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    service = relationship("Service", back_populates="quotes")

    @property
    def service_name(self):
        return self.service.name if self.service else None
