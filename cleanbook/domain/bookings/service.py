"""Booking service - Business logic for booking operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import CurrentUser
from ...config import DEFAULT_BILLING_COUNTRY
from ...exceptions import ForbiddenError, InvalidRequestError, NotFoundError
from ...models import Booking
from ..catalog.repository import CatalogRepository
from ..pricing.calculator import calculate_price
from ..scheduling.availability_service import AvailabilityService
from ..scheduling.schemas import RescheduleRequest
from ..scheduling.time_calculator import format_time
from .repository import BookingRepository
from .schemas import AdminBookingUpdate, BookingCreate, GuestBookingCreate
from .state_machine import authorize_transition

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.catalog = CatalogRepository()
        self.availability = AvailabilityService(db)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _price_and_check(self, data: BookingCreate):
        service = self.catalog.get_service_by_id(self.db, data.service_id)
        if not service:
            raise NotFoundError("Service not found")

        self.availability.ensure_window_free(data.scheduled_date, data.scheduled_time, service.name)

        try:
            total_price = calculate_price(service.base_price, data.square_meters)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e
        return service, total_price

    def _booking_fields(self, data: BookingCreate, total_price: float) -> dict:
        return {
            "service_id": data.service_id,
            "scheduled_date": data.scheduled_date,
            "scheduled_time": data.scheduled_time,
            "address": data.address,
            "square_meters": data.square_meters,
            "special_instructions": data.special_instructions,
            "total_price": total_price,
            "status": "pending",
        }

    def create_booking(self, data: BookingCreate, user: CurrentUser) -> Booking:
        """Create a booking owned by the authenticated user"""
        logger.info(f"📥 Creating booking for user_id: {user.id}")
        service, total_price = self._price_and_check(data)

        booking = self.repo.create_booking(
            self.db,
            user_id=user.id,
            is_guest_booking=False,
            **self._booking_fields(data, total_price),
        )
        logger.info(
            f"✅ Booking {booking.id} created: {service.name} on {booking.scheduled_date} "
            f"at {format_time(booking.scheduled_time)} (${total_price:.2f})"
        )
        return booking

    def create_guest_booking(self, data: GuestBookingCreate) -> Booking:
        """Create a booking owned by an embedded guest identity"""
        logger.info(f"📥 Creating guest booking for {data.guest_email}")
        service, total_price = self._price_and_check(data)

        booking = self.repo.create_booking(
            self.db,
            user_id=None,
            is_guest_booking=True,
            guest_name=data.guest_name,
            guest_email=data.guest_email,
            guest_phone=data.guest_phone,
            billing_address=data.billing_address,
            billing_city=data.billing_city,
            billing_state=data.billing_state,
            billing_zip_code=data.billing_zip_code,
            billing_country=data.billing_country or DEFAULT_BILLING_COUNTRY,
            **self._booking_fields(data, total_price),
        )
        logger.info(f"✅ Guest booking {booking.id} created: {service.name} (${total_price:.2f})")
        return booking

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: int, user: CurrentUser) -> Booking:
        """Get a booking visible to the caller (owners and staff)"""
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking or (not user.is_admin and booking.user_id != user.id):
            raise NotFoundError("Booking not found")
        return booking

    def get_guest_booking(self, booking_id: int, email: str) -> Booking:
        """Guest lookup requires the email the booking was made with"""
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if (
            not booking
            or not booking.is_guest_booking
            or (booking.guest_email or "").lower() != (email or "").strip().lower()
        ):
            raise NotFoundError("Booking not found")
        return booking

    def get_user_bookings(self, user: CurrentUser) -> list[Booking]:
        return self.repo.get_user_bookings(self.db, user.id)

    def get_all_bookings(self, status: Optional[str] = None) -> list[Booking]:
        return self.repo.get_all_bookings(self.db, status)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _get_for_mutation(self, booking_id: int, user: CurrentUser) -> Booking:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if not user.is_admin and booking.user_id != user.id:
            logger.warning(f"⚠️ User {user.id} attempted to modify booking {booking_id}")
            raise ForbiddenError("You can only modify your own bookings")
        return booking

    def _ensure_slot_free(self, booking: Booking, day, start) -> None:
        """Conflict check for a booking taking up a window again (moved or reopened)"""
        self.availability.ensure_window_free(
            day, start, booking.service_name, exclude_booking_id=booking.id
        )

    def update_status(self, booking_id: int, requested_status: str, user: CurrentUser) -> Booking:
        """Status change through the transition table"""
        booking = self._get_for_mutation(booking_id, user)
        authorize_transition(user.role, booking.status, requested_status)
        if booking.status == "cancelled" and requested_status != "cancelled":
            self._ensure_slot_free(booking, booking.scheduled_date, booking.scheduled_time)

        previous = booking.status
        booking = self.repo.update_booking(self.db, booking, status=requested_status)
        logger.info(f"🔄 Booking {booking_id} status {previous} -> {requested_status} by user {user.id}")
        return booking

    def cancel_booking(self, booking_id: int, user: CurrentUser) -> Booking:
        return self.update_status(booking_id, "cancelled", user)

    def admin_update_booking(
        self, booking_id: int, data: AdminBookingUpdate, user: CurrentUser
    ) -> Booking:
        """Sparse staff update. Schedule changes and reopened bookings are re-checked for conflicts."""
        booking = self._get_for_mutation(booking_id, user)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        if "status" in updates:
            authorize_transition(user.role, booking.status, updates["status"])

        schedule_changed = "scheduled_date" in updates or "scheduled_time" in updates
        final_status = updates.get("status", booking.status)
        reopened = booking.status == "cancelled" and final_status != "cancelled"
        if (schedule_changed or reopened) and final_status != "cancelled":
            self._ensure_slot_free(
                booking,
                updates.get("scheduled_date", booking.scheduled_date),
                updates.get("scheduled_time", booking.scheduled_time),
            )

        booking = self.repo.update_booking(self.db, booking, **updates)
        logger.info(f"✏️ Booking {booking_id} updated by staff {user.id}: {sorted(updates)}")
        return booking

    def reschedule_booking(self, booking_id: int, data: RescheduleRequest) -> Booking:
        """Move a booking to a new date and time, rejecting clashes"""
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if booking.status == "cancelled":
            raise InvalidRequestError("Cancelled bookings cannot be rescheduled")

        self.availability.ensure_window_free(
            data.new_date, data.new_time, booking.service_name, exclude_booking_id=booking.id
        )

        booking.scheduled_date = data.new_date
        booking.scheduled_time = data.new_time
        booking.reschedule_reason = data.reason
        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            f"📅 Booking {booking_id} rescheduled to {data.new_date} {format_time(data.new_time)}"
        )
        return booking
