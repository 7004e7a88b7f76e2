"""Booking router - FastAPI endpoints for customer, guest and staff booking operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user, require_admin
from ...database import get_db
from ...models import Booking
from ..scheduling.time_calculator import coerce_stored_time, format_time
from .schemas import (
    AdminBookingUpdate,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    GuestBookingCreate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])
guest_router = APIRouter(prefix="/guest/bookings", tags=["Guest Bookings"])
admin_router = APIRouter(prefix="/admin/bookings", tags=["Admin Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def to_booking_response(b: Booking) -> BookingResponse:
    return BookingResponse(
        id=b.id,
        user_id=b.user_id,
        service_id=b.service_id,
        service_name=b.service_name,
        customer_name=b.customer_name,
        scheduled_date=b.scheduled_date,
        scheduled_time=format_time(coerce_stored_time(b.scheduled_time)),
        address=b.address,
        square_meters=b.square_meters,
        special_instructions=b.special_instructions,
        total_price=b.total_price,
        status=b.status,
        reschedule_reason=b.reschedule_reason,
        invoice_id=b.invoice_id,
        is_guest_booking=bool(b.is_guest_booking),
        guest_name=b.guest_name,
        guest_email=b.guest_email,
        guest_phone=b.guest_phone,
        billing_address=b.billing_address,
        billing_city=b.billing_city,
        billing_state=b.billing_state,
        billing_zip_code=b.billing_zip_code,
        billing_country=b.billing_country,
        created_at=b.created_at,
    )


# ============================================================================
# CUSTOMER ENDPOINTS
# ============================================================================


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Book a service; the price is derived from the service and area"""
    return to_booking_response(service.create_booking(data, current_user))


@router.get("", response_model=list[BookingResponse])
async def get_my_bookings(
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get the caller's bookings"""
    return [to_booking_response(b) for b in service.get_user_bookings(current_user)]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.get_booking(booking_id, current_user))


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Request a status change (customers may only cancel)"""
    return to_booking_response(service.update_status(booking_id, data.status, current_user))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.cancel_booking(booking_id, current_user))


# ============================================================================
# GUEST ENDPOINTS
# ============================================================================


@guest_router.post("", response_model=BookingResponse, status_code=201)
async def create_guest_booking(
    data: GuestBookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    """Book without an account"""
    return to_booking_response(service.create_guest_booking(data))


@guest_router.get("/{booking_id}", response_model=BookingResponse)
async def get_guest_booking(
    booking_id: int,
    email: str = Query(..., description="Email used when booking"),
    service: BookingService = Depends(get_booking_service),
):
    return to_booking_response(service.get_guest_booking(booking_id, email))


# ============================================================================
# STAFF ENDPOINTS
# ============================================================================


@admin_router.get("", response_model=list[BookingResponse])
async def get_all_bookings(
    status: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings, newest schedule first"""
    return [to_booking_response(b) for b in service.get_all_bookings(status)]


@admin_router.put("/{booking_id}", response_model=BookingResponse)
async def admin_update_booking(
    booking_id: int,
    data: AdminBookingUpdate,
    current_user: CurrentUser = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Sparse update of any booking field, including status"""
    return to_booking_response(service.admin_update_booking(booking_id, data, current_user))
