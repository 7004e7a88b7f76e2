"""Invoice router - FastAPI endpoints for staff invoice operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_admin
from ...database import get_db
from ...exceptions import InvalidRequestError
from ...models_invoice import Invoice
from ...shared.validators import parse_iso_date
from .schemas import (
    CustomInvoiceRequest,
    InvoiceCreateRequest,
    InvoiceItemResponse,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceUpdateRequest,
    MarkPaidRequest,
    OverdueSweepResponse,
)
from .service import InvoiceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/invoices", tags=["Invoices"])


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    """Dependency injection for InvoiceService"""
    return InvoiceService(db)


def to_invoice_response(inv: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=inv.id,
        booking_id=inv.booking_id,
        invoice_number=inv.invoice_number,
        issue_date=inv.issue_date,
        due_date=inv.due_date,
        customer_name=inv.customer_name,
        customer_email=inv.customer_email,
        customer_phone=inv.customer_phone,
        billing_address=inv.billing_address,
        billing_city=inv.billing_city,
        billing_state=inv.billing_state,
        billing_zip_code=inv.billing_zip_code,
        billing_country=inv.billing_country,
        service_address=inv.service_address,
        service_city=inv.service_city,
        service_state=inv.service_state,
        service_zip_code=inv.service_zip_code,
        service_name=inv.service_name,
        booking_date=inv.booking_date,
        subtotal=inv.subtotal,
        tax_rate=inv.tax_rate,
        tax_amount=inv.tax_amount,
        total_amount=inv.total_amount,
        status=inv.status,
        payment_method=inv.payment_method,
        payment_date=inv.payment_date,
        payment_reference=inv.payment_reference,
        business_tax_id=inv.business_tax_id,
        tax_exempt=bool(inv.tax_exempt),
        tax_exempt_reason=inv.tax_exempt_reason,
        notes=inv.notes,
        terms=inv.terms,
        items=[InvoiceItemResponse.model_validate(item) for item in inv.items],
        created_at=inv.created_at,
    )


@router.post("/booking/{booking_id}", response_model=InvoiceResponse, status_code=201)
async def create_invoice_from_booking(
    booking_id: int,
    data: Optional[InvoiceCreateRequest] = Body(None),
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Issue the invoice for a booking (at most one per booking)"""
    logger.info(f"📥 Staff {current_user.id} issuing invoice for booking {booking_id}")
    return to_invoice_response(service.create_invoice_from_booking(booking_id, data))


@router.post("/custom", response_model=InvoiceResponse, status_code=201)
async def create_custom_invoice(
    data: CustomInvoiceRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Invoice work that was not booked through the system"""
    return to_invoice_response(service.create_custom_invoice(data))


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    invoices, total = service.list_invoices(status, page, limit)
    return InvoiceListResponse(
        invoices=[to_invoice_response(i) for i in invoices],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/range", response_model=list[InvoiceResponse])
async def get_invoices_by_date_range(
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD (inclusive)"),
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    try:
        start, end = parse_iso_date(start_date), parse_iso_date(end_date)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return [to_invoice_response(i) for i in service.get_invoices_by_date_range(start, end)]


@router.post("/overdue/run", response_model=OverdueSweepResponse)
async def run_overdue_sweep(
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """
    Manually trigger the overdue sweep
    (In production, this should be run via scheduled job/cron)
    """
    return OverdueSweepResponse(updated=service.mark_overdue_invoices())


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_invoice_response(service.get_invoice(invoice_id))


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_invoice_response(service.update_invoice(invoice_id, data))


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceResponse)
async def mark_invoice_paid(
    invoice_id: int,
    data: MarkPaidRequest,
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return to_invoice_response(service.mark_paid(invoice_id, data))


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Delete an invoice together with its line items"""
    return service.delete_invoice(invoice_id)
