"""Invoice service - Invoice derivation, numbering and lifecycle"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import (
    BUSINESS_START_HOUR,
    BUSINESS_TAX_ID,
    DEFAULT_BILLING_COUNTRY,
    INVOICE_NUMBER_MAX_ATTEMPTS,
    INVOICE_TERMS,
)
from ...exceptions import ConflictError, InvalidRequestError, NotFoundError
from ...models import Booking
from ...models_invoice import Invoice, InvoiceItem
from ..bookings.repository import BookingRepository
from ..catalog.repository import CatalogRepository
from .calculations import (
    LineItem,
    compute_totals,
    default_line_item,
    due_date_for,
    next_invoice_number,
    parse_service_address,
)
from .repository import InvoiceRepository
from .schemas import (
    CustomInvoiceRequest,
    InvoiceCreateRequest,
    InvoiceUpdateRequest,
    MarkPaidRequest,
)

logger = logging.getLogger(__name__)


def _line_items(request: InvoiceCreateRequest, service_name: str, service_address, gross: float):
    if request.items:
        return [
            LineItem(
                description=i.description,
                quantity=i.quantity,
                unit_price=i.unit_price,
                taxable=i.taxable,
            )
            for i in request.items
        ]
    return [default_line_item(service_name, service_address, gross)]


class InvoiceService:
    """Service layer for invoice business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()
        self.bookings = BookingRepository()
        self.catalog = CatalogRepository()

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def create_invoice_from_booking(
        self, booking_id: int, request: Optional[InvoiceCreateRequest] = None
    ) -> Invoice:
        """
        Issue the single invoice for a booking.

        Raises:
            NotFoundError: Booking does not exist
            ConflictError: Booking already has an invoice
        """
        request = request or InvoiceCreateRequest()
        booking = self.bookings.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")

        if self.repo.get_invoice_by_booking_id(self.db, booking_id):
            raise ConflictError(f"Invoice already exists for booking {booking_id}")

        fields = self._invoice_fields(booking, request)
        items = _line_items(request, booking.service_name, booking.address, booking.total_price)

        def build(invoice_number: str) -> Invoice:
            return self._build_invoice(invoice_number, fields, items, request, booking_id=booking_id)

        invoice = self._issue(build, booking_id=booking_id)
        logger.info(
            f"🧾 Invoice {invoice.invoice_number} issued for booking {booking_id} "
            f"(total ${invoice.total_amount:.2f})"
        )
        return invoice

    def create_custom_invoice(self, request: CustomInvoiceRequest) -> Invoice:
        """Invoice unbooked work through a placeholder booking"""
        service = None
        if request.service_id is not None:
            service = self.catalog.get_service_by_id(self.db, request.service_id)
            if not service:
                raise NotFoundError("Service not found")
        service_name = service.name if service else request.service_name.strip()

        def build(invoice_number: str) -> Invoice:
            placeholder = Booking(
                user_id=None,
                service_id=service.id if service else None,
                custom_service_name=None if service else service_name,
                scheduled_date=request.service_date,
                scheduled_time=time(BUSINESS_START_HOUR, 0),
                address=request.service_address,
                square_meters=request.square_meters,
                total_price=request.amount,
                status="completed",
                is_guest_booking=True,
                is_placeholder=True,
                guest_name=request.customer_name,
                guest_email=request.customer_email,
                guest_phone=request.customer_phone,
                billing_address=request.billing_address,
                billing_city=request.billing_city,
                billing_state=request.billing_state,
                billing_zip_code=request.billing_zip_code,
                billing_country=request.billing_country,
            )
            fields = self._snapshot_fields(
                customer_name=request.customer_name,
                customer_email=request.customer_email,
                customer_phone=request.customer_phone,
                service_address=request.service_address,
                booking=placeholder,
                request=request,
            )
            items = _line_items(request, service_name, request.service_address, request.amount)
            invoice = self._build_invoice(invoice_number, fields, items, request)
            invoice.booking = placeholder
            return invoice

        invoice = self._issue(build)
        logger.info(
            f"🧾 Custom invoice {invoice.invoice_number} issued to {request.customer_name} "
            f"(total ${invoice.total_amount:.2f})"
        )
        return invoice

    def _snapshot_fields(
        self,
        customer_name: str,
        customer_email,
        customer_phone,
        service_address,
        booking: Booking,
        request: InvoiceCreateRequest,
    ) -> dict:
        """Customer, billing and service address copied at issuance"""
        service_city, service_state, service_zip = parse_service_address(service_address)
        billing_address = request.billing_address or booking.billing_address or service_address
        uses_service_address = billing_address == service_address

        return {
            "customer_name": customer_name,
            "customer_email": customer_email,
            "customer_phone": customer_phone,
            "billing_address": billing_address,
            "billing_city": request.billing_city
            or booking.billing_city
            or (service_city if uses_service_address else None),
            "billing_state": request.billing_state
            or booking.billing_state
            or (service_state if uses_service_address else None),
            "billing_zip_code": request.billing_zip_code
            or booking.billing_zip_code
            or (service_zip if uses_service_address else None),
            "billing_country": request.billing_country
            or booking.billing_country
            or DEFAULT_BILLING_COUNTRY,
            "service_address": service_address,
            "service_city": service_city,
            "service_state": service_state,
            "service_zip_code": service_zip,
        }

    def _invoice_fields(self, booking: Booking, request: InvoiceCreateRequest) -> dict:
        return self._snapshot_fields(
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            service_address=booking.address,
            booking=booking,
            request=request,
        )

    def _build_invoice(
        self,
        invoice_number: str,
        fields: dict,
        items: list[LineItem],
        request: InvoiceCreateRequest,
        booking_id: Optional[int] = None,
    ) -> Invoice:
        totals = compute_totals(items, request.tax_exempt)
        issue_date = datetime.utcnow()

        invoice = Invoice(
            booking_id=booking_id,
            invoice_number=invoice_number,
            issue_date=issue_date,
            due_date=due_date_for(issue_date, request.due_days),
            subtotal=totals.subtotal,
            tax_rate=totals.tax_rate,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
            status="pending",
            business_tax_id=BUSINESS_TAX_ID,
            tax_exempt=request.tax_exempt,
            tax_exempt_reason=request.tax_exempt_reason if request.tax_exempt else None,
            notes=request.notes,
            terms=INVOICE_TERMS,
            **fields,
        )
        invoice.items = [
            InvoiceItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total,
                taxable=item.taxable,
            )
            for item in items
        ]
        return invoice

    def _next_invoice_number(self) -> str:
        year = datetime.utcnow().year
        return next_invoice_number(self.repo.get_invoice_numbers_for_year(self.db, year), year)

    def _issue(self, build: Callable[[str], Invoice], booking_id: Optional[int] = None) -> Invoice:
        """
        Insert an invoice, relying on the unique constraints for races.

        A booking_id violation means a concurrent issuance won; an
        invoice_number violation is retried with a fresh number.
        """
        for attempt in range(1, INVOICE_NUMBER_MAX_ATTEMPTS + 1):
            invoice_number = self._next_invoice_number()
            invoice = build(invoice_number)
            self.db.add(invoice)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if booking_id is not None and self.repo.get_invoice_by_booking_id(self.db, booking_id):
                    logger.warning(f"⚠️ Concurrent invoice issuance for booking {booking_id} lost the race")
                    raise ConflictError(f"Invoice already exists for booking {booking_id}") from e
                if not self.repo.invoice_number_exists(self.db, invoice_number):
                    logger.error(f"❌ Invoice insert failed: {e}")
                    raise
                logger.warning(
                    f"⚠️ Invoice number {invoice_number} taken, retrying "
                    f"({attempt}/{INVOICE_NUMBER_MAX_ATTEMPTS})"
                )
                continue

            self.db.refresh(invoice)
            return invoice

        raise ConflictError("Could not allocate a unique invoice number, please retry")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.repo.get_invoice_by_id(self.db, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def list_invoices(self, status: Optional[str] = None, page: int = 1, limit: int = 20):
        """Paginated invoices with the total count"""
        if page < 1 or limit < 1:
            raise InvalidRequestError("page and limit must be positive")
        return self.repo.list_invoices(self.db, status, limit=limit, offset=(page - 1) * limit)

    def get_invoices_by_date_range(self, start: date, end: date) -> list[Invoice]:
        """Invoices issued from start through end (inclusive)"""
        if start > end:
            raise InvalidRequestError("start_date must be on or before end_date")
        return self.repo.get_invoices_issued_between(
            self.db,
            datetime.combine(start, time.min),
            datetime.combine(end + timedelta(days=1), time.min),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def update_invoice(self, invoice_id: int, data: InvoiceUpdateRequest) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        invoice = self.repo.update_invoice(self.db, invoice, **updates)
        logger.info(f"✏️ Invoice {invoice.invoice_number} updated: {sorted(updates)}")
        return invoice

    def mark_paid(self, invoice_id: int, data: MarkPaidRequest) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        if invoice.status == "cancelled":
            raise InvalidRequestError("Cancelled invoices cannot be marked as paid")

        invoice = self.repo.update_invoice(
            self.db,
            invoice,
            status="paid",
            payment_method=data.payment_method,
            payment_reference=data.payment_reference,
            payment_date=data.payment_date or datetime.utcnow(),
        )
        logger.info(f"💰 Invoice {invoice.invoice_number} marked paid via {data.payment_method}")
        return invoice

    def delete_invoice(self, invoice_id: int) -> dict:
        invoice = self.get_invoice(invoice_id)
        number = invoice.invoice_number
        self.repo.delete_invoice(self.db, invoice)
        logger.info(f"🗑️ Invoice {number} deleted")
        return {"message": "Invoice deleted"}

    def mark_overdue_invoices(self, now: Optional[datetime] = None) -> int:
        """Flag pending invoices whose due date has passed"""
        now = now or datetime.utcnow()
        invoices = self.repo.get_pending_past_due(self.db, now)
        for invoice in invoices:
            invoice.status = "overdue"
        self.db.commit()

        if invoices:
            logger.info(f"⏰ Marked {len(invoices)} invoice(s) overdue")
        return len(invoices)
