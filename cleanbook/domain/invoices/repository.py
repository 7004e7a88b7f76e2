"""Invoice repository - Database operations for invoices"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...config import INVOICE_NUMBER_PREFIX
from ...models import Booking
from ...models_invoice import Invoice


class InvoiceRepository:
    """Repository for invoice database operations"""

    @staticmethod
    def _with_details(db: Session):
        return db.query(Invoice).options(
            joinedload(Invoice.items),
            joinedload(Invoice.booking).joinedload(Booking.service),
        )

    @staticmethod
    def get_invoice_by_id(db: Session, invoice_id: int) -> Optional[Invoice]:
        return InvoiceRepository._with_details(db).filter(Invoice.id == invoice_id).first()

    @staticmethod
    def get_invoice_by_booking_id(db: Session, booking_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.booking_id == booking_id).first()

    @staticmethod
    def invoice_number_exists(db: Session, invoice_number: str) -> bool:
        return (
            db.query(Invoice.id).filter(Invoice.invoice_number == invoice_number).first()
            is not None
        )

    @staticmethod
    def get_invoice_numbers_for_year(db: Session, year: int) -> list[str]:
        """Invoice numbers carrying the year's prefix"""
        rows = (
            db.query(Invoice.invoice_number)
            .filter(Invoice.invoice_number.like(f"{INVOICE_NUMBER_PREFIX}-{year}-%"))
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def list_invoices(
        db: Session, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[Invoice], int]:
        """Page of invoices (newest first) plus the total matching count"""
        count_query = db.query(Invoice)
        if status:
            count_query = count_query.filter(Invoice.status == status)
        total = count_query.count()

        query = InvoiceRepository._with_details(db)
        if status:
            query = query.filter(Invoice.status == status)
        invoices = (
            query.order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return invoices, total

    @staticmethod
    def get_invoices_issued_between(db: Session, start: datetime, end: datetime) -> list[Invoice]:
        """Invoices with start <= issue_date < end"""
        return (
            InvoiceRepository._with_details(db)
            .filter(Invoice.issue_date >= start, Invoice.issue_date < end)
            .order_by(Invoice.issue_date.desc())
            .all()
        )

    @staticmethod
    def get_pending_past_due(db: Session, now: datetime) -> list[Invoice]:
        return (
            db.query(Invoice)
            .filter(Invoice.status == "pending", Invoice.due_date < now)
            .all()
        )

    @staticmethod
    def update_invoice(db: Session, invoice: Invoice, **updates) -> Invoice:
        """Update an invoice with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(invoice, key):
                setattr(invoice, key, value)

        db.commit()
        db.refresh(invoice)
        return invoice

    @staticmethod
    def delete_invoice(db: Session, invoice: Invoice) -> None:
        """Delete an invoice; its items go with it in the same transaction"""
        db.delete(invoice)
        db.commit()
