"""Quote service - Business logic for quote requests"""

import html
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import InvalidRequestError, NotFoundError
from ...models import Quote, Service
from ..catalog.repository import CatalogRepository
from ..pricing.calculator import calculate_price, estimate_quote_price
from .repository import QuoteRepository
from .schemas import QuoteCreate, QuoteUpdate

logger = logging.getLogger(__name__)


class QuoteService:
    """Service layer for quote business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = QuoteRepository()
        self.catalog = CatalogRepository()

    def _get_service(self, service_id: int) -> Service:
        service = self.catalog.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def create_quote(self, data: QuoteCreate) -> Quote:
        """Record a quote request with its estimated price"""
        service = self._get_service(data.service_id)
        # Requirements are stored escaped; the surcharge is judged on the text as typed
        requirements = html.unescape(data.special_requirements) if data.special_requirements else None
        estimate = estimate_quote_price(service.base_price, data.square_meters, requirements)

        quote = self.repo.create_quote(
            self.db,
            **data.model_dump(),
            estimated_price=estimate,
            status="pending",
        )
        logger.info(f"📝 Quote {quote.id} requested by {quote.contact_email} (${estimate:.2f})")
        return quote

    def get_instant_estimate(self, service_id: int, square_meters: float) -> float:
        """Booking price without the quote surcharge"""
        service = self._get_service(service_id)
        try:
            return calculate_price(service.base_price, square_meters)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

    def get_quotes(self, status: Optional[str] = None) -> list[Quote]:
        return self.repo.get_quotes(self.db, status)

    def update_quote(self, quote_id: int, data: QuoteUpdate) -> Quote:
        quote = self.repo.get_quote_by_id(self.db, quote_id)
        if not quote:
            raise NotFoundError("Quote not found")
        return self.repo.update_quote(self.db, quote, **data.model_dump(exclude_unset=True))
