"""Quote router - public quote requests and staff quote management"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_admin
from ...database import get_db
from .schemas import QuoteCreate, QuoteEstimateResponse, QuoteResponse, QuoteUpdate
from .service import QuoteService

router = APIRouter(prefix="/quotes", tags=["Quotes"])
admin_router = APIRouter(prefix="/admin/quotes", tags=["Admin Quotes"])


def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    """Dependency injection for QuoteService"""
    return QuoteService(db)


@router.post("", response_model=QuoteResponse, status_code=201)
async def request_quote(data: QuoteCreate, service: QuoteService = Depends(get_quote_service)):
    """Anyone can request a quote without booking"""
    return service.create_quote(data)


@router.get("/estimate", response_model=QuoteEstimateResponse)
async def get_quote_estimate(
    service_id: int = Query(...),
    square_meters: float = Query(..., gt=0),
    service: QuoteService = Depends(get_quote_service),
):
    estimate = service.get_instant_estimate(service_id, square_meters)
    return QuoteEstimateResponse(
        service_id=service_id, square_meters=square_meters, estimate=estimate
    )


@admin_router.get("", response_model=list[QuoteResponse])
async def get_quotes(
    status: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_admin),
    service: QuoteService = Depends(get_quote_service),
):
    return service.get_quotes(status)


@admin_router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: int,
    data: QuoteUpdate,
    current_user: CurrentUser = Depends(require_admin),
    service: QuoteService = Depends(get_quote_service),
):
    return service.update_quote(quote_id, data)
