"""Catalog router - public service listing and staff catalog management"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_admin
from ...database import get_db
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])
admin_router = APIRouter(prefix="/admin/services", tags=["Admin Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def get_services(service: CatalogService = Depends(get_catalog_service)):
    return service.get_services()


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_service(service_id)


@admin_router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: CurrentUser = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service(data)


@admin_router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: CurrentUser = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service(service_id, data)


@admin_router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    current_user: CurrentUser = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete a service that nothing references"""
    return service.delete_service(service_id)
