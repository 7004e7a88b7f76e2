"""Catalog service - Business logic for the service catalog"""

import logging

from sqlalchemy.orm import Session

from ...exceptions import ConflictError, NotFoundError
from ...models import Service
from .repository import CatalogRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for catalog operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def get_services(self) -> list[Service]:
        return self.repo.get_services(self.db)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = self.repo.create_service(self.db, **data.model_dump())
        logger.info(f"✅ Service {service.id} created: {service.name} (${service.base_price:.2f})")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        return self.repo.update_service(self.db, service, **data.model_dump(exclude_unset=True))

    def delete_service(self, service_id: int) -> dict:
        service = self.get_service(service_id)
        if self.repo.is_referenced(self.db, service_id):
            raise ConflictError("Service has bookings or quotes and cannot be deleted")

        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service {service_id} deleted")
        return {"message": "Service deleted"}
