"""Catalog repository - Database operations for cleaning services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Quote, Service


class CatalogRepository:
    """Repository for service catalog operations"""

    @staticmethod
    def get_services(db: Session) -> list[Service]:
        return db.query(Service).order_by(Service.name).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def is_referenced(db: Session, service_id: int) -> bool:
        """True when any booking or quote points at the service"""
        booking = db.query(Booking.id).filter(Booking.service_id == service_id).first()
        if booking is not None:
            return True
        return db.query(Quote.id).filter(Quote.service_id == service_id).first() is not None

    @staticmethod
    def create_service(db: Session, **service_data) -> Service:
        service = Service(**service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        """Update a service with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
