"""Quote repository - Database operations for quote requests"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Quote


class QuoteRepository:
    """Repository for quote database operations"""

    @staticmethod
    def get_quotes(db: Session, status: Optional[str] = None) -> list[Quote]:
        query = db.query(Quote).options(joinedload(Quote.service))
        if status:
            query = query.filter(Quote.status == status)
        return query.order_by(Quote.created_at.desc(), Quote.id.desc()).all()

    @staticmethod
    def get_quote_by_id(db: Session, quote_id: int) -> Optional[Quote]:
        return (
            db.query(Quote)
            .options(joinedload(Quote.service))
            .filter(Quote.id == quote_id)
            .first()
        )

    @staticmethod
    def create_quote(db: Session, **quote_data) -> Quote:
        quote = Quote(**quote_data)
        db.add(quote)
        db.commit()
        db.refresh(quote)
        return quote

    @staticmethod
    def update_quote(db: Session, quote: Quote, **updates) -> Quote:
        """Update a quote with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(quote, key):
                setattr(quote, key, value)

        db.commit()
        db.refresh(quote)
        return quote
