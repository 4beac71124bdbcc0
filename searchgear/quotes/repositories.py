import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.quotes.interfaces import AbstractQuoteRepository
from searchgear.quotes.models import QuoteRequest, QuoteStatus
from searchgear.users.models import utc_now

logger = logging.getLogger(__name__)


class SQLAlchemyQuoteRepository(AbstractQuoteRepository):
    """Implémentation SQLAlchemy du repository des demandes de devis."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id(self, quote_id: str) -> Optional[QuoteRequest]:
        return await self.db.get(QuoteRequest, quote_id)

    async def add(self, quote: QuoteRequest) -> QuoteRequest:
        self.db.add(quote)
        await self.db.commit()
        await self.db.refresh(quote)
        logger.debug(f"[QuoteRepo] Devis {quote.id} créé pour user {quote.user_id}")
        return quote

    async def save(self, quote: QuoteRequest) -> QuoteRequest:
        quote.updated_at = utc_now()
        self.db.add(quote)
        quote_id = quote.id
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[QuoteRepo] Échec de l'enregistrement de {quote_id}: {e}", exc_info=True)
            raise
        await self.db.refresh(quote)
        return quote

    async def list_by_user(self, user_id: str) -> List[QuoteRequest]:
        statement = (
            select(QuoteRequest)
            .where(QuoteRequest.user_id == user_id)
            .order_by(QuoteRequest.created_at.desc())
        )
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def list_all(self, status: Optional[QuoteStatus] = None) -> List[QuoteRequest]:
        statement = select(QuoteRequest).order_by(QuoteRequest.created_at.desc())
        if status is not None:
            statement = statement.where(QuoteRequest.status == status)
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def delete(self, quote: QuoteRequest) -> None:
        await self.db.delete(quote)
        await self.db.commit()
        logger.debug(f"[QuoteRepo] Devis {quote.id} supprimé")
