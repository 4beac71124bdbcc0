import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.audit.exceptions import AuditLogException
from searchgear.audit.interfaces import AbstractQuotationHistoryRepository
from searchgear.audit.models import QuotationHistory, QuotationHistoryCreate

logger = logging.getLogger(__name__)


class SQLAlchemyQuotationHistoryRepository(AbstractQuotationHistoryRepository):
    """Implémentation SQLAlchemy du journal d'audit."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def append(self, entry: QuotationHistoryCreate) -> QuotationHistory:
        record = QuotationHistory(**entry.model_dump())
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[AuditRepo] Échec écriture audit {entry.action.value} pour devis {entry.quote_request_id}: {e}", exc_info=True)
            raise AuditLogException(f"Could not record audit entry '{entry.action.value}'", original_exception=e)
        return record

    async def list_for_quote(self, quote_request_id: str) -> List[QuotationHistory]:
        statement = (
            select(QuotationHistory)
            .where(QuotationHistory.quote_request_id == quote_request_id)
            .order_by(QuotationHistory.id)
        )
        result = await self.db.execute(statement)
        return list(result.scalars().all())
