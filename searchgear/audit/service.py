import logging
from typing import Any, Dict, List, Optional

from searchgear.audit.interfaces import AbstractQuotationHistoryRepository
from searchgear.audit.models import HistoryAction, QuotationHistoryCreate, QuotationHistoryRead

logger = logging.getLogger(__name__)


class AuditLogService:
    """Journal d'audit des transitions de devis : qui, quoi, avant, après, effets de bord."""

    def __init__(self, history_repo: AbstractQuotationHistoryRepository):
        self.history_repo = history_repo

    async def append(self, entry: QuotationHistoryCreate) -> QuotationHistoryRead:
        record = await self.history_repo.append(entry)
        logger.info(f"[AuditLog] {entry.action.value} enregistré pour devis {entry.quote_request_id} par {entry.performed_by}")
        return QuotationHistoryRead.model_validate(record)

    async def record(
        self,
        quote_request_id: str,
        performed_by: str,
        action: HistoryAction,
        previous_state: Optional[Dict[str, Any]] = None,
        new_state: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> QuotationHistoryRead:
        """Raccourci de construction + ajout d'une entrée."""
        return await self.append(QuotationHistoryCreate(
            quote_request_id=quote_request_id,
            performed_by=performed_by,
            action=action,
            previous_state=previous_state or {},
            new_state=new_state or {},
            event_metadata=metadata or {},
        ))

    async def history_for_quote(self, quote_request_id: str) -> List[QuotationHistoryRead]:
        records = await self.history_repo.list_for_quote(quote_request_id)
        return [QuotationHistoryRead.model_validate(r) for r in records]
