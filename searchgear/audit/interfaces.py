from abc import ABC, abstractmethod
from typing import List

from searchgear.audit.models import QuotationHistory, QuotationHistoryCreate


class AbstractQuotationHistoryRepository(ABC):
    """Journal en ajout seul : aucune méthode de mise à jour ni de suppression."""

    @abstractmethod
    async def append(self, entry: QuotationHistoryCreate) -> QuotationHistory:
        """Ajoute une entrée au journal."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_quote(self, quote_request_id: str) -> List[QuotationHistory]:
        """Liste les entrées d'un devis, dans l'ordre d'ajout."""
        raise NotImplementedError
