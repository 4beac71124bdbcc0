from abc import ABC, abstractmethod
from typing import List, Optional

from searchgear.quotes.models import QuoteRequest, QuoteStatus


class AbstractQuoteRepository(ABC):
    """Interface abstraite pour le repository des demandes de devis."""

    @abstractmethod
    async def get_by_id(self, quote_id: str) -> Optional[QuoteRequest]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, quote: QuoteRequest) -> QuoteRequest:
        """Persiste une nouvelle demande de devis."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, quote: QuoteRequest) -> QuoteRequest:
        """Persiste les modifications d'une demande existante."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[QuoteRequest]:
        """Liste les demandes d'un client, les plus récentes en premier."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(self, status: Optional[QuoteStatus] = None) -> List[QuoteRequest]:
        """Liste toutes les demandes, filtrées par statut, les plus récentes en premier."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, quote: QuoteRequest) -> None:
        raise NotImplementedError
