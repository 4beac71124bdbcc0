"""
Modèles du journal d'audit des devis (QuotationHistory).

Une entrée par tentative de transition, y compris les envois d'email
échoués. Les entrées ne sont jamais modifiées ni supprimées.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field as PydanticField
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from searchgear.core.schemas import CamelModel
from searchgear.users.models import utc_now


class HistoryAction(str, Enum):
    PRICE_UPDATED = "price_updated"
    EMAIL_SENT = "email_sent"
    QUOTE_UPDATED = "quote_updated"
    QUOTE_APPROVED = "quote_approved"
    QUOTE_REJECTED = "quote_rejected"


class QuotationHistory(SQLModel, table=True):
    """Entrée d'audit. Pas de clé étrangère : l'historique survit à la suppression du devis."""
    __tablename__ = "quotation_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_request_id: str = Field(index=True, max_length=32)
    performed_by: str = Field(index=True, max_length=32)
    action: HistoryAction
    previous_state: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    new_state: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    # 'metadata' est réservé par SQLAlchemy côté attribut, pas côté colonne
    event_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)


class QuotationHistoryCreate(CamelModel):
    quote_request_id: str
    performed_by: str
    action: HistoryAction
    previous_state: Dict[str, Any] = PydanticField(default_factory=dict)
    new_state: Dict[str, Any] = PydanticField(default_factory=dict)
    event_metadata: Dict[str, Any] = PydanticField(default_factory=dict)


class QuotationHistoryRead(CamelModel):
    id: int
    quote_request_id: str
    performed_by: str
    action: HistoryAction
    previous_state: Dict[str, Any]
    new_state: Dict[str, Any]
    event_metadata: Dict[str, Any] = PydanticField(
        default_factory=dict,
        validation_alias=AliasChoices("event_metadata", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
