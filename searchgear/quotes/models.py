"""
Modèles SQLModel pour les demandes de devis (QuoteRequest).

- QuoteRequest : modèle de table.
- QuoteRequestCreate, QuoteRequestRead, QuotePricingUpdate,
  QuotationSubmit, QuotationSubmitResult, QuoteDecision : schémas API.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import ConfigDict, Field as PydanticField, ValidationError, computed_field, field_validator
from sqlmodel import SQLModel, Field, Relationship

from searchgear.core.schemas import CamelModel, business_rule_error
from searchgear.quotes.constants import (
    INVALID_ESTIMATED_PRICE_MSG,
    MAX_SPECIAL_REQUESTS_LENGTH,
    NULL_STATUS_MSG,
    QUOTE_NUMBER_PREFIX,
)
from searchgear.users.models import CustomerSummary, User, generate_id, utc_now


class BusType(str, Enum):
    SEATER_49 = "49-seater"
    SEATER_60 = "60-seater"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    QUOTED = "quoted"
    APPROVED = "approved"
    REJECTED = "rejected"


def format_quote_number(quote_id: str) -> str:
    return f"{QUOTE_NUMBER_PREFIX}{quote_id[-8:].upper()}"


# ----- Modèle de Table -----
class QuoteRequest(SQLModel, table=True):
    """Demande de devis d'un client pour une location de bus."""
    __tablename__ = "quote_requests"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)
    pickup_location: str = Field(max_length=255)
    dropoff_location: str = Field(max_length=255)
    number_of_days: int
    bus_type: BusType
    number_of_passengers: int
    departure_date: date = Field(index=True)
    special_requests: Optional[str] = Field(default=None, max_length=MAX_SPECIAL_REQUESTS_LENGTH)
    status: QuoteStatus = Field(default=QuoteStatus.PENDING, index=True)
    estimated_price: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    admin_notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    # Chargé avec chaque devis (selectin) : les lectures async ne peuvent pas charger à la demande
    customer: Optional[User] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def quote_number(self) -> str:
        return format_quote_number(self.id)


# ----- Schémas API -----
class QuoteRequestCreate(CamelModel):
    """Schéma de création d'une demande de devis par un client."""
    model_config = ConfigDict(str_strip_whitespace=True)

    pickup_location: str = PydanticField(..., min_length=1, max_length=255)
    dropoff_location: str = PydanticField(..., min_length=1, max_length=255)
    number_of_days: int = PydanticField(..., ge=1)
    bus_type: BusType
    number_of_passengers: int = PydanticField(..., ge=1)
    departure_date: date
    special_requests: Optional[str] = PydanticField(default=None, max_length=MAX_SPECIAL_REQUESTS_LENGTH)


class QuoteRequestRead(CamelModel):
    """Schéma de lecture d'une demande de devis."""
    id: str
    user_id: str
    pickup_location: str
    dropoff_location: str
    number_of_days: int
    bus_type: BusType
    number_of_passengers: int
    departure_date: date
    special_requests: Optional[str] = None
    status: QuoteStatus
    estimated_price: Optional[float] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None

    @computed_field(alias="quoteNumber")
    @property
    def quote_number(self) -> str:
        return format_quote_number(self.id)


class QuotePricingUpdate(CamelModel):
    """Mise à jour partielle par un admin : seuls les champs fournis changent."""
    status: Optional[QuoteStatus] = None
    estimated_price: Optional[Decimal] = PydanticField(default=None, ge=0)
    admin_notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value: Optional[QuoteStatus]) -> QuoteStatus:
        # Appelé seulement si 'status' est fourni : un null explicite est refusé
        if value is None:
            raise business_rule_error(NULL_STATUS_MSG)
        return value


class QuotationSubmit(CamelModel):
    """Soumission d'une cotation. Le prix est validé par le service (message métier)."""
    estimated_price: Optional[Decimal] = None
    admin_notes: Optional[str] = None

    @field_validator("estimated_price", mode="wrap")
    @classmethod
    def price_must_be_numeric(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            raise business_rule_error(INVALID_ESTIMATED_PRICE_MSG)


class QuotationSubmitResult(CamelModel):
    quote: QuoteRequestRead
    email_sent: bool
    email_message_id: Optional[str] = None
    email_error: Optional[str] = None


class QuoteDecision(CamelModel):
    """Décision du client (ou d'un admin) sur une cotation."""
    decision: Literal["approved", "rejected"]
    comment: Optional[str] = PydanticField(default=None, max_length=500)
