"""
Schémas du module email.

`EmailDeliveryResult` est la valeur de retour de la passerelle de notification :
un échec de livraison est une donnée, jamais une exception.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class QuoteEmailDetails(BaseModel):
    """Détails du trajet affichés dans l'email de cotation."""
    pickup_location: str
    dropoff_location: str
    departure_date: date
    number_of_days: int = Field(..., ge=1)
    bus_type: str
    number_of_passengers: int = Field(..., ge=1)


class QuotationEmailData(BaseModel):
    """Données nécessaires à l'envoi d'une cotation."""
    to: EmailStr
    customer_name: str
    quote_number: str
    quote_details: QuoteEmailDetails
    price: Decimal = Field(..., gt=0, description="Prix par jour")
    admin_notes: Optional[str] = None


class EmailDeliveryResult(BaseModel):
    """Issue d'une tentative d'envoi."""
    delivered: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.delivered

    @classmethod
    def sent(cls, message_id: str) -> "EmailDeliveryResult":
        return cls(delivered=True, message_id=message_id)

    @classmethod
    def failed(cls, error: str) -> "EmailDeliveryResult":
        return cls(delivered=False, error=error)
