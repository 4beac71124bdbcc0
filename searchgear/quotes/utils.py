"""
Utilitaires de validation des demandes de devis.

Les règles métier sont vérifiées ici, explicitement, avant toute écriture.
"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from searchgear.quotes.constants import BUS_CAPACITY
from searchgear.quotes.exceptions import (
    BusCapacityExceededException,
    DepartureDateInPastException,
    InvalidEstimatedPriceException,
)
from searchgear.quotes.models import BusType, QuoteRequest, QuoteStatus


def bus_capacity(bus_type: BusType) -> int:
    """Retourne le nombre de places du type de bus."""
    return BUS_CAPACITY[BusType(bus_type).value]


def validate_passenger_capacity(number_of_passengers: int, bus_type: BusType) -> None:
    capacity = bus_capacity(bus_type)
    if number_of_passengers > capacity:
        raise BusCapacityExceededException(number_of_passengers, capacity)


def validate_departure_date(departure_date: date, today: Optional[date] = None) -> None:
    """La date de départ doit être aujourd'hui ou plus tard (comparaison sur la date seule)."""
    today = today or date.today()
    if departure_date < today:
        raise DepartureDateInPastException()


def validate_estimated_price(estimated_price: Optional[Decimal]) -> Decimal:
    """
    Valide le prix d'une cotation.

    Returns:
        Decimal: Le prix validé (strictement positif)

    Raises:
        InvalidEstimatedPriceException: Si le prix est absent, nul, négatif ou non numérique
    """
    if estimated_price is None:
        raise InvalidEstimatedPriceException()
    try:
        price = Decimal(estimated_price)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidEstimatedPriceException()
    if not price.is_finite() or price <= 0:
        raise InvalidEstimatedPriceException()
    return price


def pricing_snapshot(quote: QuoteRequest) -> Dict[str, Any]:
    """Instantané JSON des champs de cotation, pour le journal d'audit."""
    return {
        "status": QuoteStatus(quote.status).value,
        "estimatedPrice": float(quote.estimated_price) if quote.estimated_price is not None else None,
        "adminNotes": quote.admin_notes,
    }
