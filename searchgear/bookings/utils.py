"""
Utilitaires pour le module de gestion des réservations.
"""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Tuple

from searchgear.bookings.constants import RETURN_BEFORE_DEPARTURE_MSG
from searchgear.bookings.exceptions import InvalidDateRangeException


def compute_return_date(departure_date: date, number_of_days: int, return_date: Optional[date] = None) -> date:
    """
    Calcule la date de retour d'une réservation.

    Args:
        departure_date: Date de départ
        number_of_days: Durée de la location en jours
        return_date: Date de retour fournie explicitement (conservée telle quelle)

    Returns:
        date: La date fournie, sinon départ + nombre de jours

    Raises:
        InvalidDateRangeException: Si la date fournie précède la date de départ
    """
    if return_date is not None:
        if return_date < departure_date:
            raise InvalidDateRangeException(RETURN_BEFORE_DEPARTURE_MSG)
        return return_date
    return departure_date + timedelta(days=number_of_days)


def compute_total_price(price_per_day: Decimal, number_of_days: int) -> Decimal:
    return price_per_day * number_of_days


def as_utc(value: datetime) -> datetime:
    """Une date sans fuseau est considérée comme UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_date_range(start: Optional[date], end: Optional[date]) -> Tuple[date, date]:
    """Vérifie que les deux bornes sont présentes et dans l'ordre."""
    if start is None or end is None:
        raise InvalidDateRangeException("Start and end dates are required")
    if start > end:
        raise InvalidDateRangeException("Start date must be before end date")
    return start, end
