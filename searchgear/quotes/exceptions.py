"""Exceptions spécifiques au module Quote."""
from searchgear.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from searchgear.quotes.constants import INVALID_ESTIMATED_PRICE_MSG


class QuoteNotFoundException(NotFoundException):
    """Levée lorsqu'une demande de devis n'est pas trouvée."""
    def __init__(self, quote_id: str):
        super().__init__("Quote request not found")
        self.quote_id = quote_id


class QuoteAccessForbiddenException(ForbiddenException):
    """L'acteur n'est ni le propriétaire du devis ni un admin."""
    def __init__(self):
        super().__init__("Not authorized to access this quote request")


class BusCapacityExceededException(ValidationException):
    def __init__(self, number_of_passengers: int, capacity: int):
        super().__init__(f"Number of passengers ({number_of_passengers}) exceeds bus capacity ({capacity})")
        self.number_of_passengers = number_of_passengers
        self.capacity = capacity


class DepartureDateInPastException(ValidationException):
    def __init__(self):
        super().__init__("Departure date must be today or in the future")


class InvalidEstimatedPriceException(ValidationException):
    def __init__(self):
        super().__init__(INVALID_ESTIMATED_PRICE_MSG)


class InvalidQuoteTransitionException(ConflictException):
    """Levée lorsqu'une décision est demandée sur un devis qui n'est pas au statut 'quoted'."""
    def __init__(self, current_status: str):
        super().__init__(f"Only quoted requests can be approved or rejected (current status: {current_status})")
        self.current_status = current_status
