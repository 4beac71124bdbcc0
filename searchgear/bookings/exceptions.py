"""Exceptions spécifiques au module Booking."""
from searchgear.core.exceptions import ConflictException, NotFoundException, ValidationException


class BookingNotFoundException(NotFoundException):
    def __init__(self, booking_id: str):
        super().__init__("Booking not found")
        self.booking_id = booking_id


class QuoteNotApprovedException(ValidationException):
    """Levée lorsqu'on tente de réserver un devis qui n'est pas approuvé."""
    def __init__(self, current_status: str):
        super().__init__("Quote must be approved before creating booking")
        self.current_status = current_status


class BookingAlreadyExistsException(ConflictException):
    def __init__(self, quote_request_id: str):
        super().__init__("Booking already exists for this quotation")
        self.quote_request_id = quote_request_id


class BookingAlreadyCancelledException(ConflictException):
    def __init__(self, booking_id: str):
        super().__init__("Booking is already cancelled")
        self.booking_id = booking_id


class InvalidDateRangeException(ValidationException):
    """Bornes de calendrier manquantes ou inversées."""
    pass
