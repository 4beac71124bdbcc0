"""
Constantes du module de gestion des réservations.
"""
BOOKING_NUMBER_PREFIX = "BK-"

BOOKING_CREATED_MSG = "Booking created successfully"
BOOKING_UPDATED_MSG = "Booking updated successfully"
BOOKING_PAID_MSG = "Booking marked as paid"
BOOKING_CANCELLED_MSG = "Booking cancelled successfully"
BOOKING_DELETED_MSG = "Booking deleted successfully"

# Messages d'erreur de validation
NULL_STATUS_MSG = "Status cannot be null"
RETURN_BEFORE_DEPARTURE_MSG = "Return date cannot be before departure date"
