"""
Constantes du module de gestion des demandes de devis.
"""

# Capacité maximale par type de bus
BUS_CAPACITY = {
    "49-seater": 49,
    "60-seater": 60,
}

MAX_SPECIAL_REQUESTS_LENGTH = 500
QUOTE_NUMBER_PREFIX = "QR-"

# Messages de réponse
QUOTE_CREATED_MSG = "Quote request submitted successfully"
QUOTE_UPDATED_MSG = "Quote request updated successfully"
QUOTE_DELETED_MSG = "Quote request deleted successfully"
QUOTATION_SENT_MSG = "Quotation submitted and sent to customer successfully"
QUOTATION_SAVED_EMAIL_FAILED_MSG = "Quotation saved, but email delivery failed"
QUOTATION_EMAIL_WARNING = "The customer was not notified by email. Please contact them directly."

# Messages d'erreur de validation
INVALID_ESTIMATED_PRICE_MSG = "Please provide a valid estimated price"
NULL_STATUS_MSG = "Status cannot be null"
