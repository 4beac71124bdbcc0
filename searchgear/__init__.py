"""
SearchGear - backend de location de bus charter.

Demandes de devis clients, cotations envoyées par email, réservations
et suivi des paiements/annulations.
"""

__version__ = "1.0.0"
