"""
Taxonomie des exceptions métier partagée par tous les modules.

Chaque module définit ses exceptions spécifiques en héritant d'une des quatre
catégories ci-dessous ; les routeurs s'appuient sur `status_code` pour
construire la réponse HTTP.
"""
from fastapi import status


class SearchGearException(Exception):
    """Classe de base pour les exceptions métier de l'application."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(SearchGearException):
    """Donnée manquante ou invalide, ou règle métier violée."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(SearchGearException):
    """L'identifiant ne correspond à aucune ressource."""
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenException(SearchGearException):
    """L'acteur n'a pas de droits sur la ressource."""
    status_code = status.HTTP_403_FORBIDDEN


class ConflictException(SearchGearException):
    """L'opération entre en conflit avec l'état courant de la ressource."""
    status_code = status.HTTP_409_CONFLICT
