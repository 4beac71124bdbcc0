from abc import ABC, abstractmethod
from typing import Optional

from searchgear.users.models import User


class AbstractUserRepository(ABC):
    """Interface abstraite pour le repository des utilisateurs."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Récupère un utilisateur par son ID."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Récupère un utilisateur par son email."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persiste un nouvel utilisateur."""
        raise NotImplementedError
