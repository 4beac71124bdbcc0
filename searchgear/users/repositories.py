import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.users.exceptions import EmailAlreadyRegisteredException
from searchgear.users.interfaces import AbstractUserRepository
from searchgear.users.models import User

logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(AbstractUserRepository):
    """Implémentation SQLAlchemy du dépôt des utilisateurs."""

    def __init__(self, session: AsyncSession):
        self.db = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        logger.debug(f"[UserRepo] Récupération User ID: {user_id}")
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"[UserRepo] Récupération User par email: {email}")
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalars().one_or_none()

    async def add(self, user: User) -> User:
        user.email = user.email.lower()
        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[UserRepo] Erreur d'intégrité lors de l'ajout (email déjà existant?): {user.email} - {e}")
            raise EmailAlreadyRegisteredException(user.email)
        logger.info(f"[UserRepo] Utilisateur ajouté ID: {user.id} pour email: {user.email}")
        return user
