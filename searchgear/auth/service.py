"""
Service d'authentification : inscription, connexion et résolution du token.
"""
import logging
from typing import Optional

from searchgear.auth.security import verify_password, decode_access_token, get_password_hash
from searchgear.users.interfaces import AbstractUserRepository
from searchgear.users.models import User, UserCreate, UserRead, UserRole

logger = logging.getLogger(__name__)


class AuthService:
    """Service pour gérer l'authentification des utilisateurs."""

    def __init__(self, user_repository: AbstractUserRepository):
        self.user_repository = user_repository

    async def register_customer(self, user_in: UserCreate) -> UserRead:
        """Crée un compte client ; le rôle admin n'est jamais attribué ici."""
        logger.info(f"[AuthService] Inscription pour: {user_in.email}")
        user = User(
            email=user_in.email,
            first_name=user_in.first_name,
            last_name=user_in.last_name,
            phone=user_in.phone,
            role=UserRole.CUSTOMER,
            password_hash=get_password_hash(user_in.password),
        )
        created = await self.user_repository.add(user)
        return UserRead.model_validate(created)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Retourne le modèle User si l'email et le mot de passe correspondent, sinon None."""
        logger.debug(f"[AuthService] Tentative d'authentification pour: {email}")
        user = await self.user_repository.get_by_email(email)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur non trouvé: {email}")
            return None
        if not verify_password(password, user.password_hash):
            logger.warning(f"[AuthService] Mot de passe incorrect pour: {email}")
            return None
        logger.info(f"[AuthService] Authentification réussie pour: {email} (ID: {user.id})")
        return user

    async def get_user_from_token(self, token: str) -> Optional[UserRead]:
        """Récupère l'utilisateur désigné par un token JWT, ou None."""
        user_id = decode_access_token(token)
        if user_id is None:
            return None
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur ID {user_id} du token non trouvé en base")
            return None
        return UserRead.model_validate(user)
