"""
Dépendances FastAPI pour l'authentification.

Fournit le service d'authentification, l'utilisateur courant à partir du
token JWT et la vérification des droits admin.
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from searchgear.auth.config import OAUTH2_TOKEN_URL
from searchgear.auth.exceptions import TokenMissingException, TokenInvalidException, PermissionDeniedException
from searchgear.auth.service import AuthService
from searchgear.users.dependencies import UserRepositoryDep
from searchgear.users.models import UserRead

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=OAUTH2_TOKEN_URL, auto_error=False)


def get_auth_service(user_repository: UserRepositoryDep) -> AuthService:
    """Fournit une instance du service d'authentification."""
    return AuthService(user_repository=user_repository)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    auth_service: AuthServiceDep,
) -> UserRead:
    """Vérifie le token JWT et retourne l'utilisateur courant."""
    if token is None:
        logger.warning("Token manquant dans la requête.")
        raise TokenMissingException()

    user = await auth_service.get_user_from_token(token)
    if user is None:
        logger.warning("Token invalide ou utilisateur non trouvé.")
        raise TokenInvalidException()

    logger.debug(f"Utilisateur authentifié: ID {user.id}")
    return user


async def get_current_admin_user(
    current_user: Annotated[UserRead, Depends(get_current_user)]
) -> UserRead:
    """Vérifie que l'utilisateur courant est un administrateur."""
    if not current_user.is_admin:
        logger.warning(f"Tentative d'accès à une ressource admin par un utilisateur non-admin: ID {current_user.id}")
        raise PermissionDeniedException()
    return current_user


CurrentUserDep = Annotated[UserRead, Depends(get_current_user)]
AdminUserDep = Annotated[UserRead, Depends(get_current_admin_user)]
