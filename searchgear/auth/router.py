"""
Routes API pour l'authentification.

- /register : inscription d'un client
- /token : connexion et obtention d'un token JWT
- /me : informations de l'utilisateur connecté
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from searchgear.auth.dependencies import AuthServiceDep, CurrentUserDep
from searchgear.auth.exceptions import InvalidCredentialsException
from searchgear.auth.models import Token
from searchgear.auth.security import create_access_token
from searchgear.core.schemas import ApiResponse
from searchgear.users.exceptions import EmailAlreadyRegisteredException
from searchgear.users.models import UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, auth_service: AuthServiceDep):
    """Inscrit un nouveau client."""
    try:
        user = await auth_service.register_customer(user_in)
    except EmailAlreadyRegisteredException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="User registered successfully", data=user)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDep,
):
    """
    Authentifie l'utilisateur et retourne un token JWT.

    - **username**: Email de l'utilisateur
    - **password**: Mot de passe de l'utilisateur
    """
    logger.info("[Router] Tentative de login pour: %s", form_data.username)
    user = await auth_service.authenticate_user(email=form_data.username, password=form_data.password)
    if not user:
        raise InvalidCredentialsException()

    access_token = create_access_token(data={"sub": user.id, "role": user.role.value})
    logger.info("[Router] Token créé pour user ID: %s", user.id)
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=ApiResponse[UserRead])
async def read_users_me(current_user: CurrentUserDep):
    """Retourne l'utilisateur actuellement connecté."""
    return ApiResponse(data=current_user)


auth_router = router
