"""
Modèles SQLModel pour l'entité User.

- User : modèle de table (table=True).
- UserCreate, UserRead, CustomerSummary : schémas API.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field as PydanticField
from sqlmodel import SQLModel, Field

from searchgear.core.schemas import CamelModel


def generate_id() -> str:
    """Identifiant opaque (uuid4 hexadécimal) partagé par toutes les tables."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# ----- Modèle de Table -----
class User(SQLModel, table=True):
    """Modèle de table SQLModel pour les utilisateurs."""
    __tablename__ = "users"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: UserRole = Field(default=UserRole.CUSTOMER)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ----- Schémas API -----
class UserCreate(CamelModel):
    """Schéma pour l'inscription d'un client."""
    email: EmailStr
    password: str = PydanticField(..., min_length=8)
    first_name: str = PydanticField(..., min_length=1, max_length=100)
    last_name: str = PydanticField(..., min_length=1, max_length=100)
    phone: Optional[str] = PydanticField(default=None, max_length=30)


class UserRead(CamelModel):
    """Schéma de lecture d'un utilisateur (jamais de hash de mot de passe)."""
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CustomerSummary(CamelModel):
    """Coordonnées du client jointes aux devis et aux réservations."""
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
