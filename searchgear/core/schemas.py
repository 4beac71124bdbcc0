from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

T = TypeVar("T")

# Type d'erreur de validation dont le message est renvoyé tel quel au client
BUSINESS_RULE_ERROR = "business_rule"


def business_rule_error(message: str) -> PydanticCustomError:
    """Erreur de validation pydantic portant un message métier destiné au client."""
    return PydanticCustomError(BUSINESS_RULE_ERROR, message)


class CamelModel(BaseModel):
    """Schéma API : champs snake_case côté Python, camelCase côté JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accepter aussi les noms snake_case en entrée
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Enveloppe commune des réponses réussies."""
    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[T] = None
    warning: Optional[str] = None


class ErrorResponse(BaseModel):
    """Enveloppe des réponses en erreur."""
    success: bool = False
    message: str
    detail: Optional[Any] = None
