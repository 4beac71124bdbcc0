from sqlmodel import SQLModel


class Token(SQLModel):
    """Schéma pour la réponse du token d'accès."""
    access_token: str
    token_type: str
