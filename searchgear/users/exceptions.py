"""Exceptions spécifiques au module User."""
from searchgear.core.exceptions import ConflictException


class EmailAlreadyRegisteredException(ConflictException):
    """Levée lorsqu'un compte existe déjà pour cet email."""
    def __init__(self, email: str):
        super().__init__(f"An account with email {email} already exists")
        self.email = email
