"""Exceptions spécifiques au journal d'audit."""


class AuditLogException(Exception):
    """Levée lorsqu'une entrée d'audit ne peut pas être enregistrée."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
