import logging
from typing import Annotated, Optional

from fastapi import Depends, Request

from searchgear.email.config import EmailSettings
from searchgear.email.exceptions import EmailConfigurationException
from searchgear.email.sender import AbstractEmailSender
from searchgear.email.services import EmailService
from searchgear.email.smtp_sender import SmtpEmailSender

logger = logging.getLogger(__name__)


def build_email_sender(email_settings: EmailSettings) -> Optional[AbstractEmailSender]:
    """Construit le transport SMTP une seule fois, au démarrage de l'application.

    Retourne None si la configuration est incomplète : l'application démarre
    quand même et les cotations sont enregistrées sans email.
    """
    try:
        return SmtpEmailSender.from_settings(email_settings)
    except EmailConfigurationException as e:
        logger.critical(f"Service email indisponible, vérifier les variables EMAIL_*: {e}")
        return None


def get_email_sender(request: Request) -> Optional[AbstractEmailSender]:
    """Fournit le transport construit au démarrage (stocké dans app.state)."""
    return getattr(request.app.state, "email_sender", None)


EmailSenderDep = Annotated[Optional[AbstractEmailSender], Depends(get_email_sender)]


def get_email_service(email_sender: EmailSenderDep) -> EmailService:
    """Injecte le transport et fournit une instance de EmailService."""
    return EmailService(email_sender=email_sender)


EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
