from abc import ABC, abstractmethod
from typing import Dict, Optional


class AbstractEmailSender(ABC):
    """Interface abstraite pour un transport d'envoi d'e-mails."""

    @abstractmethod
    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """Envoie un email à un destinataire unique.

        Args:
            recipient_email: Adresse email du destinataire.
            subject: Sujet de l'email.
            html_content: Contenu HTML de l'email.
            text_content: Version texte brut (repli pour les clients sans HTML).
            headers: En-têtes supplémentaires.

        Returns:
            Le Message-ID attribué au message envoyé.

        Raises:
            EmailSendingException: Si le transport échoue.
        """
        raise NotImplementedError
