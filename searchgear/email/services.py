import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jinja2

from searchgear.email.config import EmailSettings, settings
from searchgear.email.exceptions import EmailSendingException, EmailTemplateException
from searchgear.email.formatting import format_currency, format_long_date
from searchgear.email.models import QuotationEmailData, EmailDeliveryResult
from searchgear.email.sender import AbstractEmailSender

logger = logging.getLogger(__name__)

# Configuration du moteur de templates Jinja2
TEMPLATE_DIR = Path(__file__).parent / "templates"

env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=jinja2.select_autoescape(["html", "xml"]),
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
)

# En-têtes de priorité ajoutés aux cotations
PRIORITY_HEADERS = {
    "X-Priority": "1",
    "X-MSMail-Priority": "High",
    "Importance": "high",
}


class EmailService:
    """Passerelle de notification : met en forme et envoie les emails métier.

    Ne lève jamais d'exception de livraison : chaque envoi retourne un
    `EmailDeliveryResult`. Sans transport configuré, tous les envois sont
    rapportés comme non délivrés.
    """

    def __init__(self, email_sender: Optional[AbstractEmailSender], email_settings: EmailSettings = settings):
        self.email_sender = email_sender
        self.settings = email_settings
        logger.info(f"[EmailService] Initialisé (transport: {type(email_sender).__name__ if email_sender else 'aucun'}).")

    def _render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Charge et rend un template Jinja2."""
        try:
            return env.get_template(template_name).render(context)
        except jinja2.TemplateNotFound as e:
            logger.error(f"[EmailService] Template email non trouvé: {template_name} dans {TEMPLATE_DIR}")
            raise EmailTemplateException(f"Email template '{template_name}' not found") from e
        except jinja2.TemplateError as e:
            logger.error(f"[EmailService] Erreur rendu template {template_name}: {e}", exc_info=True)
            raise EmailTemplateException(f"Error rendering email template '{template_name}': {e}") from e

    def render_quotation(self, data: QuotationEmailData) -> Tuple[str, str, str]:
        """Retourne (sujet, html, texte) pour une cotation."""
        details = data.quote_details
        context = {
            "customer_name": data.customer_name,
            "quote_number": data.quote_number,
            "details": details,
            "departure_date": format_long_date(details.departure_date, self.settings),
            "price_per_day": format_currency(data.price, self.settings),
            "total_price": format_currency(data.price * details.number_of_days, self.settings),
            "admin_notes": data.admin_notes or "",
            "currency_code": self.settings.CURRENCY_CODE,
            "company_name": self.settings.DEFAULT_FROM_NAME,
            "contact_email": self.settings.SENDER_EMAIL or "",
            "support_phone": self.settings.SUPPORT_PHONE,
            "validity_days": self.settings.QUOTE_VALIDITY_DAYS,
        }
        subject = f"Your Bus Charter Quotation - {data.quote_number}"
        html_content = self._render_template("quotation_email.html", context)
        text_content = self._render_template("quotation_email.txt", context).strip()
        return subject, html_content, text_content

    async def send_quotation_email(self, data: QuotationEmailData) -> EmailDeliveryResult:
        """Envoie la cotation au client et retourne l'issue de l'envoi."""
        logger.info(f"[EmailService] Préparation email cotation {data.quote_number} pour {data.to}")

        if self.email_sender is None:
            logger.error(f"[EmailService] Aucun transport email configuré, cotation {data.quote_number} non envoyée.")
            return EmailDeliveryResult.failed("Email transport is not configured")

        try:
            subject, html_content, text_content = self.render_quotation(data)
            message_id = await self.email_sender.send_email(
                recipient_email=data.to,
                subject=subject,
                html_content=html_content,
                text_content=text_content,
                headers=PRIORITY_HEADERS,
            )
        except (EmailSendingException, EmailTemplateException) as e:
            logger.error(f"[EmailService] Erreur lors de l'envoi email cotation {data.quote_number} à {data.to}: {e}", exc_info=True)
            return EmailDeliveryResult.failed(str(e))

        logger.info(f"[EmailService] Email cotation {data.quote_number} envoyé à {data.to} ({message_id})")
        return EmailDeliveryResult.sent(message_id)
