import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Dict, Optional

from fastapi.concurrency import run_in_threadpool

from searchgear.email.config import EmailSettings, settings
from searchgear.email.exceptions import EmailSendingException, EmailConfigurationException
from searchgear.email.sender import AbstractEmailSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(AbstractEmailSender):
    """Implémentation de l'envoi d'email via SMTP standard, avec délais bornés."""

    def __init__(self,
                 smtp_host: str = settings.SMTP_HOST,
                 smtp_port: int = settings.SMTP_PORT,
                 smtp_user: Optional[str] = settings.SENDER_EMAIL,
                 smtp_password: Optional[str] = settings.SENDER_PASSWORD,
                 default_sender: Optional[str] = settings.SENDER_EMAIL,
                 from_name: str = settings.DEFAULT_FROM_NAME,
                 use_tls: bool = settings.USE_TLS,
                 use_ssl: bool = settings.USE_SSL,
                 connection_timeout: float = settings.CONNECTION_TIMEOUT,
                 socket_timeout: float = settings.SOCKET_TIMEOUT):

        if not all([smtp_host, smtp_port, smtp_user, smtp_password, default_sender]):
            logger.error("[SmtpEmailSender] Configuration SMTP incomplète.")
            raise EmailConfigurationException("Configuration SMTP (host, port, user, password, sender) incomplète.")

        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.default_sender = default_sender
        self.from_name = from_name
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.connection_timeout = connection_timeout
        self.socket_timeout = socket_timeout
        logger.info(f"[SmtpEmailSender] Initialisé pour {smtp_host}:{smtp_port}")

    @classmethod
    def from_settings(cls, email_settings: EmailSettings) -> "SmtpEmailSender":
        return cls(
            smtp_host=email_settings.SMTP_HOST,
            smtp_port=email_settings.SMTP_PORT,
            smtp_user=email_settings.SENDER_EMAIL,
            smtp_password=email_settings.SENDER_PASSWORD,
            default_sender=email_settings.SENDER_EMAIL,
            from_name=email_settings.DEFAULT_FROM_NAME,
            use_tls=email_settings.USE_TLS,
            use_ssl=email_settings.USE_SSL,
            connection_timeout=email_settings.CONNECTION_TIMEOUT,
            socket_timeout=email_settings.SOCKET_TIMEOUT,
        )

    def _build_message(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str],
        headers: Optional[Dict[str, str]],
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.from_name, self.default_sender))
        msg["To"] = recipient_email
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.default_sender.rsplit("@", 1)[-1])
        for name, value in (headers or {}).items():
            msg[name] = value

        # Le client affiche la dernière alternative qu'il sait lire : texte d'abord, HTML ensuite
        if text_content:
            msg.attach(MIMEText(text_content, "plain", "utf-8"))
        msg.attach(MIMEText(html_content, "html", "utf-8"))
        return msg

    def _open_connection(self) -> smtplib.SMTP:
        # Le délai de connexion couvre aussi la bannière d'accueil lue dans le constructeur
        if self.use_ssl:
            server = smtplib.SMTP_SSL(
                self.smtp_host, self.smtp_port,
                timeout=self.connection_timeout,
                context=ssl.create_default_context(),
            )
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.connection_timeout)
        if server.sock is not None:
            server.sock.settimeout(self.socket_timeout)
        return server

    def _deliver(self, recipient_email: str, msg: MIMEMultipart) -> None:
        """Envoi bloquant, exécuté dans le threadpool."""
        logger.debug(f"[SmtpEmailSender] Connexion à {self.smtp_host}:{self.smtp_port}")
        with self._open_connection() as server:
            if self.use_tls and not self.use_ssl:
                server.starttls(context=ssl.create_default_context())
            logger.debug(f"[SmtpEmailSender] Authentification avec {self.smtp_user}")
            server.login(self.smtp_user, self.smtp_password)
            server.sendmail(self.default_sender, [recipient_email], msg.as_string())

    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        msg = self._build_message(recipient_email, subject, html_content, text_content, headers)
        message_id = msg["Message-ID"]

        try:
            logger.info(f"[SmtpEmailSender] Envoi de l'email à {recipient_email} (Sujet: {subject})")
            await run_in_threadpool(self._deliver, recipient_email, msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"[SmtpEmailSender] Échec authentification SMTP: {e}", exc_info=True)
            raise EmailSendingException("SMTP authentication failed", original_exception=e)
        except smtplib.SMTPRecipientsRefused as e:
            logger.error(f"[SmtpEmailSender] Destinataire refusé: {recipient_email}. Détails: {e.recipients}", exc_info=True)
            raise EmailSendingException(f"Recipient refused: {recipient_email}", original_exception=e)
        except smtplib.SMTPSenderRefused as e:
            logger.error(f"[SmtpEmailSender] Expéditeur refusé: {self.default_sender}. Détails: {e.sender}", exc_info=True)
            raise EmailSendingException(f"Sender refused: {self.default_sender}", original_exception=e)
        except smtplib.SMTPException as e:
            logger.error(f"[SmtpEmailSender] Erreur SMTP générale lors de l'envoi à {recipient_email}: {e}", exc_info=True)
            raise EmailSendingException("SMTP error", original_exception=e)
        except TimeoutError as e:
            logger.error(f"[SmtpEmailSender] Délai dépassé avec {self.smtp_host}:{self.smtp_port}", exc_info=True)
            raise EmailSendingException("Mail server timed out", original_exception=e)
        except OSError as e:
            logger.error(f"[SmtpEmailSender] Erreur réseau lors de l'envoi à {recipient_email}: {e}", exc_info=True)
            raise EmailSendingException("Mail server unreachable", original_exception=e)

        logger.info(f"[SmtpEmailSender] Email envoyé avec succès à {recipient_email} ({message_id})")
        return message_id
