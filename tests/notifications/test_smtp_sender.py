import smtplib
from unittest.mock import MagicMock, patch

import pytest

from searchgear.email.config import EmailSettings
from searchgear.email.exceptions import EmailConfigurationException, EmailSendingException
from searchgear.email.smtp_sender import SmtpEmailSender


@pytest.fixture
def mock_settings():
    """Fixture pour les paramètres de test."""
    return EmailSettings(
        SMTP_HOST="smtp.test.com",
        SMTP_PORT=587,
        SENDER_EMAIL="quotes@searchgear.test",
        SENDER_PASSWORD="test_password",
        USE_TLS=True,
        CONNECTION_TIMEOUT=3,
        SOCKET_TIMEOUT=7,
    )


@pytest.fixture
def smtp_sender(mock_settings):
    return SmtpEmailSender.from_settings(mock_settings)


def _mock_server(mock_smtp: MagicMock) -> MagicMock:
    server = MagicMock()
    server.__enter__.return_value = server
    mock_smtp.return_value = server
    return server


def test_smtp_sender_initialization(smtp_sender, mock_settings):
    assert smtp_sender.smtp_host == mock_settings.SMTP_HOST
    assert smtp_sender.smtp_port == mock_settings.SMTP_PORT
    assert smtp_sender.smtp_user == mock_settings.SENDER_EMAIL
    assert smtp_sender.connection_timeout == 3
    assert smtp_sender.socket_timeout == 7


def test_smtp_sender_initialization_missing_config():
    """L'initialisation échoue si la configuration est incomplète."""
    with pytest.raises(EmailConfigurationException):
        SmtpEmailSender.from_settings(EmailSettings(SMTP_HOST="smtp.test.com", SENDER_EMAIL=None, SENDER_PASSWORD=None))


async def test_send_email_success(smtp_sender):
    with patch("smtplib.SMTP") as mock_smtp:
        server = _mock_server(mock_smtp)

        message_id = await smtp_sender.send_email(
            recipient_email="customer@example.com",
            subject="Test Subject",
            html_content="<h1>Test</h1>",
            text_content="Test",
            headers={"X-Priority": "1"},
        )

    assert message_id.startswith("<") and message_id.endswith("@searchgear.test>")
    mock_smtp.assert_called_once_with("smtp.test.com", 587, timeout=3)
    server.sock.settimeout.assert_called_once_with(7)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("quotes@searchgear.test", "test_password")
    server.sendmail.assert_called_once()

    sender, recipients, raw_message = server.sendmail.call_args[0]
    assert sender == "quotes@searchgear.test"
    assert recipients == ["customer@example.com"]
    assert "multipart/alternative" in raw_message
    assert "text/plain" in raw_message and "text/html" in raw_message
    assert "X-Priority: 1" in raw_message
    assert message_id in raw_message


async def test_send_email_authentication_error(smtp_sender):
    with patch("smtplib.SMTP") as mock_smtp:
        server = _mock_server(mock_smtp)
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Authentication failed")

        with pytest.raises(EmailSendingException) as exc_info:
            await smtp_sender.send_email("customer@example.com", "Subject", "<p>x</p>")

    assert "authentication" in str(exc_info.value).lower()
    assert isinstance(exc_info.value.original_exception, smtplib.SMTPAuthenticationError)


async def test_send_email_connection_timeout(smtp_sender):
    with patch("smtplib.SMTP", side_effect=TimeoutError("timed out")):
        with pytest.raises(EmailSendingException) as exc_info:
            await smtp_sender.send_email("customer@example.com", "Subject", "<p>x</p>")

    assert "timed out" in str(exc_info.value)


async def test_send_email_connection_refused(smtp_sender):
    with patch("smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
        with pytest.raises(EmailSendingException) as exc_info:
            await smtp_sender.send_email("customer@example.com", "Subject", "<p>x</p>")

    assert "unreachable" in str(exc_info.value)


async def test_send_email_recipient_refused(smtp_sender):
    with patch("smtplib.SMTP") as mock_smtp:
        server = _mock_server(mock_smtp)
        server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({"customer@example.com": (550, b"no such user")})

        with pytest.raises(EmailSendingException) as exc_info:
            await smtp_sender.send_email("customer@example.com", "Subject", "<p>x</p>")

    assert "customer@example.com" in str(exc_info.value)
