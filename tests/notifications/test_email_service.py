from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI

from searchgear.email.config import EmailSettings
from searchgear.email.dependencies import build_email_sender, get_email_sender, get_email_service
from searchgear.email.exceptions import EmailSendingException
from searchgear.email.formatting import format_currency, format_long_date
from searchgear.email.models import QuotationEmailData, QuoteEmailDetails
from searchgear.email.sender import AbstractEmailSender
from searchgear.email.services import EmailService
from searchgear.email.smtp_sender import SmtpEmailSender


@pytest.fixture
def mock_email_sender():
    """Fixture pour un mock de l'email sender."""
    sender = AsyncMock(spec=AbstractEmailSender)
    sender.send_email.return_value = "<abc@searchgear.test>"
    return sender


@pytest.fixture
def email_service(mock_email_sender):
    return EmailService(email_sender=mock_email_sender, email_settings=EmailSettings(SENDER_EMAIL="quotes@searchgear.test"))


@pytest.fixture
def quotation_data():
    return QuotationEmailData(
        to="juan@example.com",
        customer_name="Juan Dela Cruz",
        quote_number="QR-1A2B3C4D",
        quote_details=QuoteEmailDetails(
            pickup_location="Manila",
            dropoff_location="Baguio",
            departure_date=date(2030, 3, 4),
            number_of_days=3,
            bus_type="49-seater",
            number_of_passengers=45,
        ),
        price=Decimal("15000"),
        admin_notes="AC included\nSnacks <not> included",
    )


def test_format_currency_uses_configured_currency():
    assert format_currency(Decimal("15000"), EmailSettings()) == "₱15,000.00"
    assert format_currency(1234.5, EmailSettings(CURRENCY_SYMBOL="$")) == "$1,234.50"


def test_format_long_date():
    assert format_long_date(date(2030, 3, 4), EmailSettings()) == "Monday, March 04, 2030"


def test_render_quotation(email_service, quotation_data):
    subject, html_content, text_content = email_service.render_quotation(quotation_data)

    assert subject == "Your Bus Charter Quotation - QR-1A2B3C4D"
    assert "₱15,000.00" in html_content
    assert "₱45,000.00" in html_content
    assert "Manila" in text_content and "Baguio" in text_content
    assert "₱45,000.00" in text_content
    assert "Monday, March 04, 2030" in text_content
    # Les notes admin sont échappées dans le HTML
    assert "&lt;not&gt;" in html_content
    assert "$" not in text_content


async def test_send_quotation_email_success(email_service, mock_email_sender, quotation_data):
    result = await email_service.send_quotation_email(quotation_data)

    assert result.delivered is True
    assert result.success is True
    assert result.message_id == "<abc@searchgear.test>"
    assert result.error is None
    kwargs = mock_email_sender.send_email.call_args.kwargs
    assert kwargs["recipient_email"] == "juan@example.com"
    assert kwargs["subject"] == "Your Bus Charter Quotation - QR-1A2B3C4D"
    assert kwargs["text_content"]
    assert kwargs["headers"]["X-Priority"] == "1"


async def test_send_quotation_email_failure_returned_as_result(email_service, mock_email_sender, quotation_data):
    mock_email_sender.send_email.side_effect = EmailSendingException("Mail server timed out")

    result = await email_service.send_quotation_email(quotation_data)

    assert result.delivered is False
    assert result.message_id is None
    assert "Mail server timed out" in result.error


async def test_send_quotation_email_without_transport(quotation_data):
    service = EmailService(email_sender=None)

    result = await service.send_quotation_email(quotation_data)

    assert result.delivered is False
    assert result.error == "Email transport is not configured"


def test_build_email_sender_returns_none_on_incomplete_config():
    assert build_email_sender(EmailSettings(SENDER_EMAIL=None, SENDER_PASSWORD=None)) is None


def test_build_email_sender_from_settings():
    sender = build_email_sender(EmailSettings(SENDER_EMAIL="quotes@searchgear.test", SENDER_PASSWORD="pw"))
    assert isinstance(sender, SmtpEmailSender)


def test_get_email_sender_reads_app_state(mock_email_sender):
    app = FastAPI()
    app.state.email_sender = mock_email_sender
    request = Mock()
    request.app = app

    assert get_email_sender(request) is mock_email_sender
    assert isinstance(get_email_service(email_sender=mock_email_sender), EmailService)
