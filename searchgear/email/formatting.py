"""Formatage des montants et des dates selon la configuration du déploiement."""
from datetime import date
from decimal import Decimal
from typing import Union

from searchgear.email.config import EmailSettings, settings

Amount = Union[Decimal, float, int]


def format_currency(amount: Amount, email_settings: EmailSettings = settings) -> str:
    """Ex: 15000 -> '₱15,000.00' avec la devise configurée."""
    return f"{email_settings.CURRENCY_SYMBOL}{Decimal(str(amount)):,.2f}"


def format_long_date(value: date, email_settings: EmailSettings = settings) -> str:
    """Ex: date(2026, 11, 2) -> 'Monday, November 02, 2026'."""
    return value.strftime(email_settings.DATE_FORMAT)
