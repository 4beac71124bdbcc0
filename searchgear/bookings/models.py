"""
Modèles SQLModel pour les réservations (Booking).

Une réservation est une copie figée du trajet d'un devis approuvé : les
modifications ultérieures du devis ne s'y propagent pas.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field as PydanticField, computed_field, field_validator
from sqlmodel import SQLModel, Field, Relationship

from searchgear.bookings.constants import BOOKING_NUMBER_PREFIX, NULL_STATUS_MSG
from searchgear.core.schemas import CamelModel, business_rule_error
from searchgear.quotes.models import BusType
from searchgear.users.models import CustomerSummary, User, generate_id, utc_now


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class BookingType(str, Enum):
    QUOTATION = "quotation"
    CONFIRMED = "confirmed"
    PAID = "paid"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank-transfer"
    CREDIT_CARD = "credit-card"
    GCASH = "gcash"
    PAYMAYA = "paymaya"


ACTIVE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS)


def format_booking_number(booking_id: str) -> str:
    return f"{BOOKING_NUMBER_PREFIX}{booking_id[-8:].upper()}"


# ----- Modèle de Table -----
class Booking(SQLModel, table=True):
    """Réservation créée à partir d'un devis approuvé."""
    __tablename__ = "bookings"

    id: str = Field(default_factory=generate_id, primary_key=True, max_length=32)
    # Une seule réservation par devis, garantie par la contrainte d'unicité
    quote_request_id: str = Field(unique=True, index=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=32)

    pickup_location: str = Field(max_length=255)
    dropoff_location: str = Field(max_length=255)
    departure_date: date = Field(index=True)
    return_date: Optional[date] = Field(default=None)
    number_of_days: int
    bus_type: BusType
    number_of_passengers: int

    price_per_day: Decimal = Field(max_digits=12, decimal_places=2)
    total_price: Decimal = Field(max_digits=14, decimal_places=2)

    status: BookingStatus = Field(default=BookingStatus.CONFIRMED, index=True)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)
    booking_type: BookingType = Field(default=BookingType.QUOTATION, index=True)

    payment_method: Optional[PaymentMethod] = Field(default=None)
    payment_date: Optional[datetime] = Field(default=None)
    invoice_number: Optional[str] = Field(default=None, max_length=100)

    cancellation_reason: Optional[str] = Field(default=None)
    cancelled_at: Optional[datetime] = Field(default=None)
    cancelled_by: Optional[str] = Field(default=None, max_length=32)

    special_requests: Optional[str] = Field(default=None)
    admin_notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    customer: Optional[User] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def booking_number(self) -> str:
        return format_booking_number(self.id)


# ----- Schémas API -----
class BookingCreate(CamelModel):
    """Création d'une réservation depuis un devis approuvé."""
    quote_request_id: str = PydanticField(..., min_length=1)
    return_date: Optional[date] = None


class BookingStatusUpdate(CamelModel):
    status: Optional[BookingStatus] = None
    admin_notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value: Optional[BookingStatus]) -> BookingStatus:
        if value is None:
            raise business_rule_error(NULL_STATUS_MSG)
        return value


class BookingPaymentUpdate(CamelModel):
    payment_method: Optional[PaymentMethod] = None
    invoice_number: Optional[str] = PydanticField(default=None, max_length=100)
    payment_date: Optional[datetime] = None


class BookingCancel(CamelModel):
    reason: Optional[str] = PydanticField(default=None, max_length=1000)


class BookingRead(CamelModel):
    """Schéma de lecture d'une réservation, avec les champs dérivés."""
    id: str
    quote_request_id: str
    user_id: str
    pickup_location: str
    dropoff_location: str
    departure_date: date
    return_date: Optional[date] = None
    number_of_days: int
    bus_type: BusType
    number_of_passengers: int
    price_per_day: float
    total_price: float
    status: BookingStatus
    payment_status: PaymentStatus
    booking_type: BookingType
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[datetime] = None
    invoice_number: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    special_requests: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None

    @computed_field(alias="bookingNumber")
    @property
    def booking_number(self) -> str:
        return format_booking_number(self.id)

    @computed_field(alias="isActive")
    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @computed_field(alias="daysUntilDeparture")
    @property
    def days_until_departure(self) -> int:
        return (self.departure_date - date.today()).days


class CalendarEvent(CamelModel):
    """Événement de calendrier pour le planning admin."""
    id: str
    title: str
    start: date
    end: date
    resource: Dict[str, Any]
