import logging
from datetime import date
from typing import List, Optional

from searchgear.bookings.exceptions import (
    BookingAlreadyCancelledException,
    BookingAlreadyExistsException,
    BookingNotFoundException,
    QuoteNotApprovedException,
)
from searchgear.bookings.interfaces import AbstractBookingRepository
from searchgear.bookings.models import (
    Booking,
    BookingCreate,
    BookingPaymentUpdate,
    BookingRead,
    BookingStatus,
    BookingStatusUpdate,
    BookingType,
    CalendarEvent,
    PaymentStatus,
)
from searchgear.bookings.utils import as_utc, compute_return_date, compute_total_price, validate_date_range
from searchgear.quotes.exceptions import InvalidEstimatedPriceException, QuoteNotFoundException
from searchgear.quotes.interfaces import AbstractQuoteRepository
from searchgear.quotes.models import BusType, QuoteStatus
from searchgear.users.models import UserRead, utc_now

logger = logging.getLogger(__name__)


class BookingService:
    """Cycle de vie des réservations : création depuis un devis approuvé, paiement, annulation."""

    def __init__(self, booking_repo: AbstractBookingRepository, quote_repo: AbstractQuoteRepository):
        self.booking_repo = booking_repo
        self.quote_repo = quote_repo

    async def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            logger.warning(f"[BookingService] Réservation ID {booking_id} non trouvée.")
            raise BookingNotFoundException(booking_id)
        return booking

    async def create_from_quotation(self, booking_in: BookingCreate, actor: UserRead) -> BookingRead:
        """
        Crée la réservation d'un devis approuvé en copiant ses données de trajet.

        Raises:
            QuoteNotFoundException: Devis inexistant
            QuoteNotApprovedException: Devis pas au statut 'approved'
            BookingAlreadyExistsException: Une réservation référence déjà ce devis
            InvalidDateRangeException: Date de retour antérieure au départ
        """
        quote_id = booking_in.quote_request_id
        logger.info(f"[BookingService] Création réservation depuis devis {quote_id} par admin {actor.id}")

        quote = await self.quote_repo.get_by_id(quote_id)
        if quote is None:
            raise QuoteNotFoundException(quote_id)
        if quote.status != QuoteStatus.APPROVED:
            logger.warning(f"[BookingService] Devis {quote_id} au statut {quote.status}, réservation refusée.")
            raise QuoteNotApprovedException(QuoteStatus(quote.status).value)
        if quote.estimated_price is None:
            raise InvalidEstimatedPriceException()
        if await self.booking_repo.exists_for_quote(quote_id):
            logger.warning(f"[BookingService] Réservation déjà existante pour devis {quote_id}.")
            raise BookingAlreadyExistsException(quote_id)

        booking = Booking(
            quote_request_id=quote.id,
            user_id=quote.user_id,
            pickup_location=quote.pickup_location,
            dropoff_location=quote.dropoff_location,
            departure_date=quote.departure_date,
            return_date=compute_return_date(quote.departure_date, quote.number_of_days, booking_in.return_date),
            number_of_days=quote.number_of_days,
            bus_type=quote.bus_type,
            number_of_passengers=quote.number_of_passengers,
            price_per_day=quote.estimated_price,
            total_price=compute_total_price(quote.estimated_price, quote.number_of_days),
            status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PENDING,
            booking_type=BookingType.CONFIRMED,
            special_requests=quote.special_requests,
            admin_notes=quote.admin_notes,
        )
        created = await self.booking_repo.add(booking)
        logger.info(f"[BookingService] Réservation {created.booking_number} créée (total: {created.total_price})")
        return BookingRead.model_validate(created)

    async def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        booking_type: Optional[BookingType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[BookingRead]:
        bookings = await self.booking_repo.list_filtered(
            status=status,
            payment_status=payment_status,
            booking_type=booking_type,
            start_date=start_date,
            end_date=end_date,
        )
        return [BookingRead.model_validate(b) for b in bookings]

    async def calendar_events(self, start: Optional[date], end: Optional[date]) -> List[CalendarEvent]:
        """Réservations au départ dans [start, end], mises en forme pour le calendrier."""
        start, end = validate_date_range(start, end)
        rows = await self.booking_repo.list_with_customers(start, end)
        events = []
        for booking, customer in rows:
            booking_read = BookingRead.model_validate(booking)
            events.append(CalendarEvent(
                id=booking.id,
                title=f"{customer.first_name} {customer.last_name} - {BusType(booking.bus_type).value}",
                start=booking.departure_date,
                end=booking.return_date or booking.departure_date,
                resource={
                    "bookingType": booking_read.booking_type.value,
                    "status": booking_read.status.value,
                    "paymentStatus": booking_read.payment_status.value,
                    "booking": booking_read.model_dump(mode="json", by_alias=True),
                },
            ))
        logger.debug(f"[BookingService] {len(events)} événements calendrier entre {start} et {end}")
        return events

    async def get_booking(self, booking_id: str) -> BookingRead:
        booking = await self._get_booking_or_404(booking_id)
        return BookingRead.model_validate(booking)

    async def update_status(self, booking_id: str, update_in: BookingStatusUpdate) -> BookingRead:
        """Mise à jour partielle du statut et des notes admin."""
        booking = await self._get_booking_or_404(booking_id)
        for field, value in update_in.model_dump(exclude_unset=True).items():
            setattr(booking, field, value)
        booking = await self.booking_repo.save(booking)
        logger.info(f"[BookingService] Réservation {booking_id} mise à jour (statut: {booking.status})")
        return BookingRead.model_validate(booking)

    async def mark_as_paid(self, booking_id: str, payment_in: BookingPaymentUpdate) -> BookingRead:
        booking = await self._get_booking_or_404(booking_id)
        booking.payment_status = PaymentStatus.PAID
        booking.booking_type = BookingType.PAID
        booking.payment_method = payment_in.payment_method
        booking.invoice_number = payment_in.invoice_number
        booking.payment_date = as_utc(payment_in.payment_date) if payment_in.payment_date else utc_now()
        booking = await self.booking_repo.save(booking)
        logger.info(f"[BookingService] Réservation {booking_id} marquée payée ({booking.payment_method})")
        return BookingRead.model_validate(booking)

    async def cancel(self, booking_id: str, actor: UserRead, reason: Optional[str] = None) -> BookingRead:
        """Annule une réservation ; une réservation déjà annulée est refusée."""
        booking = await self._get_booking_or_404(booking_id)
        if booking.status == BookingStatus.CANCELLED:
            logger.warning(f"[BookingService] Réservation {booking_id} déjà annulée.")
            raise BookingAlreadyCancelledException(booking_id)

        booking.status = BookingStatus.CANCELLED
        booking.cancellation_reason = reason
        booking.cancelled_at = utc_now()
        booking.cancelled_by = actor.id
        booking = await self.booking_repo.save(booking)
        logger.info(f"[BookingService] Réservation {booking_id} annulée par {actor.id}")
        return BookingRead.model_validate(booking)

    async def delete_booking(self, booking_id: str, actor: UserRead) -> None:
        booking = await self._get_booking_or_404(booking_id)
        await self.booking_repo.delete(booking)
        logger.info(f"[BookingService] Réservation {booking_id} supprimée par admin {actor.id}")
