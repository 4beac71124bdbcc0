from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from searchgear.bookings.models import Booking, BookingStatus, BookingType, PaymentStatus
from searchgear.users.models import User


class AbstractBookingRepository(ABC):
    """Interface abstraite pour le repository des réservations."""

    @abstractmethod
    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    async def exists_for_quote(self, quote_request_id: str) -> bool:
        """Indique si une réservation référence déjà ce devis."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, booking: Booking) -> Booking:
        """Persiste une nouvelle réservation ; lève une exception de conflit si le devis est déjà réservé."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, booking: Booking) -> Booking:
        raise NotImplementedError

    @abstractmethod
    async def list_filtered(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        booking_type: Optional[BookingType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Booking]:
        """Liste les réservations par date de départ croissante."""
        raise NotImplementedError

    @abstractmethod
    async def list_with_customers(self, start_date: date, end_date: date) -> List[Tuple[Booking, User]]:
        """Réservations dont le départ est dans l'intervalle, avec leur client."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, booking: Booking) -> None:
        raise NotImplementedError
