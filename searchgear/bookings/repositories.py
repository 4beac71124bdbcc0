import logging
from datetime import date
from typing import List, Optional, Tuple

from fastcrud import FastCRUD
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.bookings.exceptions import BookingAlreadyExistsException
from searchgear.bookings.interfaces import AbstractBookingRepository
from searchgear.bookings.models import Booking, BookingStatus, BookingType, PaymentStatus
from searchgear.users.models import User, utc_now

logger = logging.getLogger(__name__)


class SQLAlchemyBookingRepository(AbstractBookingRepository):
    """Implémentation SQLAlchemy du repository des réservations."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud = FastCRUD(Booking)

    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        return await self.db.get(Booking, booking_id)

    async def exists_for_quote(self, quote_request_id: str) -> bool:
        return await self.crud.exists(self.db, quote_request_id=quote_request_id)

    async def add(self, booking: Booking) -> Booking:
        try:
            self.db.add(booking)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"[BookingRepo] Contrainte d'unicité violée pour devis {booking.quote_request_id}: {e}")
            raise BookingAlreadyExistsException(booking.quote_request_id)
        await self.db.refresh(booking)
        logger.info(f"[BookingRepo] Réservation {booking.id} créée pour devis {booking.quote_request_id}")
        return booking

    async def save(self, booking: Booking) -> Booking:
        booking.updated_at = utc_now()
        self.db.add(booking)
        booking_id = booking.id
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[BookingRepo] Échec de l'enregistrement de {booking_id}: {e}", exc_info=True)
            raise
        await self.db.refresh(booking)
        return booking

    async def list_filtered(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        booking_type: Optional[BookingType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Booking]:
        statement = select(Booking).order_by(Booking.departure_date.asc())
        if status is not None:
            statement = statement.where(Booking.status == status)
        if payment_status is not None:
            statement = statement.where(Booking.payment_status == payment_status)
        if booking_type is not None:
            statement = statement.where(Booking.booking_type == booking_type)
        # L'intervalle ne s'applique que si les deux bornes sont fournies
        if start_date is not None and end_date is not None:
            statement = statement.where(Booking.departure_date.between(start_date, end_date))
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def list_with_customers(self, start_date: date, end_date: date) -> List[Tuple[Booking, User]]:
        statement = (
            select(Booking, User)
            .join(User, Booking.user_id == User.id)
            .where(Booking.departure_date.between(start_date, end_date))
            .order_by(Booking.departure_date.asc())
        )
        result = await self.db.execute(statement)
        return [(booking, user) for booking, user in result.all()]

    async def delete(self, booking: Booking) -> None:
        await self.db.delete(booking)
        await self.db.commit()
        logger.debug(f"[BookingRepo] Réservation {booking.id} supprimée")
