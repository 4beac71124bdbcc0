from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.bookings.interfaces import AbstractBookingRepository
from searchgear.bookings.repositories import SQLAlchemyBookingRepository
from searchgear.bookings.service import BookingService
from searchgear.database import get_db_session
from searchgear.quotes.dependencies import QuoteRepositoryDep


def get_booking_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractBookingRepository:
    """Fournit une instance du repository des réservations."""
    return SQLAlchemyBookingRepository(db_session=session)


BookingRepositoryDep = Annotated[AbstractBookingRepository, Depends(get_booking_repository)]


def get_booking_service(booking_repo: BookingRepositoryDep, quote_repo: QuoteRepositoryDep) -> BookingService:
    return BookingService(booking_repo=booking_repo, quote_repo=quote_repo)


BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
