"""
Routes API des réservations (toutes réservées aux administrateurs).
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from searchgear.auth.dependencies import AdminUserDep
from searchgear.bookings.constants import (
    BOOKING_CANCELLED_MSG,
    BOOKING_CREATED_MSG,
    BOOKING_DELETED_MSG,
    BOOKING_PAID_MSG,
    BOOKING_UPDATED_MSG,
)
from searchgear.bookings.dependencies import BookingServiceDep
from searchgear.bookings.models import (
    BookingCancel,
    BookingCreate,
    BookingPaymentUpdate,
    BookingRead,
    BookingStatus,
    BookingStatusUpdate,
    BookingType,
    CalendarEvent,
    PaymentStatus,
)
from searchgear.core.exceptions import SearchGearException
from searchgear.core.schemas import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/admin/all", response_model=ApiResponse[List[BookingRead]], response_model_exclude_none=True)
async def list_bookings(
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
    booking_status: Optional[BookingStatus] = Query(default=None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(default=None, alias="paymentStatus"),
    booking_type: Optional[BookingType] = Query(default=None, alias="bookingType"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
):
    """Liste les réservations par date de départ croissante, avec filtres optionnels."""
    bookings = await booking_service.list_bookings(
        status=booking_status,
        payment_status=payment_status,
        booking_type=booking_type,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(count=len(bookings), data=bookings)


@router.get("/admin/calendar", response_model=ApiResponse[List[CalendarEvent]], response_model_exclude_none=True)
async def read_calendar_events(
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
):
    """Événements de calendrier des réservations dont le départ est dans [start, end]."""
    try:
        events = await booking_service.calendar_events(start, end)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(count=len(events), data=events)


@router.get("/admin/{booking_id}", response_model=ApiResponse[BookingRead], response_model_exclude_none=True)
async def read_booking(booking_id: str, admin_user: AdminUserDep, booking_service: BookingServiceDep):
    try:
        booking = await booking_service.get_booking(booking_id)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(data=booking)


@router.post("/admin/create", response_model=ApiResponse[BookingRead], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
async def create_booking_from_quotation(
    booking_in: BookingCreate,
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
):
    """Crée une réservation à partir d'un devis approuvé."""
    logger.info(f"API create_booking: devis {booking_in.quote_request_id} par admin {admin_user.id}")
    try:
        booking = await booking_service.create_from_quotation(booking_in, admin_user)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=BOOKING_CREATED_MSG, data=booking)


@router.patch("/admin/{booking_id}/status", response_model=ApiResponse[BookingRead], response_model_exclude_none=True)
async def update_booking_status(
    booking_id: str,
    update_in: BookingStatusUpdate,
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
):
    try:
        booking = await booking_service.update_status(booking_id, update_in)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=BOOKING_UPDATED_MSG, data=booking)


@router.patch("/admin/{booking_id}/mark-paid", response_model=ApiResponse[BookingRead],
              response_model_exclude_none=True)
async def mark_booking_as_paid(
    booking_id: str,
    payment_in: BookingPaymentUpdate,
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
):
    try:
        booking = await booking_service.mark_as_paid(booking_id, payment_in)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=BOOKING_PAID_MSG, data=booking)


@router.patch("/admin/{booking_id}/cancel", response_model=ApiResponse[BookingRead], response_model_exclude_none=True)
async def cancel_booking(
    booking_id: str,
    admin_user: AdminUserDep,
    booking_service: BookingServiceDep,
    cancel_in: Optional[BookingCancel] = None,
):
    """Annule une réservation ; 409 si elle est déjà annulée."""
    try:
        booking = await booking_service.cancel(booking_id, admin_user, reason=cancel_in.reason if cancel_in else None)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=BOOKING_CANCELLED_MSG, data=booking)


@router.delete("/admin/{booking_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_booking(booking_id: str, admin_user: AdminUserDep, booking_service: BookingServiceDep):
    try:
        await booking_service.delete_booking(booking_id, admin_user)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=BOOKING_DELETED_MSG)


bookings_router = router
