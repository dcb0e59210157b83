# backend/app/routes/v1/bookings.py
"""
Room booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to RoomBookingService.

Endpoints:
    GET / - List the caller's room bookings
    POST / - Reserve a room for a slot range
    GET /{booking_id} - Booking details (owner only)
    POST /{booking_id}/payment - Attach payment receipt and confirm
    POST /{booking_id}/cancel - Cancel a booking
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_user_id, get_room_booking_service
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.exceptions import DomainException
from ...schemas.booking import BookingCreate, BookingResponse, PaymentSubmit
from ...services.booking_service import RoomBookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    booking_service: RoomBookingService = Depends(get_room_booking_service),
) -> List[BookingResponse]:
    """List the caller's room bookings, latest date first."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings, user_id, limit=limit, offset=offset
        )
        return [BookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid fields"},
        401: {"description": "Not authenticated"},
        404: {"description": "Room not found"},
        409: {"description": "Time slot not available"},
    },
)
async def create_booking(
    booking_data: BookingCreate,
    user_id: str = Depends(get_current_user_id),
    booking_service: RoomBookingService = Depends(get_room_booking_service),
) -> BookingResponse:
    """
    Reserve a room.

    The booking is created ``pending`` with payment ``pending``; it becomes
    ``confirmed`` once a payment receipt is attached.
    """
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, user_id, booking_data)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    booking_service: RoomBookingService = Depends(get_room_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, user_id, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/payment",
    response_model=BookingResponse,
    responses={
        400: {"description": "Receipt missing or terms not accepted"},
        404: {"description": "Booking not found"},
    },
)
async def submit_payment(
    booking_id: str,
    payment: PaymentSubmit,
    user_id: str = Depends(get_current_user_id),
    booking_service: RoomBookingService = Depends(get_room_booking_service),
) -> BookingResponse:
    """Attach the payment receipt; the booking becomes confirmed and paid."""
    try:
        booking = await asyncio.to_thread(
            booking_service.record_payment,
            user_id,
            booking_id,
            payment.receipt_ref,
            payment.terms_accepted,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    responses={
        400: {"description": "Booking can no longer be cancelled"},
        404: {"description": "Booking not found"},
    },
)
async def cancel_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    booking_service: RoomBookingService = Depends(get_room_booking_service),
) -> BookingResponse:
    """Cancel a booking and release its slot."""
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, user_id, booking_id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
