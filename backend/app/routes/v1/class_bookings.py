# backend/app/routes/v1/class_bookings.py
"""
Private class booking routes - API v1

Versioned booking endpoints under /api/v1/class-bookings.
All business logic delegated to ClassBookingService.

Endpoints:
    GET / - List the caller's class bookings
    POST / - Book a lesson by start time (end derived from the class)
    GET /{booking_id} - Booking details (owner only)
    POST /{booking_id}/payment - Attach payment receipt and confirm
    POST /{booking_id}/cancel - Cancel a booking
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_class_booking_service, get_current_user_id
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.exceptions import DomainException
from ...schemas.booking import PaymentSubmit
from ...schemas.class_booking import ClassBookingCreate, ClassBookingResponse
from ...services.class_booking_service import ClassBookingService
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["class-bookings-v1"])


@router.get("", response_model=List[ClassBookingResponse])
async def list_bookings(
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    booking_service: ClassBookingService = Depends(get_class_booking_service),
) -> List[ClassBookingResponse]:
    """List the caller's class bookings, latest date first."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings, user_id, limit=limit, offset=offset
        )
        return [ClassBookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=ClassBookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid fields"},
        401: {"description": "Not authenticated"},
        404: {"description": "Class not found"},
        409: {"description": "Time slot not available"},
    },
)
async def create_booking(
    booking_data: ClassBookingCreate,
    user_id: str = Depends(get_current_user_id),
    booking_service: ClassBookingService = Depends(get_class_booking_service),
) -> ClassBookingResponse:
    """
    Book a private class.

    The booking is created ``pending`` with payment ``pending``; it becomes
    ``confirmed`` once a payment receipt is attached.
    """
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, user_id, booking_data)
        return ClassBookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{booking_id}",
    response_model=ClassBookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    booking_service: ClassBookingService = Depends(get_class_booking_service),
) -> ClassBookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, user_id, booking_id)
        return ClassBookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/payment",
    response_model=ClassBookingResponse,
    responses={
        400: {"description": "Receipt missing or terms not accepted"},
        404: {"description": "Booking not found"},
    },
)
async def submit_payment(
    booking_id: str,
    payment: PaymentSubmit,
    user_id: str = Depends(get_current_user_id),
    booking_service: ClassBookingService = Depends(get_class_booking_service),
) -> ClassBookingResponse:
    """Attach the payment receipt; the booking becomes confirmed and paid."""
    try:
        booking = await asyncio.to_thread(
            booking_service.record_payment,
            user_id,
            booking_id,
            payment.receipt_ref,
            payment.terms_accepted,
        )
        return ClassBookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/cancel",
    response_model=ClassBookingResponse,
    responses={
        400: {"description": "Booking can no longer be cancelled"},
        404: {"description": "Booking not found"},
    },
)
async def cancel_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    booking_service: ClassBookingService = Depends(get_class_booking_service),
) -> ClassBookingResponse:
    """Cancel a booking and release its slot."""
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, user_id, booking_id)
        return ClassBookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
