# backend/app/routes/v1/rooms.py
"""
Room catalog routes - API v1

Endpoints:
    GET / - Bookable rooms ordered by type
    GET /{room_id} - Room details with its image gallery
    GET /{room_id}/availability - Start and end slots for a date
"""

import asyncio
from datetime import date, time
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_availability_service, get_catalog_service
from ...core.exceptions import DomainException, ValidationException
from ...schemas._strict_base import parse_time_of_day
from ...schemas.availability import RoomAvailabilityResponse
from ...schemas.catalog import RoomDetailResponse, RoomResponse
from ...services.availability_service import AvailabilityService
from ...services.catalog_service import CatalogService
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rooms-v1"])


def _parse_start(start: Optional[str]) -> Optional[time]:
    if start is None:
        return None
    try:
        return parse_time_of_day(start)  # type: ignore[return-value]
    except ValueError as exc:
        raise ValidationException(str(exc), field="start") from exc


@router.get("", response_model=List[RoomResponse])
async def list_rooms(
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[RoomResponse]:
    try:
        rooms = await asyncio.to_thread(catalog_service.list_rooms)
        return [RoomResponse.model_validate(room) for room in rooms]
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{room_id}",
    response_model=RoomDetailResponse,
    responses={404: {"description": "Room not found"}},
)
async def get_room(
    room_id: str,
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> RoomDetailResponse:
    try:
        room = await asyncio.to_thread(catalog_service.get_room, room_id)
        return RoomDetailResponse.model_validate(room)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{room_id}/availability",
    response_model=RoomAvailabilityResponse,
    responses={404: {"description": "Room not found"}},
)
async def get_room_availability(
    room_id: str,
    target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    start: Optional[str] = Query(None, description="Chosen start slot (HH:MM) to list end slots for"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> RoomAvailabilityResponse:
    """
    Bookable slots of a room on one date.

    Pass ``start`` once the user has picked a start slot to get the end
    slots that keep the booking clear of existing reservations.
    """
    try:
        chosen_start = _parse_start(start)
        result = await asyncio.to_thread(
            availability_service.get_room_availability, room_id, target_date, chosen_start
        )
        return RoomAvailabilityResponse(**result)
    except DomainException as e:
        handle_domain_exception(e)
