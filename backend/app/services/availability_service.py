# backend/app/services/availability_service.py
"""
Availability Service: the bookable start and end slots of a room or class
on one date, as shown by the booking form.
"""

from datetime import date, time
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import RepositoryException, ServiceException
from ..domain.availability import (
    check_overlap,
    derive_end_time,
    filter_available_ends,
    filter_available_starts,
    generate_slots,
)
from ..repositories.reservation_repository import ClassBookingRepository, RoomBookingRepository
from .base import BaseService
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    def __init__(
        self,
        db: Session,
        catalog_service: Optional[CatalogService] = None,
        room_booking_repository: Optional[RoomBookingRepository] = None,
        class_booking_repository: Optional[ClassBookingRepository] = None,
    ):
        super().__init__(db)
        self.catalog_service = catalog_service or CatalogService(db)
        self.room_booking_repository = room_booking_repository or RoomBookingRepository(db)
        self.class_booking_repository = class_booking_repository or ClassBookingRepository(db)

    def _slots(self) -> list[str]:
        return generate_slots(
            settings.studio_open_hour, settings.studio_close_hour, settings.slot_step_minutes
        )

    @BaseService.measure_operation("get_room_availability")
    def get_room_availability(
        self, room_id: str, target_date: date, start: Optional[time] = None
    ) -> Dict[str, Any]:
        """
        Slots for a room on ``target_date``.

        ``available_ends`` is only filled once a start has been chosen.
        """
        room = self.catalog_service.get_room(room_id)
        try:
            reservations = self.room_booking_repository.get_active_for_resource(room.id, target_date)
        except RepositoryException as exc:
            self.logger.error(f"Loading room availability failed: {exc}")
            raise ServiceException("Loading availability failed", code="STORE_FAILURE") from exc

        slots = self._slots()
        return {
            "date": target_date,
            "slots": slots,
            # The closing slot can only ever end a booking
            "available_starts": filter_available_starts(slots[:-1], reservations, target_date),
            "available_ends": (
                filter_available_ends(slots, start, reservations, target_date)
                if start is not None
                else []
            ),
        }

    @BaseService.measure_operation("get_class_availability")
    def get_class_availability(self, class_id: str, target_date: date) -> Dict[str, Any]:
        """Start slots whose whole lesson fits between existing class bookings."""
        private_class = self.catalog_service.get_class(class_id)
        try:
            reservations = self.class_booking_repository.get_active_for_resource(
                private_class.id, target_date
            )
        except RepositoryException as exc:
            self.logger.error(f"Loading class availability failed: {exc}")
            raise ServiceException("Loading availability failed", code="STORE_FAILURE") from exc

        slots = self._slots()
        available_starts = []
        for slot in filter_available_starts(slots, reservations, target_date):
            try:
                end = derive_end_time(slot, private_class.duration_minutes)
            except ValueError:
                continue
            if not check_overlap(private_class.id, target_date, slot, end, reservations):
                available_starts.append(slot)

        return {
            "date": target_date,
            "duration_minutes": private_class.duration_minutes,
            "slots": slots,
            "available_starts": available_starts,
        }
