# backend/app/services/booking_service.py
"""
Room Booking Service for the studio booking API.

Creates room reservations for an arbitrary slot range. The check-and-insert
runs in one transaction holding a row lock on the room, so two concurrent
requests for the same slot cannot both succeed. On PostgreSQL the
``bookings_no_overlap_per_room`` exclusion constraint backs this up.
"""

import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, RepositoryException, ValidationException
from ..domain.availability import quote_price, reservation_hours
from ..models.booking import RoomBooking
from ..repositories.catalog_repository import RoomRepository
from ..repositories.reservation_repository import RoomBookingRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .reservation_service import ReservationService

if TYPE_CHECKING:
    from ..schemas.booking import BookingCreate

logger = logging.getLogger(__name__)


class RoomBookingService(ReservationService[RoomBooking]):
    """Room bookings: create, pay, cancel, list."""

    resource_type = "room"

    def __init__(
        self,
        db: Session,
        repository: Optional[RoomBookingRepository] = None,
        room_repository: Optional[RoomRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        repository = repository or RoomBookingRepository(db)
        super().__init__(db, repository, conflict_checker)
        self.room_repository = room_repository or RoomRepository(db)

    def _validate_request(self, booking_data: "BookingCreate") -> None:
        self._ensure_not_past(booking_data.booking_date)
        result = self.conflict_checker.validate_time_range(
            booking_data.start_time, booking_data.end_time
        )
        if not result["valid"]:
            raise ValidationException(result["reason"], field=result["field"])
        if not self.conflict_checker.fits_opening_hours(booking_data.end_time):
            raise ValidationException(
                f"Bookings must end by {self.conflict_checker.close_hour:02d}:00",
                field="end_time",
            )

    @BaseService.measure_operation("create_booking")
    def create_booking(self, user_id: str, booking_data: "BookingCreate") -> RoomBooking:
        """
        Reserve a room for ``[start_time, end_time)`` on ``booking_date``.

        The reservation starts ``pending`` with payment ``pending``; price and
        hours are computed from the room's hourly rate.

        Raises:
            ValidationException: Past date, time range invalid or outside opening
                hours
            NotFoundException: Room absent or not bookable
            BookingConflictException: Range overlaps an active reservation
            ServiceException: Store failure
        """
        self._validate_request(booking_data)
        self.log_operation(
            "create_booking",
            user_id=user_id,
            room_id=booking_data.room_id,
            booking_date=booking_data.booking_date.isoformat(),
        )

        try:
            with self.transaction():
                room = self.room_repository.lock_for_booking(booking_data.room_id)
                if room is None or not room.is_available:
                    raise NotFoundException("Room not found", code="ROOM_NOT_FOUND")

                self._ensure_slot_free(room.id, booking_data, booking_data.end_time)

                hours = reservation_hours(booking_data.start_time, booking_data.end_time)
                booking = self._insert(
                    user_id=user_id,
                    room_id=room.id,
                    booking_date=booking_data.booking_date,
                    start_time=booking_data.start_time,
                    end_time=booking_data.end_time,
                    total_hours=hours,
                    total_price=quote_price(room.hourly_rate, hours),
                    notes=booking_data.notes,
                )
        except RepositoryException as exc:
            self._store_failure("Creating room booking", exc)

        self.logger.info(f"Room booking {booking.id} created for user {user_id}")
        return booking
