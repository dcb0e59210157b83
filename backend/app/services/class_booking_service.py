# backend/app/services/class_booking_service.py
"""
Class Booking Service for the studio booking API.

Private classes have a fixed duration: the client sends only a start time and
the end time is derived from the class. The whole derived interval must be
free at submission.
"""

import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException, RepositoryException, ValidationException
from ..domain.availability import derive_end_time
from ..models.class_booking import ClassBooking
from ..repositories.catalog_repository import PrivateClassRepository
from ..repositories.reservation_repository import ClassBookingRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .reservation_service import ReservationService

if TYPE_CHECKING:
    from ..schemas.class_booking import ClassBookingCreate

logger = logging.getLogger(__name__)


class ClassBookingService(ReservationService[ClassBooking]):
    resource_type = "class"

    def __init__(
        self,
        db: Session,
        repository: Optional[ClassBookingRepository] = None,
        class_repository: Optional[PrivateClassRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        repository = repository or ClassBookingRepository(db)
        super().__init__(db, repository, conflict_checker)
        self.class_repository = class_repository or PrivateClassRepository(db)

    @BaseService.measure_operation("create_class_booking")
    def create_booking(self, user_id: str, booking_data: "ClassBookingCreate") -> ClassBooking:
        """
        Book a private class starting at ``start_time``.

        The price is the class's flat lesson rate. Unlike room bookings, a
        lesson only has to start within opening hours; it may run past closing
        as long as it ends before midnight.

        Raises:
            ValidationException: Past date, start outside opening hours, or
                the lesson would run past midnight
            NotFoundException: Class absent or not bookable
            BookingConflictException: Derived interval overlaps an active reservation
            ServiceException: Store failure
        """
        self._ensure_not_past(booking_data.booking_date)
        self.log_operation(
            "create_class_booking",
            user_id=user_id,
            class_id=booking_data.class_id,
            booking_date=booking_data.booking_date.isoformat(),
        )

        try:
            with self.transaction():
                private_class = self.class_repository.lock_for_booking(booking_data.class_id)
                if private_class is None or not private_class.is_available:
                    raise NotFoundException("Class not found", code="CLASS_NOT_FOUND")

                try:
                    end_time = derive_end_time(
                        booking_data.start_time, private_class.duration_minutes
                    )
                except ValueError as exc:
                    raise ValidationException(str(exc), field="start_time") from exc

                result = self.conflict_checker.validate_time_range(
                    booking_data.start_time, end_time
                )
                if not result["valid"]:
                    raise ValidationException(result["reason"], field=result["field"])

                self._ensure_slot_free(private_class.id, booking_data, end_time)

                booking = self._insert(
                    user_id=user_id,
                    class_id=private_class.id,
                    booking_date=booking_data.booking_date,
                    start_time=booking_data.start_time,
                    end_time=end_time,
                    total_price=private_class.lesson_rate,
                    notes=booking_data.notes,
                )
        except RepositoryException as exc:
            self._store_failure("Creating class booking", exc)

        self.logger.info(f"Class booking {booking.id} created for user {user_id}")
        return booking
