# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the studio booking API.

Handles booking conflict detection and time validation for one reservation
table (room bookings or class bookings):
- Checking if a time range conflicts with active reservations
- Listing the reservations that hold slots on a date
- Validating a time range against the studio's opening hours

The overlap decision itself lives in app.domain.availability; this service
only loads the reservations it needs.
"""

from datetime import date, time
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..domain.availability import check_overlap, to_minutes
from ..repositories.reservation_repository import ReservationRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts and time validation.

    Args:
        db: Database session
        repository: Reservation repository of the table being checked
    """

    def __init__(
        self,
        db: Session,
        repository: ReservationRepository,
        open_hour: Optional[int] = None,
        close_hour: Optional[int] = None,
    ):
        super().__init__(db)
        self.repository = repository
        self.open_hour = settings.studio_open_hour if open_hour is None else open_hour
        self.close_hour = settings.studio_close_hour if close_hour is None else close_hour

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        resource_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
    ) -> List[Dict[str, Any]]:
        """
        Reservations of ``resource_id`` whose interval overlaps ``[start_time, end_time)``.

        Returns:
            List of conflicts with reservation details
        """
        reservations = self.repository.get_active_for_resource(resource_id, check_date)
        conflicts = [
            {
                "booking_id": reservation.id,
                "start_time": reservation.start_time.isoformat(),
                "end_time": reservation.end_time.isoformat(),
                "status": reservation.status,
            }
            for reservation in reservations
            if check_overlap(resource_id, check_date, start_time, end_time, [reservation])
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for {resource_id} "
                f"on {check_date} between {start_time}-{end_time}"
            )
        return conflicts

    def check_time_conflicts(
        self,
        resource_id: str,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> bool:
        """Simplified boolean check for quick validation."""
        return bool(self.check_booking_conflicts(resource_id, booking_date, start_time, end_time))

    @BaseService.measure_operation("get_booked_times_date")
    def get_booked_times_for_date(self, resource_id: str, target_date: date) -> List[Any]:
        """Active reservations holding a slot of ``resource_id`` on ``target_date``."""
        return self.repository.get_active_for_resource(resource_id, target_date)

    def validate_time_range(self, start_time: time, end_time: time) -> Dict[str, Any]:
        """
        Validate a time range against the opening hours.

        Returns:
            ``{"valid": True, "duration_minutes": ...}`` or ``{"valid": False,
            "reason": ..., "field": ...}``
        """
        start_min = to_minutes(start_time)
        end_min = to_minutes(end_time)

        if end_min <= start_min:
            return {"valid": False, "reason": "End time must be after start time", "field": "end_time"}
        if start_min < self.open_hour * 60:
            return {
                "valid": False,
                "reason": f"Bookings start at {self.open_hour:02d}:00 at the earliest",
                "field": "start_time",
            }
        if start_min > self.close_hour * 60:
            return {
                "valid": False,
                "reason": f"Bookings must start by {self.close_hour:02d}:00",
                "field": "start_time",
            }
        return {"valid": True, "duration_minutes": end_min - start_min}

    def fits_opening_hours(self, end_time: time) -> bool:
        return to_minutes(end_time) <= self.close_hour * 60
