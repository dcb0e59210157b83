# backend/app/repositories/reservation_repository.py
"""
Reservation repositories for room bookings and class bookings.

Both tables share one shape, so one generic repository serves both; each
subclass only names its model and the column holding the resource id.
"""

from datetime import date
import logging
from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import ACTIVE_BOOKING_STATUSES, ReservationMixin, RoomBooking
from ..models.class_booking import ClassBooking
from .base_repository import BaseRepository

R = TypeVar("R", bound=ReservationMixin)

logger = logging.getLogger(__name__)


class ReservationRepository(BaseRepository[R]):
    """Data access shared by room and class reservations."""

    resource_column: str

    def __init__(self, db: Session, model: Type[R]):
        super().__init__(db, model)

    @property
    def _resource_attr(self) -> Any:
        return getattr(self.model, self.resource_column)

    def create(self, **kwargs: Any) -> R:
        """Create a reservation, exposing store errors the caller maps to conflicts."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, (IntegrityError, OperationalError)):
                raise exc.__cause__
            raise

    def get_active_for_resource(self, resource_id: str, booking_date: date) -> List[R]:
        """
        Reservations that still hold a slot for one resource on one date.

        Args:
            resource_id: Room or class id
            booking_date: The date to check

        Returns:
            Pending and confirmed reservations ordered by start time
        """
        query = (
            self._build_query()
            .filter(
                self._resource_attr == resource_id,
                self.model.booking_date == booking_date,
                self.model.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .order_by(self.model.start_time)
        )
        return self._execute_query(query)

    def get_owned(self, reservation_id: str, user_id: str) -> Optional[R]:
        """A reservation by id, only if it belongs to ``user_id``."""
        query = self._build_query().filter(
            self.model.id == reservation_id,
            self.model.user_id == user_id,
        )
        return self._execute_first(query)

    def list_for_user(self, user_id: str, *, limit: int, offset: int = 0) -> List[R]:
        """A user's reservations, most recent booking date first."""
        query = (
            self._build_query()
            .filter(self.model.user_id == user_id)
            .order_by(self.model.booking_date.desc(), self.model.start_time.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._execute_query(query)


class RoomBookingRepository(ReservationRepository[RoomBooking]):
    resource_column = "room_id"

    def __init__(self, db: Session):
        super().__init__(db, RoomBooking)


class ClassBookingRepository(ReservationRepository[ClassBooking]):
    resource_column = "class_id"

    def __init__(self, db: Session):
        super().__init__(db, ClassBooking)
