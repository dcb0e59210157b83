# backend/app/services/reservation_service.py
"""
Shared reservation flows: payment confirmation, cancellation and lookups.

RoomBookingService and ClassBookingService add their own creation flow on
top of this class.
"""

from datetime import date
import logging
from typing import Any, Generic, List, NoReturn, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ..core.exceptions import (
    BookingConflictException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    ValidationException,
)
from ..models.booking import ReservationMixin
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.reservation_repository import ReservationRepository
from .base import BaseService
from .conflict_checker import ConflictChecker

R = TypeVar("R", bound=ReservationMixin)

logger = logging.getLogger(__name__)

GENERIC_CONFLICT_MESSAGE = "This time slot is already booked"

# Postgres error codes a concurrent double booking can surface as
_EXCLUSION_VIOLATION = "23P01"
_DEADLOCK_DETECTED = "40P01"


def _pgcode(exc: Exception) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_slot_taken_error(exc: Exception) -> bool:
    """Whether a store error means another reservation won the slot."""
    code = _pgcode(exc)
    if code in (_EXCLUSION_VIOLATION, _DEADLOCK_DETECTED):
        return True
    message = str(exc).lower()
    return "exclusion constraint" in message or "deadlock detected" in message


class ReservationService(BaseService, Generic[R]):
    """Lifecycle operations shared by both reservation tables."""

    resource_type: str = "resource"
    repository: ReservationRepository[R]

    def __init__(
        self,
        db: Session,
        repository: ReservationRepository[R],
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        super().__init__(db)
        self.repository = repository
        self.conflict_checker = conflict_checker or ConflictChecker(db, repository)

    # Creation helpers

    @staticmethod
    def _ensure_not_past(booking_date: date) -> None:
        if booking_date < date.today():
            raise ValidationException(
                "Bookings cannot be made for past dates", field="booking_date"
            )

    def _ensure_slot_free(self, resource_id: str, booking_data: Any, end_time: Any) -> None:
        conflicts = self.conflict_checker.check_booking_conflicts(
            resource_id, booking_data.booking_date, booking_data.start_time, end_time
        )
        if conflicts:
            prometheus_metrics.inc_booking_conflict(self.resource_type, "engine")
            raise BookingConflictException(
                details={
                    "resource_id": resource_id,
                    "booking_date": booking_data.booking_date.isoformat(),
                    "start_time": booking_data.start_time.isoformat(),
                    "end_time": end_time.isoformat(),
                    "conflicts": conflicts,
                }
            )

    def _insert(self, **fields: Any) -> R:
        """Insert a reservation, mapping a lost race to a booking conflict."""
        try:
            return self.repository.create(**fields)
        except (IntegrityError, OperationalError) as exc:
            if is_slot_taken_error(exc):
                prometheus_metrics.inc_booking_conflict(self.resource_type, "database")
                self.logger.warning(f"Database rejected overlapping {self.resource_type} booking")
                raise BookingConflictException(GENERIC_CONFLICT_MESSAGE) from exc
            raise RepositoryException(f"Failed to create reservation: {exc}") from exc

    def _store_failure(self, operation: str, exc: RepositoryException) -> NoReturn:
        cause = exc.__cause__
        if isinstance(cause, OperationalError) and is_slot_taken_error(cause):
            prometheus_metrics.inc_booking_conflict(self.resource_type, "database")
            raise BookingConflictException(GENERIC_CONFLICT_MESSAGE) from exc
        self.logger.error(f"{operation} failed: {exc}")
        raise ServiceException(f"{operation} failed", code="STORE_FAILURE") from exc

    # Shared lifecycle

    @staticmethod
    def _validate_payment(receipt_ref: Optional[str], terms_accepted: bool) -> str:
        receipt = (receipt_ref or "").strip()
        if not receipt:
            raise ValidationException("A payment receipt is required", field="receipt_ref")
        if not terms_accepted:
            raise ValidationException(
                "The terms and conditions must be accepted", field="terms_accepted"
            )
        return receipt

    def _get_owned_or_404(self, reservation_id: str, user_id: str) -> R:
        reservation = self.repository.get_owned(reservation_id, user_id)
        if reservation is None:
            # Reservations of other users look exactly like missing ones
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return reservation

    @BaseService.measure_operation("record_payment")
    def record_payment(
        self,
        user_id: str,
        reservation_id: str,
        receipt_ref: Optional[str],
        terms_accepted: bool,
    ) -> R:
        """
        Attach a payment receipt and confirm the reservation.

        Raises:
            ValidationException: Receipt missing, terms not accepted, or the
                reservation is no longer pending/confirmed
            NotFoundException: Reservation absent or owned by someone else
            ServiceException: Store failure
        """
        receipt = self._validate_payment(receipt_ref, terms_accepted)
        self.log_operation("record_payment", user_id=user_id, booking_id=reservation_id)

        try:
            with self.transaction():
                reservation = self._get_owned_or_404(reservation_id, user_id)
                if not reservation.accepts_payment:
                    raise ValidationException(
                        f"A {reservation.status} booking cannot be paid",
                        field="status",
                        code="BOOKING_NOT_PAYABLE",
                    )
                reservation.record_payment(receipt)
                self.repository.flush()
        except RepositoryException as exc:
            self._store_failure("Recording payment", exc)
        return reservation

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, user_id: str, reservation_id: str) -> R:
        """Cancel an owned reservation; its slot becomes bookable again."""
        self.log_operation("cancel_booking", user_id=user_id, booking_id=reservation_id)
        try:
            with self.transaction():
                reservation = self._get_owned_or_404(reservation_id, user_id)
                if not reservation.is_cancellable:
                    raise ValidationException(
                        f"A {reservation.status} booking cannot be cancelled",
                        field="status",
                        code="BOOKING_NOT_CANCELLABLE",
                    )
                reservation.cancel()
                self.repository.flush()
        except RepositoryException as exc:
            self._store_failure("Cancelling booking", exc)
        return reservation

    @BaseService.measure_operation("get_booking")
    def get_booking(self, user_id: str, reservation_id: str) -> R:
        try:
            return self._get_owned_or_404(reservation_id, user_id)
        except RepositoryException as exc:
            self._store_failure("Loading booking", exc)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, user_id: str, limit: int = DEFAULT_QUERY_LIMIT, offset: int = 0
    ) -> List[R]:
        limit = max(1, min(limit, MAX_QUERY_LIMIT))
        try:
            return self.repository.list_for_user(user_id, limit=limit, offset=max(0, offset))
        except RepositoryException as exc:
            self._store_failure("Listing bookings", exc)
