# backend/app/models/booking.py
"""
Reservation models for the studio.

Room bookings and class bookings share one shape (``ReservationMixin``) and
one lifecycle:

    pending -> confirmed -> completed
    pending | confirmed -> cancelled

Reservations are never deleted. Only ``pending`` and ``confirmed`` rows block
their time slot; on PostgreSQL an exclusion constraint created by the
migrations enforces this at the database level as well.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
import logging
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship
import ulid

from ..constants.payment_status import PaymentStatus, payment_status_after_cancel
from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Reservation lifecycle statuses."""

    PENDING = "pending"  # Created, awaiting payment receipt
    CONFIRMED = "confirmed"  # Receipt supplied, terms accepted
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

_STATUS_CHECK = "status IN ('pending', 'confirmed', 'completed', 'cancelled')"
_PAYMENT_STATUS_CHECK = "payment_status IN ('pending', 'paid', 'refunded')"


class ReservationMixin:
    """Columns and lifecycle shared by room and class reservations."""

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    # Subject claim of the identity provider token
    user_id = Column(String(64), nullable=False, index=True)

    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    payment_slip_url = Column(Text, nullable=True)
    terms_accepted = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    def __init__(self, **kwargs: Any) -> None:
        """New reservations always start pending with payment pending."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        if not self.payment_status:
            self.payment_status = PaymentStatus.PENDING.value
        if self.terms_accepted is None:
            self.terms_accepted = False

    @property
    def resource_id(self) -> str:
        raise NotImplementedError

    @property
    def is_active(self) -> bool:
        """Whether this reservation still blocks its time slot."""
        return self.status in ACTIVE_BOOKING_STATUSES

    @property
    def is_cancellable(self) -> bool:
        return self.is_active

    @property
    def accepts_payment(self) -> bool:
        return self.is_active

    def record_payment(self, receipt_ref: str) -> None:
        """Attach the receipt reference and confirm the reservation."""
        self.payment_slip_url = receipt_ref
        self.terms_accepted = True
        self.payment_status = PaymentStatus.PAID.value
        self.status = BookingStatus.CONFIRMED.value
        self.confirmed_at = datetime.now(timezone.utc)
        logger.info(f"Reservation {self.id} confirmed with payment receipt")

    def cancel(self) -> None:
        """Cancel this reservation and release its slot."""
        self.status = BookingStatus.CANCELLED.value
        self.payment_status = payment_status_after_cancel(self.payment_status)
        self.cancelled_at = datetime.now(timezone.utc)
        logger.info(f"Reservation {self.id} cancelled by user {self.user_id}")


class RoomBooking(ReservationMixin, Base):
    """A reservation of a studio room for an arbitrary slot range."""

    __tablename__ = "bookings"

    room_id = Column(String(26), ForeignKey("rooms.id"), nullable=False)
    total_hours = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    room = relationship("Room", back_populates="bookings")

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="ck_bookings_status"),
        CheckConstraint(_PAYMENT_STATUS_CHECK, name="ck_bookings_payment_status"),
        CheckConstraint("start_time < end_time", name="ck_bookings_time_order"),
        CheckConstraint("total_price >= 0", name="ck_bookings_price_non_negative"),
        CheckConstraint("total_hours > 0", name="ck_bookings_hours_positive"),
        Index("ix_bookings_room_date", "room_id", "booking_date"),
    )

    @property
    def resource_id(self) -> str:
        return self.room_id

    def __repr__(self) -> str:
        return (
            f"<RoomBooking {self.id}: user={self.user_id}, room={self.room_id}, "
            f"date={self.booking_date}, time={self.start_time}-{self.end_time}, "
            f"status={self.status}>"
        )
