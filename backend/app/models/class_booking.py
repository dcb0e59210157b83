# backend/app/models/class_booking.py
"""
Private class reservations.

The end time is always derived from the class duration at submission; the
lifecycle is the one shared with room bookings.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..database import Base
from .booking import _PAYMENT_STATUS_CHECK, _STATUS_CHECK, ReservationMixin


class ClassBooking(ReservationMixin, Base):
    __tablename__ = "class_bookings"

    class_id = Column(String(26), ForeignKey("private_classes.id"), nullable=False)

    private_class = relationship("PrivateClass", back_populates="bookings")

    __table_args__ = (
        CheckConstraint(_STATUS_CHECK, name="ck_class_bookings_status"),
        CheckConstraint(_PAYMENT_STATUS_CHECK, name="ck_class_bookings_payment_status"),
        CheckConstraint("start_time < end_time", name="ck_class_bookings_time_order"),
        CheckConstraint("total_price >= 0", name="ck_class_bookings_price_non_negative"),
        Index("ix_class_bookings_class_date", "class_id", "booking_date"),
    )

    @property
    def resource_id(self) -> str:
        return self.class_id

    def __repr__(self) -> str:
        return (
            f"<ClassBooking {self.id}: user={self.user_id}, class={self.class_id}, "
            f"date={self.booking_date}, time={self.start_time}-{self.end_time}, "
            f"status={self.status}>"
        )
