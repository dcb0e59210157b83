# backend/app/models/private_class.py
"""
Private lesson offerings.

A private class has a fixed duration; clients pick only a start time and the
end time is derived from ``duration_minutes``.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class PrivateClass(Base):
    __tablename__ = "private_classes"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    instructor_name = Column(String(200), nullable=False)
    instrument = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    # Flat price of one lesson
    lesson_rate = Column(Numeric(10, 2), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    image_url = Column(Text, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bookings = relationship("ClassBooking", back_populates="private_class")

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_private_classes_duration_positive"),
        CheckConstraint("lesson_rate >= 0", name="ck_private_classes_rate_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<PrivateClass {self.id}: {self.instrument} with {self.instructor_name}>"
