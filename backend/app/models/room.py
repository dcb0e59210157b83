# backend/app/models/room.py
"""
Room models for the studio.

Rooms are the bookable spaces (practice, recording and rehearsal rooms).
Each room may carry an ordered gallery of images.
"""

from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base
from .types import StringArrayType


class RoomType(str, Enum):
    PRACTICE = "practice"
    RECORDING = "recording"
    REHEARSAL = "rehearsal"


class Room(Base):
    """
    A bookable studio room.

    Attributes:
        id: ULID primary key
        name: Display name
        type: One of practice, recording, rehearsal
        capacity: Maximum number of people in the room
        hourly_rate: Price per hour, used to price room bookings
        amenities: Free-form amenity labels (e.g. "drum kit")
        is_available: Hidden from the catalog and not bookable when False
    """

    __tablename__ = "rooms"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False, index=True)
    description = Column(Text, nullable=True)
    capacity = Column(Integer, nullable=False, default=1)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    image_url = Column(Text, nullable=True)
    amenities = Column(StringArrayType(), nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    images = relationship(
        "RoomImage",
        back_populates="room",
        order_by="RoomImage.display_order",
        cascade="all, delete-orphan",
    )
    bookings = relationship("RoomBooking", back_populates="room")

    __table_args__ = (
        CheckConstraint(
            "type IN (" + ", ".join(f"'{t.value}'" for t in RoomType) + ")",
            name="ck_rooms_type",
        ),
        CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
        CheckConstraint("hourly_rate >= 0", name="ck_rooms_rate_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Room {self.id}: {self.name} ({self.type})>"


class RoomImage(Base):
    """Gallery image of a room, shown in ``display_order``."""

    __tablename__ = "room_images"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    room_id = Column(
        String(26), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    room = relationship("Room", back_populates="images")

    def __repr__(self) -> str:
        return f"<RoomImage {self.id}: room={self.room_id} order={self.display_order}>"
