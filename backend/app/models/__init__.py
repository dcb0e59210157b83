"""
Database models for the studio booking API.

- Rooms and their image galleries
- Private classes (fixed-duration lessons)
- Reservations: room bookings and class bookings
"""

from .booking import ACTIVE_BOOKING_STATUSES, BookingStatus, ReservationMixin, RoomBooking
from .class_booking import ClassBooking
from .private_class import PrivateClass
from .room import Room, RoomImage, RoomType

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "BookingStatus",
    "ClassBooking",
    "PrivateClass",
    "ReservationMixin",
    "Room",
    "RoomBooking",
    "RoomImage",
    "RoomType",
]
