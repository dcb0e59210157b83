# backend/app/repositories/__init__.py
"""
Repository layer for data access, separating business logic from queries.

Usage:
    from app.repositories import RoomBookingRepository

    repo = RoomBookingRepository(db)
    taken = repo.get_active_for_resource(room_id, booking_date)
"""

from .base_repository import BaseRepository
from .catalog_repository import PrivateClassRepository, RoomRepository
from .reservation_repository import (
    ClassBookingRepository,
    ReservationRepository,
    RoomBookingRepository,
)

__all__ = [
    "BaseRepository",
    "ClassBookingRepository",
    "PrivateClassRepository",
    "ReservationRepository",
    "RoomBookingRepository",
    "RoomRepository",
]
