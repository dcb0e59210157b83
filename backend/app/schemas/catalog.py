# backend/app/schemas/catalog.py
"""Catalog response schemas for rooms and private classes."""

from typing import List, Optional

from pydantic import ConfigDict

from ..models.room import RoomType
from .base import Money, StandardizedModel


class RoomImageResponse(StandardizedModel):
    id: str
    image_url: str
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class RoomResponse(StandardizedModel):
    id: str
    name: str
    type: RoomType
    description: Optional[str] = None
    capacity: int
    hourly_rate: Money
    image_url: Optional[str] = None
    amenities: List[str] = []
    is_available: bool

    model_config = ConfigDict(from_attributes=True)


class RoomDetailResponse(RoomResponse):
    """A room with its gallery, ordered by display_order."""

    images: List[RoomImageResponse] = []


class PrivateClassResponse(StandardizedModel):
    id: str
    instructor_name: str
    instrument: str
    description: Optional[str] = None
    lesson_rate: Money
    duration_minutes: int
    image_url: Optional[str] = None
    is_available: bool

    model_config = ConfigDict(from_attributes=True)
