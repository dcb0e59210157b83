# backend/app/schemas/availability.py
"""Bookable slots of a room or class on one date."""

from datetime import date
from typing import List

from pydantic import Field

from .base import StandardizedModel


class RoomAvailabilityResponse(StandardizedModel):
    date: date
    slots: List[str] = Field(description="Every HH:MM slot of the opening hours")
    available_starts: List[str]
    available_ends: List[str] = Field(
        default_factory=list,
        description="End slots for the requested start; empty when no start was given",
    )


class ClassAvailabilityResponse(StandardizedModel):
    date: date
    duration_minutes: int
    slots: List[str]
    available_starts: List[str]
