# backend/app/schemas/class_booking.py
"""
Private class booking schemas.

Only a start time is accepted; the end time comes from the class duration.
"""

from datetime import date, time
from typing import Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH
from ._strict_base import StrictRequestModel, ensure_date_only, parse_time_of_day
from .booking import ReservationResponse


class ClassBookingCreate(StrictRequestModel):
    class_id: str = Field(..., min_length=1, max_length=26, description="Private class to book")
    booking_date: date = Field(..., description="Date of the lesson")
    start_time: time = Field(..., description="Start slot, HH:MM")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("booking_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "booking_date")

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_time_of_day(v)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ClassBookingResponse(ReservationResponse):
    class_id: str
