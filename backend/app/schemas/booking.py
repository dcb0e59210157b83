# backend/app/schemas/booking.py
"""
Room booking schemas.

Clients send the room, the date and a slot range; hours and price are
computed server-side from the room's hourly rate.
"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..core.constants import MAX_NOTES_LENGTH, MAX_RECEIPT_REF_LENGTH
from ..models.booking import BookingStatus
from .base import Money, StandardizedModel
from ._strict_base import StrictRequestModel, ensure_date_only, parse_time_of_day


class BookingCreate(StrictRequestModel):
    """Reserve a room for ``[start_time, end_time)`` on ``booking_date``."""

    room_id: str = Field(..., min_length=1, max_length=26, description="Room to book")
    booking_date: date = Field(..., description="Date of the booking")
    start_time: time = Field(..., description="Start slot, HH:MM")
    end_time: time = Field(..., description="End slot, HH:MM")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("booking_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "booking_date")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_time_of_day(v)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def validate_time_order(self) -> "BookingCreate":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class PaymentSubmit(StrictRequestModel):
    """
    Payment confirmation for a reservation.

    ``receipt_ref`` is an opaque reference to an uploaded receipt (for
    example a storage URL). An empty receipt or ``terms_accepted=false`` is
    rejected with a 400 naming the field.
    """

    receipt_ref: str = Field(..., max_length=MAX_RECEIPT_REF_LENGTH)
    terms_accepted: bool


class ReservationResponse(StandardizedModel):
    """Fields shared by room and class reservation responses."""

    id: str
    user_id: str
    booking_date: date
    start_time: time
    end_time: time
    total_price: Money
    status: BookingStatus
    payment_status: str
    receipt_ref: Optional[str] = Field(None, validation_alias="payment_slip_url")
    terms_accepted: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)


class BookingResponse(ReservationResponse):
    room_id: str
    total_hours: Money
