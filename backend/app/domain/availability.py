"""Availability rules shared by room and class bookings.

Everything here is pure: callers pass the reservations they loaded and get a
decision back. Intervals are half-open, ``[start, end)``, so back-to-back
reservations never overlap.

Reservations are duck-typed. Anything with ``booking_date``, ``start_time``
and ``end_time`` works; ``resource_id`` and ``status`` are honoured when
present.
"""

from __future__ import annotations

from datetime import date, time
from decimal import ROUND_HALF_UP, Decimal
import re
from typing import Iterable, Optional, Protocol, Sequence, Union

ACTIVE_STATUSES = frozenset({"pending", "confirmed"})

MINUTES_PER_DAY = 24 * 60

TimeLike = Union[time, str]

# "HH:MM", optionally with zero seconds
_SLOT_REGEX = re.compile(r"([01]\d|2[0-3]):([0-5]\d)(?::00)?")


class Reservation(Protocol):
    booking_date: date
    start_time: time
    end_time: time


def to_minutes(value: TimeLike) -> int:
    """Minutes since midnight for a ``time`` or an ``"HH:MM"`` string."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    match = _SLOT_REGEX.fullmatch(value)
    if match is None:
        raise ValueError(f"Invalid time of day: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_slot(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _status_value(reservation: object) -> Optional[str]:
    status = getattr(reservation, "status", None)
    # str enums hash by member name, so compare on the raw value
    return getattr(status, "value", status)


def is_blocking(reservation: object) -> bool:
    """Whether a reservation still holds its slot."""
    status = _status_value(reservation)
    return status is None or status in ACTIVE_STATUSES


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    return start1 < end2 and start2 < end1


def _blocking_on(
    existing_reservations: Iterable[Reservation], on_date: date
) -> list[tuple[int, int]]:
    return [
        (to_minutes(r.start_time), to_minutes(r.end_time))
        for r in existing_reservations
        if r.booking_date == on_date and is_blocking(r)
    ]


def check_overlap(
    resource_id: Optional[str],
    on_date: date,
    start: TimeLike,
    end: TimeLike,
    existing_reservations: Iterable[Reservation],
) -> bool:
    """
    Return True if ``[start, end)`` overlaps an active reservation.

    Only reservations of ``resource_id`` on ``on_date`` count. Pass
    ``resource_id=None`` when the list is already scoped to one resource.
    """
    start_min = to_minutes(start)
    end_min = to_minutes(end)
    scoped = [
        r
        for r in existing_reservations
        if resource_id is None or getattr(r, "resource_id", resource_id) == resource_id
    ]
    return any(
        intervals_overlap(start_min, end_min, existing_start, existing_end)
        for existing_start, existing_end in _blocking_on(scoped, on_date)
    )


def generate_slots(open_hour: int, close_hour: int, step_minutes: int) -> list[str]:
    """
    Enumerate ``"HH:MM"`` slots from opening to closing time, both inclusive.

    >>> generate_slots(9, 11, 30)
    ['09:00', '09:30', '10:00', '10:30', '11:00']
    """
    if not (0 <= open_hour <= 23 and 0 <= close_hour <= 23):
        raise ValueError("open_hour and close_hour must be between 0 and 23")
    if open_hour >= close_hour:
        raise ValueError("open_hour must be before close_hour")
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    span = (close_hour - open_hour) * 60
    if span % step_minutes != 0:
        raise ValueError("step_minutes must divide the opening hours evenly")

    first = open_hour * 60
    return [format_slot(first + offset) for offset in range(0, span + 1, step_minutes)]


def filter_available_starts(
    slots: Sequence[str], existing_reservations: Iterable[Reservation], on_date: date
) -> list[str]:
    """Keep the slots no active reservation on ``on_date`` is holding."""
    blocked = _blocking_on(existing_reservations, on_date)
    available = []
    for slot in slots:
        minute = to_minutes(slot)
        if not any(start <= minute < end for start, end in blocked):
            available.append(slot)
    return available


def filter_available_ends(
    slots: Sequence[str],
    chosen_start: TimeLike,
    existing_reservations: Iterable[Reservation],
    on_date: date,
) -> list[str]:
    """
    Keep the slots that can end a reservation beginning at ``chosen_start``.

    A slot qualifies when it is after the start and ``[chosen_start, slot)``
    overlaps no active reservation. Ending exactly when another reservation
    starts is allowed; ending inside one, or past one, is not.
    """
    start_min = to_minutes(chosen_start)
    blocked = _blocking_on(existing_reservations, on_date)
    available = []
    for slot in slots:
        minute = to_minutes(slot)
        if minute <= start_min:
            continue
        if any(intervals_overlap(start_min, minute, start, end) for start, end in blocked):
            continue
        available.append(slot)
    return available


def derive_end_time(start: TimeLike, duration_minutes: int) -> time:
    """End time of a fixed-duration reservation; it must finish before midnight."""
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")
    end = to_minutes(start) + duration_minutes
    if end >= MINUTES_PER_DAY:
        raise ValueError("Reservation would run past midnight")
    return time(end // 60, end % 60)


def reservation_hours(start: TimeLike, end: TimeLike) -> Decimal:
    """Length of ``[start, end)`` in hours, to two decimals."""
    minutes = to_minutes(end) - to_minutes(start)
    if minutes <= 0:
        raise ValueError("end must be after start")
    return (Decimal(minutes) / Decimal(60)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def quote_price(rate: Decimal, hours: Decimal) -> Decimal:
    return (Decimal(rate) * Decimal(hours)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
