"""Tests for the pure availability rules shared by rooms and classes."""

from datetime import date, time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.domain.availability import (
    check_overlap,
    derive_end_time,
    filter_available_ends,
    filter_available_starts,
    generate_slots,
    intervals_overlap,
    is_blocking,
    quote_price,
    reservation_hours,
    to_minutes,
)

DAY = date(2026, 3, 14)
OTHER_DAY = date(2026, 3, 15)


def reservation(start, end, status="confirmed", on=DAY, resource_id="room-1"):
    return SimpleNamespace(
        booking_date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        status=status,
        resource_id=resource_id,
    )


@pytest.mark.unit
class TestToMinutes:
    def test_accepts_time_and_string(self) -> None:
        assert to_minutes(time(10, 30)) == 630
        assert to_minutes("10:30") == 630
        assert to_minutes("00:00") == 0
        assert to_minutes("21:30:00") == 1290

    @pytest.mark.parametrize(
        "value", ["25:00", "10:75", "ab:cd", "", "1030", "10:3", "10:30junk", "9:00", "10:30:15"]
    )
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError):
            to_minutes(value)


@pytest.mark.unit
class TestOverlap:
    def test_half_open_intervals(self) -> None:
        assert intervals_overlap(600, 660, 630, 690)
        assert not intervals_overlap(600, 660, 660, 720)
        assert not intervals_overlap(660, 720, 600, 660)

    def test_overlap_is_symmetric(self) -> None:
        pairs = [((600, 660), (630, 690)), ((600, 720), (630, 640)), ((600, 660), (660, 700))]
        for (s1, e1), (s2, e2) in pairs:
            assert intervals_overlap(s1, e1, s2, e2) == intervals_overlap(s2, e2, s1, e1)

    def test_back_to_back_is_free(self) -> None:
        existing = [reservation("10:00", "11:00")]
        assert not check_overlap("room-1", DAY, "11:00", "12:00", existing)
        assert not check_overlap("room-1", DAY, "09:00", "10:00", existing)

    def test_partial_and_containing_ranges_conflict(self) -> None:
        existing = [reservation("10:00", "11:00")]
        assert check_overlap("room-1", DAY, "10:30", "11:30", existing)
        assert check_overlap("room-1", DAY, "09:30", "10:30", existing)
        assert check_overlap("room-1", DAY, "09:00", "12:00", existing)
        assert check_overlap("room-1", DAY, "10:15", "10:45", existing)

    def test_only_active_reservations_block(self) -> None:
        assert not check_overlap(
            "room-1", DAY, "10:00", "11:00", [reservation("10:00", "11:00", status="cancelled")]
        )
        assert not check_overlap(
            "room-1", DAY, "10:00", "11:00", [reservation("10:00", "11:00", status="completed")]
        )
        assert check_overlap(
            "room-1", DAY, "10:00", "11:00", [reservation("10:00", "11:00", status="pending")]
        )

    def test_other_dates_and_resources_are_ignored(self) -> None:
        existing = [
            reservation("10:00", "11:00", on=OTHER_DAY),
            reservation("10:00", "11:00", resource_id="room-2"),
        ]
        assert not check_overlap("room-1", DAY, "10:00", "11:00", existing)
        assert check_overlap(None, DAY, "10:00", "11:00", existing)

    def test_missing_status_counts_as_active(self) -> None:
        plain = SimpleNamespace(booking_date=DAY, start_time=time(10), end_time=time(11))
        assert is_blocking(plain)
        assert check_overlap(None, DAY, "10:30", "11:30", [plain])


@pytest.mark.unit
class TestGenerateSlots:
    def test_default_opening_hours(self) -> None:
        slots = generate_slots(9, 22, 30)
        assert slots[0] == "09:00"
        assert slots[-1] == "22:00"
        assert len(slots) == 27
        assert "13:30" in slots

    def test_hourly_step(self) -> None:
        assert generate_slots(9, 12, 60) == ["09:00", "10:00", "11:00", "12:00"]

    @pytest.mark.parametrize(
        "open_hour, close_hour, step",
        [(22, 9, 30), (9, 9, 30), (9, 22, 0), (9, 22, -30), (9, 22, 45), (-1, 22, 30), (9, 24, 30)],
    )
    def test_rejects_invalid_configuration(self, open_hour: int, close_hour: int, step: int) -> None:
        with pytest.raises(ValueError):
            generate_slots(open_hour, close_hour, step)


@pytest.mark.unit
class TestStartAndEndFiltering:
    def test_starts_exclude_held_slots(self) -> None:
        slots = generate_slots(9, 13, 30)
        existing = [reservation("10:00", "11:00")]
        starts = filter_available_starts(slots, existing, DAY)
        assert "10:00" not in starts
        assert "10:30" not in starts
        assert "11:00" in starts
        assert "09:30" in starts

    def test_starts_ignore_cancelled(self) -> None:
        slots = generate_slots(9, 13, 30)
        existing = [reservation("10:00", "11:00", status="cancelled")]
        assert filter_available_starts(slots, existing, DAY) == slots

    def test_ends_stop_at_next_reservation(self) -> None:
        slots = generate_slots(9, 13, 30)
        existing = [reservation("11:00", "12:00")]
        ends = filter_available_ends(slots, "09:30", existing, DAY)
        assert ends == ["10:00", "10:30", "11:00"]

    def test_ends_are_after_start(self) -> None:
        slots = generate_slots(9, 12, 30)
        ends = filter_available_ends(slots, "10:00", [], DAY)
        assert ends == ["10:30", "11:00", "11:30", "12:00"]

    def test_ends_after_a_reservation_are_open_when_start_is_after_it(self) -> None:
        slots = generate_slots(9, 13, 30)
        existing = [reservation("09:00", "10:00")]
        ends = filter_available_ends(slots, "10:00", existing, DAY)
        assert ends[0] == "10:30"
        assert ends[-1] == "13:00"


@pytest.mark.unit
class TestDerivedTimesAndPricing:
    def test_derive_end_time(self) -> None:
        assert derive_end_time("10:00", 60) == time(11, 0)
        assert derive_end_time(time(21, 30), 45) == time(22, 15)

    def test_derive_end_time_rejects_midnight_overrun(self) -> None:
        with pytest.raises(ValueError):
            derive_end_time("23:30", 30)
        with pytest.raises(ValueError):
            derive_end_time("10:00", 0)

    def test_reservation_hours(self) -> None:
        assert reservation_hours("10:00", "12:30") == Decimal("2.50")
        assert reservation_hours("10:00", "10:30") == Decimal("0.50")
        with pytest.raises(ValueError):
            reservation_hours("11:00", "10:00")

    def test_quote_price(self) -> None:
        assert quote_price(Decimal("40.00"), Decimal("2.50")) == Decimal("100.00")
        assert quote_price(Decimal("15"), Decimal("0.50")) == Decimal("7.50")
